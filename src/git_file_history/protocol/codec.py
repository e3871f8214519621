"""JSON wire codec for host/display messages."""

import json
from typing import Annotated, Any, Dict, Union

from pydantic import Field, TypeAdapter, ValidationError

from git_file_history.core.errors import ProtocolViolation
from git_file_history.models.messages import Message

_MESSAGE_ADAPTER: TypeAdapter = TypeAdapter(
    Annotated[Message, Field(discriminator="type")]
)


def decode_message(data: Union[str, bytes, Dict[str, Any]]) -> Message:
    """Parse a wire message (JSON text or an already-decoded object).

    Raises:
        ProtocolViolation: The payload is not a well-formed message
    """
    try:
        if isinstance(data, (str, bytes)):
            return _MESSAGE_ADAPTER.validate_json(data)
        return _MESSAGE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ProtocolViolation(f"Malformed message: {e}") from e


def message_to_dict(message: Message) -> Dict[str, Any]:
    """Wire representation of ``message`` using the protocol's field names."""
    return message.model_dump(by_alias=True)


def encode_message(message: Message) -> str:
    """Serialize ``message`` as compact JSON."""
    return json.dumps(message_to_dict(message), separators=(",", ":"), ensure_ascii=False)
