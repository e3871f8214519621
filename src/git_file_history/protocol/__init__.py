"""Host/display message protocol."""

from .codec import decode_message, encode_message, message_to_dict
from .display import DisplaySession, DisplayStatus
from .host import HostSession, HostState
from .local import LocalChannel
from .transport import JsonLinesWriter, read_messages, serve_stdio

__all__ = [
    "DisplaySession",
    "DisplayStatus",
    "HostSession",
    "HostState",
    "JsonLinesWriter",
    "LocalChannel",
    "decode_message",
    "encode_message",
    "message_to_dict",
    "read_messages",
    "serve_stdio",
]
