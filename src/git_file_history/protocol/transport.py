"""JSON-lines transport: one message per line over a pair of text streams."""

import logging
import sys
import threading
from typing import Iterator, Optional, TextIO

from git_file_history.core.errors import ProtocolViolation
from git_file_history.core.pagination import PaginationEngine
from git_file_history.models.messages import Message
from git_file_history.protocol.codec import decode_message, encode_message
from git_file_history.protocol.host import HostSession

logger = logging.getLogger(__name__)


def read_messages(stream: TextIO) -> Iterator[Message]:
    """Yield decoded messages from ``stream``, skipping malformed lines."""
    for line in stream:
        line = line.strip()
        if not line:
            continue
        try:
            yield decode_message(line)
        except ProtocolViolation as e:
            logger.warning("Dropping malformed message: %s", e)


class JsonLinesWriter:
    """Thread-safe message sink writing one JSON object per line."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._lock = threading.Lock()

    def __call__(self, message: Message) -> None:
        line = encode_message(message)
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()


def serve_stdio(
    engine: PaginationEngine,
    file_path: str,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Run a host session over JSON lines until the input stream ends.

    Responses for requests already received are delivered before returning;
    an interrupt abandons them.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    session = HostSession(engine, file_path, JsonLinesWriter(stdout), background=True)
    session.start()
    logger.debug("Serving history for %s", file_path)
    try:
        for message in read_messages(stdin):
            session.receive(message)
    except KeyboardInterrupt:
        session.close(abandon=True)
        raise
    session.close(abandon=False)
