"""Error taxonomy for history retrieval and the host/display protocol."""

from typing import Optional


class HistoryError(Exception):
    """Base class for every failure surfaced to the display as ``error``."""

    retryable = False


class BackendUnavailable(HistoryError):
    """The version-control process or remote API could not be reached."""

    retryable = True


class PathNotFound(HistoryError):
    """The tracked path has no history."""

    def __init__(self, path: str):
        super().__init__(f"No history found for {path}")
        self.path = path


class ContentUnavailable(HistoryError):
    """The blob for one selected revision could not be retrieved."""

    retryable = True

    def __init__(self, path: str, revision: str, reason: Optional[str] = None):
        message = f"Could not read {path} at {revision}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
        self.revision = revision


class ContentTooLarge(HistoryError):
    """A revision's content exceeds the per-fetch size limit."""

    def __init__(self, revision: str, size: int, limit: int):
        super().__init__(
            f"Content at {revision} is {size} bytes, exceeding the {limit} byte limit"
        )
        self.revision = revision
        self.size = size
        self.limit = limit


class ProtocolViolation(HistoryError):
    """A message broke the host/display protocol contract."""


class InvalidRequest(HistoryError):
    """A page request with invalid arguments."""


class ConfigError(HistoryError):
    """The configuration file could not be loaded."""
