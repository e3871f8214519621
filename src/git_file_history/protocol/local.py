"""In-process wiring of a display session to a host session."""

from git_file_history.core.pagination import PaginationEngine
from git_file_history.protocol.display import DisplaySession
from git_file_history.protocol.host import HostSession


class LocalChannel:
    """Connects both protocol ends directly, without a transport.

    Messages are delivered synchronously, so every ``loadMore`` has been
    answered by the time the call that sent it returns.
    """

    def __init__(self, engine: PaginationEngine, file_path: str):
        self.host = HostSession(engine, file_path, self._to_display)
        self.display = DisplaySession(self._to_host)

    def _to_host(self, message) -> None:
        self.host.receive(message)

    def _to_display(self, message) -> None:
        self.display.receive(message)

    def open(self) -> DisplaySession:
        """Run the handshake and return the display session."""
        self.host.start()
        self.display.start()
        return self.display

    def close(self) -> None:
        """Tear down the host session and release the engine's backend."""
        self.host.close()
        self.host.engine.backend.close()

    def __enter__(self) -> DisplaySession:
        return self.open()

    def __exit__(self, *exc_info):
        self.close()
