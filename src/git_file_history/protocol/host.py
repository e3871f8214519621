"""Host side of the history protocol.

The host owns the pagination engine. It answers ``ready`` with ``init`` and
every ``loadMore`` with exactly one ``commits`` or ``error`` message. The
display surface is expected to keep at most one ``loadMore`` outstanding;
the host logs violations of that rule but still answers every request, in
arrival order.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from git_file_history.core.errors import HistoryError, ProtocolViolation
from git_file_history.core.pagination import PaginationEngine
from git_file_history.models.messages import (
    CommitsMessage,
    ErrorMessage,
    InitMessage,
    LoadMoreMessage,
    Message,
    ReadyMessage,
)

logger = logging.getLogger(__name__)

PostMessage = Callable[[Message], None]


class HostState(str, Enum):
    UNINITIALIZED = "uninitialized"
    AWAITING_READY = "awaiting_ready"
    IDLE = "idle"
    AWAITING_PAGE = "awaiting_page"
    ERROR = "error"


class HostSession:
    """Protocol state machine for one history view.

    Args:
        engine: Pagination engine serving this view's file
        file_path: Path of the tracked file
        post_message: Callable delivering messages to the display surface
        background: Serve pages on a worker thread instead of inside
            ``receive``
    """

    def __init__(
        self,
        engine: PaginationEngine,
        file_path: str,
        post_message: PostMessage,
        background: bool = False,
    ):
        self.engine = engine
        self.file_path = str(file_path)
        self.file_name = Path(self.file_path).name
        self.post_message = post_message
        self.state = HostState.UNINITIALIZED
        self.closed = False

        self._lock = threading.Lock()
        self._outstanding = 0
        self._deferred: List[LoadMoreMessage] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        if background:
            # A single worker keeps responses in request order.
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="history-host"
            )

    def start(self) -> None:
        """Begin waiting for the display surface's ``ready``."""
        if self.state == HostState.UNINITIALIZED:
            self.state = HostState.AWAITING_READY

    def receive(self, message: Message) -> None:
        """Handle one message from the display surface."""
        if self.closed:
            logger.debug("Ignoring %s after close", message.type)
            return
        if self.state == HostState.UNINITIALIZED:
            self.start()

        if isinstance(message, ReadyMessage):
            self._handle_ready()
        elif isinstance(message, LoadMoreMessage):
            self._handle_load_more(message)
        else:
            logger.warning(
                "%s", ProtocolViolation(f"Unexpected {message.type!r} message from display")
            )

    def close(self, abandon: bool = True) -> None:
        """Tear down the session.

        With ``abandon`` set, in-flight pages are not awaited and their
        results are dropped. Otherwise queued pages are served first.
        """
        if self._executor is not None and not abandon:
            self._executor.shutdown(wait=True)
        self.closed = True
        if self._executor is not None and abandon:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _handle_ready(self) -> None:
        if self.state != HostState.AWAITING_READY:
            logger.warning("Display sent ready more than once; re-sending init")
        else:
            self.state = HostState.IDLE

        self._post(InitMessage(file_path=self.file_path, file_name=self.file_name))

        deferred, self._deferred = self._deferred, []
        for request in deferred:
            logger.debug("Serving loadMore received before ready")
            self._handle_load_more(request)

    def _handle_load_more(self, request: LoadMoreMessage) -> None:
        if self.state == HostState.AWAITING_READY:
            # Answered once init has been sent.
            self._deferred.append(request)
            return

        with self._lock:
            if self._outstanding:
                logger.warning(
                    "%s",
                    ProtocolViolation(
                        f"loadMore(before={request.before}) while "
                        f"{self._outstanding} request(s) outstanding"
                    ),
                )
            self._outstanding += 1
            self.state = HostState.AWAITING_PAGE

        if self._executor is not None:
            self._executor.submit(self._serve, request)
        else:
            self._serve(request)

    def _serve(self, request: LoadMoreMessage) -> None:
        failed = False
        try:
            page = self.engine.fetch_page(self.file_path, cursor=request.before)
            response: Message = CommitsMessage(
                commits=page.commits, has_more=page.has_more
            )
            logger.debug(
                "Serving %d commits for %s (has_more=%s)",
                len(page.commits),
                self.file_name,
                page.has_more,
            )
        except HistoryError as e:
            failed = True
            logger.error("Failed to load history for %s: %s", self.file_path, e)
            response = ErrorMessage(message=str(e))
        except Exception as e:
            failed = True
            logger.exception("Unexpected failure loading history for %s", self.file_path)
            response = ErrorMessage(message=str(e) or "Unknown error")

        with self._lock:
            self._outstanding -= 1
            if self.closed:
                logger.debug("Dropping response for closed session")
                return
            if failed:
                self.state = HostState.ERROR
            elif self._outstanding == 0:
                self.state = HostState.IDLE

        self._post(response)

    def _post(self, message: Message) -> None:
        self.post_message(message)
