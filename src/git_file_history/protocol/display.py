"""Display side of the history protocol."""

import logging
from enum import Enum
from typing import Callable, Optional

from git_file_history.core.errors import ProtocolViolation
from git_file_history.core.navigation import NavigationController
from git_file_history.models.commit import Page
from git_file_history.models.messages import (
    CommitsMessage,
    ErrorMessage,
    InitMessage,
    LoadMoreMessage,
    Message,
    ReadyMessage,
)

logger = logging.getLogger(__name__)


class DisplayStatus(str, Enum):
    CONNECTING = "connecting"
    LOADING = "loading"
    ERROR = "error"
    NOT_ENOUGH_HISTORY = "not_enough_history"
    READY = "ready"


class DisplaySession:
    """Turns host responses and user navigation into session state.

    The in-flight flag on the navigation controller guarantees at most one
    outstanding ``loadMore``.
    """

    def __init__(self, post_message: Callable[[Message], None]):
        self.post_message = post_message
        self.navigation = NavigationController()
        self.file_path: Optional[str] = None
        self.file_name: Optional[str] = None
        self.error: Optional[str] = None
        self._last_request: Optional[LoadMoreMessage] = None

    @property
    def commits(self):
        return self.navigation.commits

    @property
    def status(self) -> DisplayStatus:
        """Overall view state. Loaded diffs stay viewable after a failed page;
        ``error`` then carries the failure."""
        if self.error is not None and not self.navigation.has_diff:
            return DisplayStatus.ERROR
        if self.file_name is None:
            return DisplayStatus.CONNECTING
        if self.navigation.has_diff:
            return DisplayStatus.READY
        if self.navigation.in_flight or self.navigation.has_more:
            return DisplayStatus.LOADING
        return DisplayStatus.NOT_ENOUGH_HISTORY

    def start(self) -> None:
        """Announce that the surface is ready to receive messages."""
        self.post_message(ReadyMessage())

    def receive(self, message: Message) -> None:
        """Handle one message from the host."""
        if isinstance(message, InitMessage):
            self.file_path = message.file_path
            self.file_name = message.file_name
            if not self.navigation.commits and not self.navigation.in_flight:
                self.request_more()
        elif isinstance(message, CommitsMessage):
            self._handle_commits(message)
        elif isinstance(message, ErrorMessage):
            if not self.navigation.in_flight:
                logger.warning("Error received with no outstanding request")
            self.navigation.fail()
            self.error = message.message
        else:
            logger.warning(
                "%s", ProtocolViolation(f"Unexpected {message.type!r} message from host")
            )

    def request_more(self) -> bool:
        """Send ``loadMore`` for the page after the oldest loaded commit.

        Returns:
            True if a request was sent
        """
        if not self.navigation.can_load_more():
            return False
        request = LoadMoreMessage(before=self.navigation.begin_request())
        self._last_request = request
        self.post_message(request)
        return True

    def retry(self) -> bool:
        """Re-send the last ``loadMore`` after an error."""
        if self._last_request is None or self.navigation.in_flight:
            return False
        self.error = None
        self.navigation.in_flight = True
        self.post_message(self._last_request)
        return True

    def next(self) -> int:
        index = self.navigation.next()
        self._maybe_prefetch()
        return index

    def previous(self) -> int:
        return self.navigation.previous()

    def select(self, index: int) -> int:
        index = self.navigation.select(index)
        self._maybe_prefetch()
        return index

    def scrolled(self, scroll_left: float, scroll_width: float, client_width: float) -> bool:
        """Prefetch when the carousel is scrolled near its end."""
        if self.navigation.should_prefetch_on_scroll(scroll_left, scroll_width, client_width):
            return self.request_more()
        return False

    def _maybe_prefetch(self) -> None:
        # After a failure only an explicit retry asks again.
        if self.error is None and self.navigation.should_prefetch():
            self.request_more()

    def _handle_commits(self, message: CommitsMessage) -> None:
        if not self.navigation.in_flight:
            logger.warning(
                "%s", ProtocolViolation("commits received with no outstanding request")
            )
            return
        self.error = None
        self.navigation.append(Page(commits=message.commits, has_more=message.has_more))
        # A page too short to diff is followed up right away.
        if not self.navigation.has_diff:
            self.request_more()
        else:
            self._maybe_prefetch()
