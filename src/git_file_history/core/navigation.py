"""Display-side navigation over the loaded commit sequence."""

from typing import List, Optional, Tuple

from git_file_history.models.commit import Commit, Page

# Prefetch once the position is this many entries from the end.
LOOKAHEAD = 4
# Or once a scrolled list is this close to its end, in pixels.
SCROLL_THRESHOLD_PX = 200


class NavigationController:
    """Tracks the commits received so far and the diff being viewed.

    ``commits`` is newest first and only grows. The diff at ``current_index``
    compares ``commits[current_index + 1]`` (older) with
    ``commits[current_index]`` (newer).
    """

    def __init__(self):
        self.commits: List[Commit] = []
        self.current_index = 0
        self.has_more = True
        self.in_flight = False

    @property
    def cursor(self) -> Optional[str]:
        """Hash of the oldest loaded commit, the ``before`` of the next request."""
        return self.commits[-1].hash if self.commits else None

    @property
    def has_diff(self) -> bool:
        return len(self.commits) >= 2

    @property
    def last_index(self) -> int:
        """Highest index that still has an older commit to diff against."""
        return max(len(self.commits) - 2, 0)

    def current_pair(self) -> Optional[Tuple[Commit, Commit]]:
        """Return ``(newer, older)`` for the current diff, or None if history is too short."""
        if not self.has_diff:
            return None
        return self.commits[self.current_index], self.commits[self.current_index + 1]

    def append(self, page: Page) -> None:
        """Append a received page; the current position is left untouched."""
        self.commits.extend(page.commits)
        self.has_more = page.has_more
        self.in_flight = False

    def fail(self) -> None:
        """A request failed; already-loaded commits stay valid."""
        self.in_flight = False

    def can_load_more(self) -> bool:
        return self.has_more and not self.in_flight

    def begin_request(self) -> Optional[str]:
        """Mark a request in flight and return its ``before`` cursor."""
        self.in_flight = True
        return self.cursor

    def should_prefetch(self) -> bool:
        """Whether the position is within the lookahead window of the end."""
        if not self.can_load_more():
            return False
        return self.current_index >= len(self.commits) - LOOKAHEAD

    def should_prefetch_on_scroll(
        self, scroll_left: float, scroll_width: float, client_width: float
    ) -> bool:
        """Whether a scrollable list has been scrolled near its end."""
        if not self.can_load_more():
            return False
        return scroll_width - scroll_left - client_width < SCROLL_THRESHOLD_PX

    def select(self, index: int) -> int:
        """Jump to ``index``, clamped to the range of diffable positions."""
        self.current_index = min(max(index, 0), self.last_index)
        return self.current_index

    def next(self) -> int:
        """Move to the next older diff."""
        return self.select(self.current_index + 1)

    def previous(self) -> int:
        """Move to the next newer diff."""
        return self.select(self.current_index - 1)
