"""Backend adapter interface shared by every history source."""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from typing import List, NamedTuple, Optional

from git_file_history.core.errors import (
    ContentTooLarge,
    ContentUnavailable,
    InvalidRequest,
    PathNotFound,
)
from git_file_history.models.commit import Commit, Page

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
DEFAULT_TIMEOUT = 30.0


class BackendKind(str, Enum):
    """Source of commit history."""

    CLI = "cli"
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class LogEntry(NamedTuple):
    """Commit metadata as listed by a backend, before content is attached."""

    hash: str
    author: str
    date: str
    message: str


class BackendAdapter(ABC):
    """Uniform access to the history of one path.

    Subclasses only list revisions and read blobs. Cursor exclusivity, the
    over-fetch-by-one ``has_more`` detection and the concurrent content fan
    out live here so every backend pages identically.
    """

    kind: BackendKind

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        max_content_bytes: Optional[int] = None,
    ):
        self.max_workers = max(1, max_workers)
        self.timeout = timeout
        self.max_content_bytes = max_content_bytes

    @abstractmethod
    def list_revisions(
        self, path: str, count: int, start: Optional[str] = None
    ) -> List[LogEntry]:
        """List up to ``count`` revisions touching ``path``, newest first.

        Args:
            path: Tracked file path
            count: Maximum number of entries to return
            start: Revision to start from (inclusive), or None for the head

        Returns:
            Metadata entries in backend history order
        """

    @abstractmethod
    def read_blob(self, path: str, revision: str) -> Optional[bytes]:
        """Return the raw file bytes at ``revision``, or None if the path is absent."""

    def read_content(self, path: str, revision: str) -> Optional[str]:
        """Decoded file content at ``revision``, or None if the path is absent.

        The size limit applies to the stored bytes, before decoding.

        Raises:
            ContentTooLarge: The blob exceeds ``max_content_bytes``
        """
        data = self.read_blob(path, revision)
        if data is None:
            return None
        if self.max_content_bytes is not None and len(data) > self.max_content_bytes:
            raise ContentTooLarge(revision, len(data), self.max_content_bytes)
        return data.decode("utf-8", errors="replace")

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def fetch_window(
        self, path: str, limit: int, cursor: Optional[str] = None
    ) -> Page:
        """Fetch at most ``limit`` commits strictly older than ``cursor``.

        Args:
            path: Tracked file path
            limit: Maximum number of commits in the page (>= 1)
            cursor: Hash of the oldest commit already seen, or None to start
                at the most recent revision

        Returns:
            Page of commits with content, newest first

        Raises:
            PathNotFound: The path has no history at all
            BackendUnavailable: Listing revisions failed
            ContentUnavailable: A selected revision's content could not be read
        """
        if limit < 1:
            raise InvalidRequest(f"limit must be at least 1, got {limit}")

        # One extra entry reveals whether another page exists.
        wanted = limit + 1
        if cursor is None:
            entries = self.list_revisions(path, wanted)
        else:
            # Listing starts at the cursor itself, which is then dropped.
            entries = self.list_revisions(path, wanted + 1, cursor)
            if entries and entries[0].hash.startswith(cursor):
                entries = entries[1:]
            entries = entries[:wanted]

        if cursor is None and not entries:
            raise PathNotFound(path)

        has_more = len(entries) > limit
        entries = entries[:limit]
        contents = self._fetch_contents(path, entries)

        commits = [
            Commit(
                hash=entry.hash,
                author=entry.author,
                date=entry.date,
                message=entry.message,
                content=content if content is not None else "",
                exists=content is not None,
            )
            for entry, content in zip(entries, contents)
        ]
        logger.debug(
            "Fetched %d commits for %s (cursor=%s, has_more=%s)",
            len(commits),
            path,
            cursor,
            has_more,
        )
        return Page(commits=commits, has_more=has_more)

    def _fetch_contents(
        self, path: str, entries: List[LogEntry]
    ) -> List[Optional[str]]:
        """Read every entry's content concurrently, failing on the first error."""
        if not entries:
            return []

        results: List[Optional[str]] = [None] * len(entries)
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(entries)),
            thread_name_prefix="history-content",
        )
        try:
            futures = {
                executor.submit(self.read_content, path, entry.hash): index
                for index, entry in enumerate(entries)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except (ContentUnavailable, ContentTooLarge):
                    raise
                except Exception as e:
                    raise ContentUnavailable(path, entries[index].hash, str(e)) from e
        finally:
            # Remaining fetches are abandoned once the page has failed.
            executor.shutdown(wait=False, cancel_futures=True)
        return results
