"""Cursor-based pagination over one backend adapter."""

import logging
from typing import Optional

from git_file_history.core.backends.base import BackendAdapter
from git_file_history.core.errors import (
    BackendUnavailable,
    HistoryError,
    InvalidRequest,
    PathNotFound,
)
from git_file_history.models.commit import Page

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15
DEFAULT_MAX_CONTENT_BYTES = 10 * 1024 * 1024


class PaginationEngine:
    """Fetches pages of a file's history through one backend.

    The engine never retries and never returns partial pages: a page either
    comes back whole or the call raises a HistoryError.
    """

    def __init__(
        self,
        backend: BackendAdapter,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_content_bytes: Optional[int] = DEFAULT_MAX_CONTENT_BYTES,
    ):
        if page_size < 1:
            raise InvalidRequest(f"page_size must be at least 1, got {page_size}")
        self.backend = backend
        self.page_size = page_size
        self.max_content_bytes = max_content_bytes
        # The backend enforces the limit on raw blob sizes; the stricter of
        # the two limits wins.
        if max_content_bytes is not None and (
            backend.max_content_bytes is None
            or max_content_bytes < backend.max_content_bytes
        ):
            backend.max_content_bytes = max_content_bytes

    def fetch_page(
        self, path: str, limit: Optional[int] = None, cursor: Optional[str] = None
    ) -> Page:
        """Fetch the page of ``path``'s history strictly older than ``cursor``.

        Args:
            path: Tracked file path
            limit: Page size, defaulting to the engine's page size
            cursor: Hash of the oldest commit seen so far; None or "" starts at
                the most recent revision

        Returns:
            The backend's page, unchanged. A path without history yields an
            empty page with ``has_more`` False.
        """
        if limit is None:
            limit = self.page_size
        if limit < 1:
            raise InvalidRequest(f"limit must be at least 1, got {limit}")
        cursor = cursor or None

        try:
            page = self.backend.fetch_window(path, limit, cursor)
        except PathNotFound:
            logger.info("No history for %s", path)
            return Page(commits=[], has_more=False)
        except HistoryError:
            raise
        except Exception as e:
            logger.exception("Backend failed while fetching %s", path)
            raise BackendUnavailable(str(e) or e.__class__.__name__) from e

        return page
