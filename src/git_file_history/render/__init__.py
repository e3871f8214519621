"""Terminal rendering and persisted viewer state."""

from .dates import format_relative_date
from .diff import DiffRenderer, render_commit_header, unified_diff_lines
from .state import StateStore

__all__ = [
    "DiffRenderer",
    "StateStore",
    "format_relative_date",
    "render_commit_header",
    "unified_diff_lines",
]
