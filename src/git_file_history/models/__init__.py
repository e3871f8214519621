"""Data models for git file history."""

from .commit import Commit, Page
from .messages import (
    CommitsMessage,
    ErrorMessage,
    InitMessage,
    LoadMoreMessage,
    ReadyMessage,
)
from .settings import DiffLayout, DiffSettings

__all__ = [
    "Commit",
    "Page",
    "ReadyMessage",
    "LoadMoreMessage",
    "InitMessage",
    "CommitsMessage",
    "ErrorMessage",
    "DiffLayout",
    "DiffSettings",
]
