"""History backends and backend selection."""

from typing import Dict, Type

from .base import BackendAdapter, BackendKind, LogEntry
from .bitbucket import BitbucketBackend
from .cli import GitCliBackend, parse_log_line
from .github import GitHubBackend
from .gitlab import GitLabBackend

BACKENDS: Dict[BackendKind, Type[BackendAdapter]] = {
    BackendKind.CLI: GitCliBackend,
    BackendKind.GITHUB: GitHubBackend,
    BackendKind.GITLAB: GitLabBackend,
    BackendKind.BITBUCKET: BitbucketBackend,
}


def create_backend(kind, **options) -> BackendAdapter:
    """Instantiate the backend registered for ``kind``.

    Args:
        kind: A BackendKind or its string value
        **options: Constructor arguments for the selected backend

    Returns:
        A ready-to-use backend adapter
    """
    return BACKENDS[BackendKind(kind)](**options)


__all__ = [
    "BACKENDS",
    "BackendAdapter",
    "BackendKind",
    "BitbucketBackend",
    "GitCliBackend",
    "GitHubBackend",
    "GitLabBackend",
    "LogEntry",
    "create_backend",
    "parse_log_line",
]
