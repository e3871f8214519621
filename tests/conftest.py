"""Shared fixtures: real temporary repositories and an in-memory backend."""

import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest
from git import Repo

from git_file_history.core.backends.base import BackendAdapter, BackendKind, LogEntry


def commit_file(repo: Repo, file_path: Path, content: str, message: str) -> str:
    """Write ``content`` to ``file_path``, commit it and return the commit hash."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    repo.index.add([str(file_path.relative_to(repo.working_tree_dir))])
    return repo.index.commit(message).hexsha


def init_repo(path: Path) -> Repo:
    repo = Repo.init(path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")
    return repo


@pytest.fixture
def temp_git_project():
    """An empty git repository with a configured user."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir).resolve()
        init_repo(project_path)
        yield project_path


@pytest.fixture
def twenty_commit_repo(temp_git_project):
    """A repository where ``src/app.py`` has 20 revisions.

    Yields the file path and the commit hashes, newest first.
    """
    repo = Repo(temp_git_project)
    file_path = temp_git_project / "src" / "app.py"
    other_file = temp_git_project / "README.md"

    hashes = []
    for i in range(20):
        hashes.append(commit_file(repo, file_path, f"version = {i}\n", f"Update app to {i}"))
        # Commits to other paths must not show up in the file's history
        if i % 5 == 0:
            commit_file(repo, other_file, f"# Readme {i}\n", f"Docs {i}")

    yield file_path, list(reversed(hashes))


class MemoryBackend(BackendAdapter):
    """Backend over an in-memory, newest-first history."""

    kind = BackendKind.CLI

    def __init__(
        self,
        entries: List[LogEntry],
        contents: Optional[Dict[str, Union[str, bytes, None]]] = None,
        delays: Optional[Dict[str, float]] = None,
        failing: Optional[Dict[str, Exception]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.entries = entries
        self.contents = contents or {}
        self.delays = delays or {}
        self.failing = failing or {}
        self.list_calls: List[tuple] = []
        self.read_calls: List[str] = []
        self._lock = threading.Lock()

    def list_revisions(self, path, count, start=None):
        self.list_calls.append((path, count, start))
        hashes = [entry.hash for entry in self.entries]
        offset = hashes.index(start) if start else 0
        return self.entries[offset : offset + count]

    def read_blob(self, path, revision):
        with self._lock:
            self.read_calls.append(revision)
        if revision in self.delays:
            time.sleep(self.delays[revision])
        if revision in self.failing:
            raise self.failing[revision]
        content = self.contents.get(revision, f"content of {revision}\n")
        if content is None or isinstance(content, bytes):
            return content
        return content.encode("utf-8")


def make_entries(count: int) -> List[LogEntry]:
    """``count`` log entries, newest first, with hashes c<count-1> ... c0."""
    return [
        LogEntry(
            hash=f"c{i:03d}",
            author="Ada",
            date=f"2024-01-{(i % 28) + 1:02d}T12:00:00+00:00",
            message=f"Change {i}",
        )
        for i in reversed(range(count))
    ]


@pytest.fixture
def memory_backend_factory():
    """Build a MemoryBackend over a synthetic history of the given length."""

    def factory(count: int, **kwargs) -> MemoryBackend:
        return MemoryBackend(make_entries(count), **kwargs)

    return factory
