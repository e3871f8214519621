"""Local repository backend driven by the git command line."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import git
from git import Repo

from git_file_history.core.backends.base import BackendAdapter, BackendKind, LogEntry
from git_file_history.core.errors import (
    BackendUnavailable,
    ContentTooLarge,
    ContentUnavailable,
    PathNotFound,
)

logger = logging.getLogger(__name__)

# Hash, author, ISO date, subject. Only the first three separators are
# structural; the subject may contain "|" itself.
LOG_FIELD_SEPARATOR = "|"
LOG_FORMAT = "%H|%an|%aI|%s"


def parse_log_line(line: str) -> LogEntry:
    """Split one ``git log`` line into its fields, keeping the message whole."""
    parts = line.split(LOG_FIELD_SEPARATOR, 3)
    if len(parts) < 4:
        raise BackendUnavailable(f"Unexpected git log output: {line!r}")
    commit_hash, author, date, message = parts
    return LogEntry(hash=commit_hash, author=author, date=date, message=message)


class GitCliBackend(BackendAdapter):
    """History of a file in a local working tree.

    Paths may be absolute or relative to ``root`` (the current directory when
    omitted). The enclosing repository is discovered from the file's
    directory, so one backend can serve files from several repositories.
    """

    kind = BackendKind.CLI

    def __init__(self, root: Optional[Path] = None, **kwargs):
        super().__init__(**kwargs)
        self.root = Path(root).resolve() if root else Path.cwd()
        self._work_trees: Dict[Path, Path] = {}

    def list_revisions(
        self, path: str, count: int, start: Optional[str] = None
    ) -> List[LogEntry]:
        work_tree, relative = self._locate(path)
        command = git.Git(str(work_tree))
        logger.debug("git log %s -- %s (max %d)", start or "HEAD", relative, count)
        try:
            output = command.log(
                f"--max-count={count}",
                f"--pretty=format:{LOG_FORMAT}",
                start or "HEAD",
                "--",
                relative,
                kill_after_timeout=self.timeout,
            )
        except git.GitCommandError as e:
            if start is None and not self._has_commits(work_tree):
                raise PathNotFound(path) from e
            raise BackendUnavailable(f"git log failed: {e}") from e

        return [parse_log_line(line) for line in output.splitlines() if line.strip()]

    def read_blob(self, path: str, revision: str) -> Optional[bytes]:
        work_tree, relative = self._locate(path)
        # Object database handles are not thread-safe, so each read opens
        # its own repository.
        try:
            with Repo(work_tree) as repo:
                tree = repo.commit(revision).tree
                try:
                    blob = tree / relative
                except KeyError:
                    return None
                if blob.type != "blob":
                    raise ContentUnavailable(path, revision, "not a file")
                # Refused before the blob is loaded.
                if self.max_content_bytes is not None and blob.size > self.max_content_bytes:
                    raise ContentTooLarge(revision, blob.size, self.max_content_bytes)
                return blob.data_stream.read()
        except (git.GitCommandError, git.exc.ODBError, ValueError) as e:
            raise ContentUnavailable(path, revision, str(e)) from e

    def _locate(self, path: str) -> Tuple[Path, str]:
        """Resolve ``path`` to its work tree and repository-relative posix path."""
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = self.root / file_path
        file_path = file_path.resolve()

        directory = file_path.parent
        work_tree = self._work_trees.get(directory)
        if work_tree is None:
            # A deleted file's directory may be gone from the work tree too.
            search_from = directory
            while not search_from.exists() and search_from != search_from.parent:
                search_from = search_from.parent
            try:
                with Repo(search_from, search_parent_directories=True) as repo:
                    if repo.working_tree_dir is None:
                        raise BackendUnavailable(f"{directory} is in a bare repository")
                    work_tree = Path(repo.working_tree_dir).resolve()
            except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
                raise BackendUnavailable(f"Not a git repository: {directory}") from e
            self._work_trees[directory] = work_tree

        try:
            relative = file_path.relative_to(work_tree).as_posix()
        except ValueError as e:
            raise BackendUnavailable(f"{file_path} is outside {work_tree}") from e
        return work_tree, relative

    @staticmethod
    def _has_commits(work_tree: Path) -> bool:
        with Repo(work_tree) as repo:
            return repo.head.is_valid()
