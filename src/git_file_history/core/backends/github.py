"""GitHub REST API backend."""

from typing import Dict, List, Optional
from urllib.parse import quote

from git_file_history.core.backends.base import BackendKind, LogEntry
from git_file_history.core.backends.hosted import HostedApiBackend

RAW_MEDIA_TYPE = "application/vnd.github.raw+json"


class GitHubBackend(HostedApiBackend):
    """History of a file in a GitHub repository (``owner/name``)."""

    kind = BackendKind.GITHUB
    default_base_url = "https://api.github.com"

    def auth_headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "git-file-history",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def list_revisions(
        self, path: str, count: int, start: Optional[str] = None
    ) -> List[LogEntry]:
        params = {"path": self.normalize_path(path)}
        sha = start or self.ref
        if sha:
            params["sha"] = sha

        items = self.paginate(f"/repos/{self.repository}/commits", params, count)
        return [self._to_entry(item) for item in items]

    def read_blob(self, path: str, revision: str) -> Optional[bytes]:
        response = self.request(
            f"/repos/{self.repository}/contents/{quote(self.normalize_path(path))}",
            params={"ref": revision},
            headers={"Accept": RAW_MEDIA_TYPE},
            allow_not_found=True,
        )
        if response is None:
            return None
        return response.content

    @staticmethod
    def _to_entry(item: Dict) -> LogEntry:
        commit = item.get("commit") or {}
        author = commit.get("author") or {}
        message = commit.get("message") or ""
        return LogEntry(
            hash=item["sha"],
            author=author.get("name") or "",
            date=author.get("date") or "",
            message=message.split("\n", 1)[0],
        )
