"""Bitbucket Cloud REST API backend."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from git_file_history.core.backends.base import BackendKind, LogEntry
from git_file_history.core.backends.hosted import MAX_PER_PAGE, HostedApiBackend


def author_name(author: Dict[str, Any]) -> str:
    """Display name of a Bitbucket author, falling back to the raw ``Name <email>``."""
    user = author.get("user") or {}
    if user.get("display_name"):
        return user["display_name"]
    return (author.get("raw") or "").split("<", 1)[0].strip()


class BitbucketBackend(HostedApiBackend):
    """History of a file in a Bitbucket repository (``workspace/repo``).

    Listings follow the ``next`` links Bitbucket returns instead of page
    numbers. Without a ref or cursor, history starts at the repository's
    main branch.
    """

    kind = BackendKind.BITBUCKET
    default_base_url = "https://api.bitbucket.org/2.0"

    def __init__(self, repository: str, **kwargs):
        super().__init__(repository, **kwargs)
        self._main_branch: Optional[str] = None

    def auth_headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"User-Agent": "git-file-history"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @property
    def main_branch(self) -> str:
        if self._main_branch is None:
            response = self.request(f"/repositories/{self.repository}")
            mainbranch = response.json().get("mainbranch") or {}
            self._main_branch = mainbranch.get("name") or "master"
        return self._main_branch

    def list_revisions(
        self, path: str, count: int, start: Optional[str] = None
    ) -> List[LogEntry]:
        revision = start or self.ref or self.main_branch
        url: Optional[str] = (
            f"/repositories/{self.repository}/commits/{quote(revision, safe='')}"
        )
        params: Optional[Dict[str, Any]] = {
            "path": self.normalize_path(path),
            "pagelen": min(count, MAX_PER_PAGE),
        }

        items: List[Dict[str, Any]] = []
        while url and len(items) < count:
            data = self.request(url, params=params).json()
            items.extend(data.get("values") or [])
            # The next link already carries every query parameter.
            url, params = data.get("next"), None

        return [
            LogEntry(
                hash=item["hash"],
                author=author_name(item.get("author") or {}),
                date=item.get("date") or "",
                message=(item.get("message") or "").split("\n", 1)[0],
            )
            for item in items[:count]
        ]

    def read_blob(self, path: str, revision: str) -> Optional[bytes]:
        response = self.request(
            f"/repositories/{self.repository}/src/{revision}/{quote(self.normalize_path(path))}",
            allow_not_found=True,
        )
        if response is None:
            return None
        return response.content
