"""GitLab REST API backend."""

from typing import Dict, List, Optional
from urllib.parse import quote

from git_file_history.core.backends.base import BackendKind, LogEntry
from git_file_history.core.backends.hosted import HostedApiBackend


class GitLabBackend(HostedApiBackend):
    """History of a file in a GitLab project (``group/project``)."""

    kind = BackendKind.GITLAB
    default_base_url = "https://gitlab.com/api/v4"

    def auth_headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {"User-Agent": "git-file-history"}
        if token:
            headers["PRIVATE-TOKEN"] = token
        return headers

    @property
    def project_id(self) -> str:
        return quote(self.repository, safe="")

    def list_revisions(
        self, path: str, count: int, start: Optional[str] = None
    ) -> List[LogEntry]:
        params = {"path": self.normalize_path(path)}
        ref = start or self.ref
        if ref:
            params["ref_name"] = ref

        items = self.paginate(
            f"/projects/{self.project_id}/repository/commits", params, count
        )
        return [
            LogEntry(
                hash=item["id"],
                author=item.get("author_name") or "",
                date=item.get("authored_date") or "",
                message=item.get("title") or "",
            )
            for item in items
        ]

    def read_blob(self, path: str, revision: str) -> Optional[bytes]:
        file_id = quote(self.normalize_path(path), safe="")
        response = self.request(
            f"/projects/{self.project_id}/repository/files/{file_id}/raw",
            params={"ref": revision},
            allow_not_found=True,
        )
        if response is None:
            return None
        return response.content
