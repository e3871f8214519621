"""Shared HTTP plumbing for hosted repository APIs."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from git_file_history.core.backends.base import BackendAdapter
from git_file_history.core.errors import BackendUnavailable

logger = logging.getLogger(__name__)

# GitHub, GitLab and Bitbucket all cap page sizes at 100.
MAX_PER_PAGE = 100


class HostedApiBackend(BackendAdapter):
    """Backend talking to a paginated REST API.

    Subclasses provide the base URL, auth headers and the response mapping.
    """

    default_base_url = ""

    def __init__(
        self,
        repository: str,
        ref: Optional[str] = None,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if not repository:
            raise ValueError("A repository slug (owner/name) is required")
        self.repository = repository.strip("/")
        self.ref = ref
        self.client = httpx.Client(
            base_url=(base_url or self.default_base_url).rstrip("/"),
            headers=self.auth_headers(token),
            timeout=self.timeout,
            transport=transport,
            follow_redirects=True,
        )

    def auth_headers(self, token: Optional[str]) -> Dict[str, str]:
        return {}

    def close(self) -> None:
        self.client.close()

    @staticmethod
    def normalize_path(path: str) -> str:
        """Hosted APIs address files relative to the repository root."""
        return path.replace("\\", "/").lstrip("/")

    def request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        allow_not_found: bool = False,
    ) -> Optional[httpx.Response]:
        """GET ``url``, translating transport failures into the error taxonomy.

        Returns None for a 404 when ``allow_not_found`` is set.
        """
        try:
            response = self.client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise BackendUnavailable(f"Request to {url} failed: {e}") from e

        if response.status_code == 404 and allow_not_found:
            return None
        if response.is_error:
            raise BackendUnavailable(
                f"{response.request.method} {url} returned {response.status_code}: "
                f"{response.text[:200]}"
            )
        return response

    def paginate(
        self, url: str, params: Dict[str, Any], count: int
    ) -> List[Dict[str, Any]]:
        """Collect up to ``count`` items from a ``page``/``per_page`` listing."""
        per_page = min(count, MAX_PER_PAGE)
        items: List[Dict[str, Any]] = []
        page = 1
        while len(items) < count:
            response = self.request(
                url, params={**params, "per_page": per_page, "page": page}
            )
            batch = response.json() or []
            items.extend(batch)
            if len(batch) < per_page:
                break
            page += 1
        logger.debug("Listed %d items from %s", len(items), url)
        return items[:count]
