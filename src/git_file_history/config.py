"""Configuration for history sessions."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from git_file_history.core.backends import BackendKind, create_backend
from git_file_history.core.errors import ConfigError
from git_file_history.core.pagination import (
    DEFAULT_MAX_CONTENT_BYTES,
    DEFAULT_PAGE_SIZE,
    PaginationEngine,
)

CONFIG_FILE_NAME = ".git-file-history.json"


class HistoryConfig(BaseModel):
    """Settings for one history session; hosted backends need ``repository``."""

    backend: BackendKind = BackendKind.CLI
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_content_bytes: int = Field(default=DEFAULT_MAX_CONTENT_BYTES, ge=1)
    timeout: Optional[float] = Field(default=30.0, gt=0)
    max_workers: int = Field(default=8, ge=1)
    repository: Optional[str] = None
    ref: Optional[str] = None
    base_url: Optional[str] = None
    token: Optional[str] = None

    @classmethod
    def load(cls, config_file: Path) -> "HistoryConfig":
        """Load configuration from a JSON file."""
        try:
            data = json.loads(Path(config_file).read_text(encoding="utf-8"))
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_file}: {e}") from e

    @classmethod
    def discover(cls, start: Path) -> "HistoryConfig":
        """Load the nearest config file at or above ``start``, else defaults."""
        start = Path(start).resolve()
        if start.is_file() or not start.exists():
            start = start.parent
        for directory in [start] + list(start.parents):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.is_file():
                return cls.load(candidate)
            if (directory / ".git").exists():
                break
        return cls()

    def merged(self, **overrides) -> "HistoryConfig":
        """Copy with every non-None override applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        try:
            return self.model_validate({**self.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigError(f"Invalid option: {e}") from e

    def create_engine(self, root: Optional[Path] = None) -> PaginationEngine:
        """Build the pagination engine and backend this config describes."""
        options = {"max_workers": self.max_workers, "timeout": self.timeout}
        if self.backend == BackendKind.CLI:
            options["root"] = root
        else:
            if not self.repository:
                raise ConfigError(f"The {self.backend.value} backend needs a repository")
            options.update(
                repository=self.repository,
                ref=self.ref,
                token=self.token,
                base_url=self.base_url,
            )
        backend = create_backend(self.backend, **options)
        return PaginationEngine(
            backend,
            page_size=self.page_size,
            max_content_bytes=self.max_content_bytes,
        )
