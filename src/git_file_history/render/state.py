"""Key-value state persisted across viewing sessions."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from git_file_history.models.settings import DiffSettings

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = Path.home() / ".git-file-history" / "state.json"
SETTINGS_KEY = "diffSettings"


class StateStore:
    """A small JSON document of named values."""

    def __init__(self, state_file: Optional[Path] = None):
        self.state_file = Path(state_file) if state_file else DEFAULT_STATE_FILE

    def _load(self) -> Dict[str, Any]:
        if not self.state_file.exists():
            return {}
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.state_file, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def load_settings(self) -> DiffSettings:
        """Stored diff settings, or defaults if none are stored or they are invalid."""
        raw = self.get(SETTINGS_KEY)
        if raw is None:
            return DiffSettings()
        try:
            return DiffSettings.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring invalid stored diff settings: %s", e)
            return DiffSettings()

    def save_settings(self, settings: DiffSettings) -> None:
        self.set(SETTINGS_KEY, settings.model_dump(mode="json"))
