"""Commit and page models for file history."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Commit(BaseModel):
    """One revision of the tracked file.

    ``date`` is kept exactly as the backend supplied it. ``exists`` is False
    when the tracked path is absent at this revision (deleted or not yet
    created); ``content`` is then the empty string.
    """

    model_config = ConfigDict(frozen=True)

    hash: str
    author: str
    date: str
    message: str
    content: str = ""
    exists: bool = True

    @property
    def short_hash(self) -> str:
        """Abbreviated hash for display."""
        return self.hash[:7]

    def to_wire(self) -> Dict[str, Any]:
        """Serialize for the host/display protocol.

        The ``exists`` marker is only emitted for missing files so ordinary
        commits keep the five-field shape.
        """
        data = self.model_dump(exclude={"exists"})
        if not self.exists:
            data["exists"] = False
        return data


class Page(BaseModel):
    """A bounded, atomic batch of commits, newest first."""

    model_config = ConfigDict(populate_by_name=True)

    commits: List[Commit] = []
    has_more: bool = Field(default=False, alias="hasMore")

    @property
    def cursor(self) -> Optional[str]:
        """Hash of the oldest commit in this page, or None for an empty page."""
        return self.commits[-1].hash if self.commits else None
