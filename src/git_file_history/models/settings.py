"""Diff viewer settings persisted across sessions."""

from enum import Enum

from pydantic import BaseModel


class DiffLayout(str, Enum):
    """How the two sides of a diff are laid out."""

    UNIFIED = "unified"
    SPLIT = "split"


class DiffSettings(BaseModel):
    """Display preferences for the diff renderer."""

    layout: DiffLayout = DiffLayout.SPLIT
    theme: str = "github-dark"
    line_numbers: bool = True
    background: bool = True
    expand_unchanged: bool = False
    context_lines: int = 3
