"""Terminal diff rendering between two revisions of a file."""

import difflib
from typing import List, Optional

from rich.console import Group, RenderableType
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from git_file_history.core.language import detect_language
from git_file_history.models.commit import Commit
from git_file_history.models.settings import DiffLayout, DiffSettings

REMOVED_BACKGROUND = "on #3c1f1e"
ADDED_BACKGROUND = "on #1e3c1f"


def unified_diff_lines(
    old_content: str,
    new_content: str,
    file_name: str,
    context_lines: int = 3,
) -> List[str]:
    """Return a unified diff as a list of lines without trailing newlines."""
    return list(
        difflib.unified_diff(
            old_content.splitlines(),
            new_content.splitlines(),
            fromfile=f"a/{file_name}",
            tofile=f"b/{file_name}",
            n=context_lines,
            lineterm="",
        )
    )


class DiffRenderer:
    """Renders the diff between an older and a newer revision.

    Split layout highlights both sides using the language detected from the
    file name; rich falls back to plain text for languages pygments does not
    know.
    """

    def __init__(self, settings: Optional[DiffSettings] = None):
        self.settings = settings or DiffSettings()

    def render(self, old_content: str, new_content: str, file_name: str) -> RenderableType:
        if old_content == new_content:
            return Text("No changes to this file in this revision", style="dim")
        if self.settings.layout == DiffLayout.UNIFIED:
            return self._render_unified(old_content, new_content, file_name)
        return self._render_split(old_content, new_content, file_name)

    def _context(self, old_content: str, new_content: str) -> int:
        if self.settings.expand_unchanged:
            return max(old_content.count("\n"), new_content.count("\n")) + 1
        return self.settings.context_lines

    def _render_unified(self, old_content: str, new_content: str, file_name: str) -> Syntax:
        lines = unified_diff_lines(
            old_content,
            new_content,
            file_name,
            context_lines=self._context(old_content, new_content),
        )
        return Syntax(
            "\n".join(lines),
            "diff",
            theme=self.settings.theme,
            line_numbers=self.settings.line_numbers,
            background_color=None if self.settings.background else "default",
        )

    def _highlight(self, content: str, lexer: str) -> List[Text]:
        syntax = Syntax(content, lexer, theme=self.settings.theme)
        return syntax.highlight(content).split("\n", allow_blank=True)

    def _render_split(self, old_content: str, new_content: str, file_name: str) -> Table:
        lexer = detect_language(file_name)
        old_lines = old_content.splitlines()
        new_lines = new_content.splitlines()
        old_texts = self._highlight(old_content, lexer)
        new_texts = self._highlight(new_content, lexer)

        table = Table(show_header=True, expand=True, box=None, pad_edge=False)
        if self.settings.line_numbers:
            table.add_column("", justify="right", style="dim", no_wrap=True)
        table.add_column(f"a/{file_name}", ratio=1, overflow="fold")
        if self.settings.line_numbers:
            table.add_column("", justify="right", style="dim", no_wrap=True)
        table.add_column(f"b/{file_name}", ratio=1, overflow="fold")

        matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
        context = self._context(old_content, new_content)
        for group in matcher.get_grouped_opcodes(context):
            if table.row_count:
                gap = Text("⋯", style="dim")
                self._add_row(table, None, gap, None, gap)
            for tag, i1, i2, j1, j2 in group:
                if tag == "equal":
                    for offset in range(i2 - i1):
                        self._add_row(
                            table,
                            i1 + offset,
                            self._line(old_texts, old_lines, i1 + offset),
                            j1 + offset,
                            self._line(new_texts, new_lines, j1 + offset),
                        )
                    continue
                # replace, delete and insert are laid out side by side
                for offset in range(max(i2 - i1, j2 - j1)):
                    old_index = i1 + offset if i1 + offset < i2 else None
                    new_index = j1 + offset if j1 + offset < j2 else None
                    self._add_row(
                        table,
                        old_index,
                        self._changed(old_texts, old_lines, old_index, removed=True),
                        new_index,
                        self._changed(new_texts, new_lines, new_index, removed=False),
                    )
        return table

    @staticmethod
    def _line(texts: List[Text], lines: List[str], index: int) -> Text:
        if index < len(texts):
            return texts[index]
        return Text(lines[index])

    def _changed(
        self, texts: List[Text], lines: List[str], index: Optional[int], removed: bool
    ) -> Text:
        if index is None:
            return Text("")
        text = self._line(texts, lines, index).copy()
        if self.settings.background:
            text.stylize(REMOVED_BACKGROUND if removed else ADDED_BACKGROUND)
        else:
            text.stylize("red" if removed else "green")
        return text

    def _add_row(
        self,
        table: Table,
        old_index: Optional[int],
        old_text: Text,
        new_index: Optional[int],
        new_text: Text,
    ) -> None:
        if not self.settings.line_numbers:
            table.add_row(old_text, new_text)
            return
        table.add_row(
            "" if old_index is None else str(old_index + 1),
            old_text,
            "" if new_index is None else str(new_index + 1),
            new_text,
        )


def render_commit_header(newer: Commit, older: Commit) -> Group:
    """Two-line summary of the revisions being compared."""
    return Group(
        Text.assemble(
            ("new ", "bold green"),
            (newer.short_hash, "yellow"),
            f" {newer.message} ",
            (f"({newer.author}, {newer.date})", "dim"),
        ),
        Text.assemble(
            ("old ", "bold red"),
            (older.short_hash, "yellow"),
            f" {older.message} ",
            (f"({older.author}, {older.date})", "dim"),
        ),
    )
