"""Tests for terminal rendering, relative dates and persisted viewer state."""

import io
from datetime import datetime, timezone

import pytest
from rich.console import Console

from git_file_history.core.language import detect_language
from git_file_history.models import Commit, DiffLayout, DiffSettings
from git_file_history.render import (
    DiffRenderer,
    StateStore,
    format_relative_date,
    render_commit_header,
    unified_diff_lines,
)

OLD = "import os\n\ndef main():\n    return 1\n"
NEW = "import os\n\ndef main():\n    return 2\n"


def render_to_text(renderable, width=120) -> str:
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def test_unified_diff_lines():
    lines = unified_diff_lines(OLD, NEW, "main.py")

    assert lines[0] == "--- a/main.py"
    assert lines[1] == "+++ b/main.py"
    assert "-    return 1" in lines
    assert "+    return 2" in lines


def test_unified_layout_output():
    renderer = DiffRenderer(DiffSettings(layout=DiffLayout.UNIFIED, line_numbers=False))

    output = render_to_text(renderer.render(OLD, NEW, "main.py"))

    assert "-    return 1" in output
    assert "+    return 2" in output


def test_split_layout_shows_both_sides():
    renderer = DiffRenderer(DiffSettings(layout=DiffLayout.SPLIT))

    output = render_to_text(renderer.render(OLD, NEW, "main.py"))

    assert "a/main.py" in output
    assert "b/main.py" in output
    assert "return 1" in output
    assert "return 2" in output


def test_split_layout_separates_distant_hunks():
    old = "".join(f"line {i}\n" for i in range(40))
    new = old.replace("line 2\n", "line two\n").replace("line 35\n", "line thirty-five\n")
    renderer = DiffRenderer(DiffSettings(context_lines=1, line_numbers=False, background=False))

    output = render_to_text(renderer.render(old, new, "notes.txt"))

    assert "⋯" in output
    assert "line 20" not in output


def test_expand_unchanged_shows_everything():
    old = "".join(f"line {i}\n" for i in range(40))
    new = old.replace("line 2\n", "line two\n")
    settings = DiffSettings(layout=DiffLayout.UNIFIED, expand_unchanged=True, line_numbers=False)

    output = render_to_text(DiffRenderer(settings).render(old, new, "notes.txt"))

    assert "line 39" in output


def test_identical_contents():
    output = render_to_text(DiffRenderer().render(OLD, OLD, "main.py"))
    assert "No changes" in output


def test_added_file_diffs_against_empty():
    renderer = DiffRenderer(DiffSettings(layout=DiffLayout.UNIFIED, line_numbers=False))

    output = render_to_text(renderer.render("", "created\n", "new.txt"))

    assert "+created" in output


def test_commit_header():
    newer = Commit(hash="a" * 40, author="Ada", date="2024-01-02", message="second")
    older = Commit(hash="b" * 40, author="Bob", date="2024-01-01", message="first")

    output = render_to_text(render_commit_header(newer, older))

    assert "aaaaaaa second" in output
    assert "bbbbbbb first" in output
    assert "a" * 8 not in output


@pytest.mark.parametrize(
    "date, expected",
    [
        ("2024-06-15T08:00:00+00:00", "today"),
        ("2024-06-14T08:00:00Z", "yesterday"),
        ("2024-06-12T12:00:00+00:00", "3 days ago"),
        ("2024-06-08T12:00:00+00:00", "1 week ago"),
        ("2024-05-25T12:00:00+00:00", "3 weeks ago"),
        ("2024-04-01T12:00:00+00:00", "2 months ago"),
        ("2022-03-01T12:00:00+00:00", "2022-03-01"),
        ("not a date", "not a date"),
    ],
)
def test_format_relative_date(date, expected):
    now = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
    assert format_relative_date(date, now=now) == expected


@pytest.mark.parametrize(
    "filename, language",
    [
        ("src/app.py", "python"),
        ("index.TSX", "tsx"),
        ("config.yml", "yaml"),
        ("Dockerfile", "dockerfile"),
        ("Makefile", "makefile"),
        ("main.c", "c"),
        ("lib.hpp", "cpp"),
        ("README.md", "markdown"),
        ("LICENSE", "text"),
    ],
)
def test_detect_language(filename, language):
    assert detect_language(filename) == language


def test_state_store_round_trip(tmp_path):
    store = StateStore(tmp_path / "nested" / "state.json")
    assert store.load_settings() == DiffSettings()

    settings = DiffSettings(layout=DiffLayout.UNIFIED, theme="monokai", context_lines=5)
    store.save_settings(settings)

    assert StateStore(tmp_path / "nested" / "state.json").load_settings() == settings


def test_state_store_keeps_other_keys(tmp_path):
    store = StateStore(tmp_path / "state.json")
    store.set("lastFile", "src/app.py")
    store.save_settings(DiffSettings(background=False))

    assert store.get("lastFile") == "src/app.py"
    assert store.get("missing", "fallback") == "fallback"


def test_state_store_tolerates_bad_data(tmp_path, caplog):
    state_file = tmp_path / "state.json"
    state_file.write_text("{broken")
    assert StateStore(state_file).load_settings() == DiffSettings()

    state_file.write_text('{"diffSettings": {"layout": "diagonal"}}')
    assert StateStore(state_file).load_settings() == DiffSettings()
    assert "invalid stored diff settings" in caplog.text
