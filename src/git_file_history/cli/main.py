"""Main CLI interface for Git File History."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from git_file_history.config import HistoryConfig
from git_file_history.core.backends import BackendKind
from git_file_history.core.errors import HistoryError
from git_file_history.models.settings import DiffLayout
from git_file_history.protocol import DisplaySession, DisplayStatus, LocalChannel, serve_stdio
from git_file_history.render import (
    DiffRenderer,
    StateStore,
    format_relative_date,
    render_commit_header,
)

console = Console()

# Keys accepted by the browse loop, including terminal arrow sequences.
NEXT_KEYS = {"n", "l", "\x1b[C"}
PREVIOUS_KEYS = {"p", "h", "\x1b[D"}
QUIT_KEYS = {"q", "\x1b", "\x03"}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _load_config(ctx: click.Context, path: str) -> HistoryConfig:
    """Config file for ``path`` (or the one given) with CLI overrides applied."""
    options = ctx.obj or {}
    try:
        if options.get("config_file"):
            config = HistoryConfig.load(Path(options["config_file"]))
        else:
            config = HistoryConfig.discover(Path(path))
        return config.merged(**options.get("overrides", {}))
    except HistoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e


def _open_session(ctx: click.Context, path: str) -> LocalChannel:
    config = _load_config(ctx, path)
    try:
        engine = config.create_engine()
    except HistoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e
    return LocalChannel(engine, path)


def _load_until(display: DisplaySession, index: int) -> None:
    """Request pages until ``index`` has an older commit to diff against."""
    while len(display.commits) <= index + 1 and display.navigation.has_more:
        if not display.request_more():
            break
        if display.error is not None:
            return


def _show_current(display: DisplaySession, renderer: DiffRenderer) -> bool:
    """Render the current diff. Returns False when there is nothing to show."""
    pair = display.navigation.current_pair()
    if pair is None:
        if display.error is not None:
            console.print(f"[red]Error: {display.error}[/red]")
        else:
            console.print("[yellow]Not enough history to show a diff[/yellow]")
        return False

    newer, older = pair
    console.print(render_commit_header(newer, older))
    if not newer.exists:
        console.print(f"[dim]{display.file_name} does not exist in {newer.short_hash}[/dim]")
    if not older.exists:
        console.print(f"[dim]{display.file_name} does not exist in {older.short_hash}[/dim]")
    console.print(renderer.render(older.content, newer.content, display.file_name or ""))
    if display.error is not None:
        console.print(
            f"[red]Could not load older history: {display.error}[/red] [dim](r to retry)[/dim]"
        )
    return True


@click.group()
@click.version_option(package_name="git-file-history")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Config file (defaults to the nearest .git-file-history.json)",
)
@click.option(
    "--backend",
    type=click.Choice([kind.value for kind in BackendKind]),
    help="History source",
)
@click.option("--repository", help="Hosted repository slug, e.g. owner/name")
@click.option("--ref", help="Branch or revision to read hosted history from")
@click.option("--base-url", help="Hosted API base URL")
@click.option(
    "--token", envvar="GIT_FILE_HISTORY_TOKEN", help="Hosted API access token"
)
@click.option("--page-size", type=click.IntRange(min=1), help="Commits per page")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Backend call timeout in seconds",
)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    config_file: Optional[str],
    backend: Optional[str],
    repository: Optional[str],
    ref: Optional[str],
    base_url: Optional[str],
    token: Optional[str],
    page_size: Optional[int],
    timeout: Optional[float],
):
    """Git File History - browse the revisions of a single file."""
    _configure_logging(verbose)
    ctx.obj = {
        "config_file": config_file,
        "overrides": {
            "backend": backend,
            "repository": repository,
            "ref": ref,
            "base_url": base_url,
            "token": token,
            "page_size": page_size,
            "timeout": timeout,
        },
    }


@main.command()
@click.argument("path")
@click.option("--limit", type=click.IntRange(min=1), help="Number of commits to show")
@click.option("--before", help="Show commits strictly older than this hash")
@click.pass_context
def log(ctx: click.Context, path: str, limit: Optional[int], before: Optional[str]):
    """Show one page of a file's history."""
    config = _load_config(ctx, path)
    try:
        engine = config.create_engine()
        with engine.backend:
            page = engine.fetch_page(path, limit=limit, cursor=before)
    except HistoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    if not page.commits:
        console.print(f"[yellow]No history for {path}[/yellow]")
        return

    table = Table(title=f"{Path(path).name} history")
    table.add_column("Hash", style="yellow", no_wrap=True)
    table.add_column("Author")
    table.add_column("Date", style="dim")
    table.add_column("Message")
    for commit in page.commits:
        message = commit.message if commit.exists else f"{commit.message} [dim](deleted)[/dim]"
        table.add_row(
            commit.short_hash, commit.author, format_relative_date(commit.date), message
        )
    console.print(table)

    if page.has_more:
        console.print(f"[dim]More history: --before {page.cursor}[/dim]")


@main.command()
@click.argument("path")
@click.option("--index", default=0, type=click.IntRange(min=0), help="Diff position, 0 is newest")
@click.option("--layout", type=click.Choice([layout.value for layout in DiffLayout]))
@click.option("--state-file", type=click.Path(dir_okay=False), help="Viewer state file")
@click.pass_context
def diff(
    ctx: click.Context,
    path: str,
    index: int,
    layout: Optional[str],
    state_file: Optional[str],
):
    """Show the diff between revision INDEX and the one before it."""
    settings = StateStore(state_file).load_settings()
    if layout:
        settings = settings.model_copy(update={"layout": DiffLayout(layout)})

    with _open_session(ctx, path) as display:
        _load_until(display, index)
        display.select(index)
        if not _show_current(display, DiffRenderer(settings)):
            if display.status == DisplayStatus.ERROR:
                raise click.Abort()


@main.command()
@click.argument("path")
@click.option("--state-file", type=click.Path(dir_okay=False), help="Viewer state file")
@click.pass_context
def browse(ctx: click.Context, path: str, state_file: Optional[str]):
    """Step through a file's diffs (n/p or arrows to move, r to retry, q to quit)."""
    renderer = DiffRenderer(StateStore(state_file).load_settings())

    with _open_session(ctx, path) as display:
        while True:
            _show_current(display, renderer)
            total = f"{len(display.commits)}{'+' if display.navigation.has_more else ''}"
            console.print(
                f"[dim]{display.navigation.current_index + 1}/{total}  "
                "n: older  p: newer  r: retry  q: quit[/dim]"
            )

            key = click.getchar()
            if key in QUIT_KEYS:
                break
            if key in NEXT_KEYS:
                display.next()
            elif key in PREVIOUS_KEYS:
                display.previous()
            elif key == "r":
                display.retry()


@main.command()
@click.argument("path")
@click.pass_context
def serve(ctx: click.Context, path: str):
    """Serve PATH's history over stdin/stdout as JSON lines."""
    config = _load_config(ctx, path)
    try:
        engine = config.create_engine()
    except HistoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    with engine.backend:
        serve_stdio(engine, path)


@main.command()
@click.option("--layout", type=click.Choice([layout.value for layout in DiffLayout]))
@click.option("--theme", help="Syntax theme name")
@click.option("--line-numbers/--no-line-numbers", default=None)
@click.option("--background/--no-background", default=None)
@click.option("--expand-unchanged/--no-expand-unchanged", default=None)
@click.option("--context", "context_lines", type=click.IntRange(min=0))
@click.option("--state-file", type=click.Path(dir_okay=False), help="Viewer state file")
def settings(
    layout: Optional[str],
    theme: Optional[str],
    line_numbers: Optional[bool],
    background: Optional[bool],
    expand_unchanged: Optional[bool],
    context_lines: Optional[int],
    state_file: Optional[str],
):
    """Show or update the persisted diff settings."""
    store = StateStore(state_file)
    current = store.load_settings()
    updates = {
        "layout": DiffLayout(layout) if layout else None,
        "theme": theme,
        "line_numbers": line_numbers,
        "background": background,
        "expand_unchanged": expand_unchanged,
        "context_lines": context_lines,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    if updates:
        current = current.model_copy(update=updates)
        store.save_settings(current)
        console.print("[green]✅ Settings saved[/green]")

    table = Table(show_header=False, box=None)
    for key, value in current.model_dump(mode="json").items():
        table.add_row(f"[bold]{key}[/bold]", str(value))
    console.print(table)


if __name__ == "__main__":
    main()
