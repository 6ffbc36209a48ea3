"""CLI entrypoint for memov."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .errors import MemovError


class MemovGroup(click.Group):
    """Click group that reports memov errors on stderr and exits non-zero."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except MemovError as err:
            Console(stderr=True).print(str(err), style="bold red", markup=False, highlight=False)
            ctx.exit(1)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=MemovGroup)
@click.version_option(__version__, prog_name="memov")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml (defaults to ~/.config/memov/config.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Logging level for status messages on stderr",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str) -> None:
    """memov - daily todos and categorised memos as plain markdown."""
    from .config import load_config
    from .editor import SubprocessEditor

    _setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj.setdefault("editor", SubprocessEditor())
    ctx.obj.setdefault("now", datetime.now)


# -----------------------------------------------------------------------------
# todo
# -----------------------------------------------------------------------------


@cli.group()
def todo() -> None:
    """Daily todo files."""


@todo.command("new")
@click.option("--truncate", is_flag=True, help="Overwrite today's todo file if it exists")
@click.pass_context
def todo_new(ctx: click.Context, truncate: bool) -> None:
    """Generate today's todo file and open it."""
    from .commands.todo_cmd import run_todo_new

    exit_code = run_todo_new(ctx.obj["config"], ctx.obj["editor"], truncate=truncate, now=ctx.obj["now"])
    sys.exit(exit_code)


@todo.command("weekly")
@click.pass_context
def todo_weekly(ctx: click.Context) -> None:
    """Build the weekly diff report of todos and open it."""
    from .commands.todo_cmd import run_todo_weekly

    exit_code = run_todo_weekly(ctx.obj["config"], ctx.obj["editor"], now=ctx.obj["now"])
    sys.exit(exit_code)


# -----------------------------------------------------------------------------
# memo
# -----------------------------------------------------------------------------


@cli.group()
def memo() -> None:
    """Categorised memos."""


@memo.command("new")
@click.argument("title", required=False)
@click.option(
    "--category",
    "-c",
    "categories",
    multiple=True,
    help="Category path component (repeat for nested categories)",
)
@click.pass_context
def memo_new(ctx: click.Context, title: str | None, categories: tuple[str, ...]) -> None:
    """Create a memo; prompts for TITLE when omitted."""
    from .commands.memo_cmd import run_memo_new

    if not title:
        title = click.prompt("Title", default="", show_default=False)
    exit_code = run_memo_new(
        ctx.obj["config"],
        ctx.obj["editor"],
        title,
        categories=list(categories),
        now=ctx.obj["now"],
    )
    sys.exit(exit_code)


@memo.command("list")
@click.option("--full-path", is_flag=True, help="Print absolute paths")
@click.pass_context
def memo_list(ctx: click.Context, full_path: bool) -> None:
    """List every memo as title and path."""
    from .commands.memo_cmd import run_memo_list

    sys.exit(run_memo_list(ctx.obj["config"], full_path=full_path))


@memo.command("search")
@click.argument("query", nargs=-1, required=True)
@click.option("--full-path", is_flag=True, help="Print absolute paths")
@click.option("--context", is_flag=True, help="Print each matching line with its domain")
@click.pass_context
def memo_search(ctx: click.Context, query: tuple[str, ...], full_path: bool, context: bool) -> None:
    """Search memos. Romaji words also match kana and kanji.

    Examples:

        memov memo search meeting notes

        memov memo search kaigi --context
    """
    from .commands.memo_cmd import run_memo_search

    exit_code = run_memo_search(ctx.obj["config"], " ".join(query), full_path=full_path, context=context)
    sys.exit(exit_code)


@memo.command("rename")
@click.argument("path")
@click.argument("new_title")
@click.pass_context
def memo_rename(ctx: click.Context, path: str, new_title: str) -> None:
    """Rename the memo at PATH (relative to the memos directory)."""
    from .commands.memo_cmd import run_memo_rename

    sys.exit(run_memo_rename(ctx.obj["config"], path, new_title))


@memo.command("open")
@click.argument("path")
@click.pass_context
def memo_open(ctx: click.Context, path: str) -> None:
    """Open the memo at PATH in the editor."""
    from .commands.memo_cmd import run_memo_open

    sys.exit(run_memo_open(ctx.obj["config"], ctx.obj["editor"], path))


@memo.command("move")
@click.argument("path")
@click.argument("categories", nargs=-1)
@click.pass_context
def memo_move(ctx: click.Context, path: str, categories: tuple[str, ...]) -> None:
    """Move the memo at PATH under CATEGORIES (none moves it to the root)."""
    from .commands.memo_cmd import run_memo_move

    sys.exit(run_memo_move(ctx.obj["config"], path, list(categories)))


@memo.command("delete")
@click.argument("path")
@click.pass_context
def memo_delete(ctx: click.Context, path: str) -> None:
    """Move the memo at PATH to the trash."""
    from .commands.memo_cmd import run_memo_delete

    sys.exit(run_memo_delete(ctx.obj["config"], path))


@memo.command("duplicate")
@click.argument("path")
@click.pass_context
def memo_duplicate(ctx: click.Context, path: str) -> None:
    """Copy the memo at PATH under a new timestamp."""
    from .commands.memo_cmd import run_memo_duplicate

    sys.exit(run_memo_duplicate(ctx.obj["config"], path, now=ctx.obj["now"]))


@memo.command("categories")
@click.pass_context
def memo_categories(ctx: click.Context) -> None:
    """List known categories, parents before children."""
    from .commands.memo_cmd import run_memo_categories

    sys.exit(run_memo_categories(ctx.obj["config"]))


@memo.command("weekly")
@click.pass_context
def memo_weekly(ctx: click.Context) -> None:
    """Build the weekly memo report and open it."""
    from .commands.memo_cmd import run_memo_weekly

    sys.exit(run_memo_weekly(ctx.obj["config"], ctx.obj["editor"]))


@memo.command("index")
@click.pass_context
def memo_index(ctx: click.Context) -> None:
    """Generate index.md for the memos directory and open it."""
    from .commands.memo_cmd import run_memo_index

    sys.exit(run_memo_index(ctx.obj["config"], ctx.obj["editor"]))


@memo.command("tidy")
@click.pass_context
def memo_tidy(ctx: click.Context) -> None:
    """Move memos to the directories their categories name."""
    from .commands.memo_cmd import run_memo_tidy

    sys.exit(run_memo_tidy(ctx.obj["config"]))


# -----------------------------------------------------------------------------
# config
# -----------------------------------------------------------------------------


@cli.group("config")
def config_group() -> None:
    """Configuration."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the active configuration."""
    from .commands.config_cmd import run_config_show

    sys.exit(run_config_show(ctx.obj["config"]))


@config_group.command("edit")
@click.pass_context
def config_edit(ctx: click.Context) -> None:
    """Open config.toml in the editor."""
    from .commands.config_cmd import run_config_edit

    sys.exit(run_config_edit(ctx.obj["config"], ctx.obj["editor"]))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
