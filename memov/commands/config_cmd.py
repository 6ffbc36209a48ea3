"""`memov config` commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ..config import Config, default_config_path


def run_config_show(config: Config) -> int:
    console = Console()
    table = Table(title="Configuration")
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("value")

    table.add_row("config file", str(config.path or default_config_path()))
    table.add_row("base_dir", str(config.base_dir))
    table.add_row("todos_dir", str(config.todos_dir))
    table.add_row("memos_dir", str(config.memos_dir))
    table.add_row("todos_daystoseek", str(config.todos_daystoseek))

    console.print(table)
    return 0


def run_config_edit(config: Config, editor) -> int:
    path = config.path or default_config_path()
    editor.open(config.base_dir, path)
    return 0
