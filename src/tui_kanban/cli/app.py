"""Typer CLI application."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from tui_kanban import __version__
from tui_kanban.config import Config
from tui_kanban.core.errors import KanbanError

PathOption = Annotated[
    Optional[Path],
    typer.Option("--path", "-p", help="Board file (default: per-user data directory)"),
]


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="tui-kanban",
        help="Keyboard-driven kanban boards in the terminal.",
        rich_markup_mode="rich",
    )
    console = Console()
    err_console = Console(stderr=True)

    def load_config(path: Optional[Path]) -> Config:
        return Config.from_env().with_overrides(save_path=path.expanduser() if path else None)

    @app.callback(invoke_without_command=True)
    def default(ctx: typer.Context) -> None:
        """Open the board when no command is given."""
        if ctx.invoked_subcommand is None:
            ctx.invoke(run)

    @app.command()
    def run(
        path: PathOption = None,
        reset: Annotated[bool, typer.Option("--reset", help="Start empty; the board file is replaced on save")] = False,
        no_update_check: Annotated[bool, typer.Option("--no-update-check", help="Skip the new version check")] = False,
    ) -> None:
        """Open the interactive board."""
        from tui_kanban.cli.logging_setup import configure_logging
        from tui_kanban.cli.runner import run_board
        from tui_kanban.engine import Engine

        config = load_config(path)
        configure_logging(config.log_path, config.log_level)
        engine = Engine(config)
        run_board(engine, reset=reset, check_updates=not no_update_check)
        if engine.dirty:
            err_console.print(f"[yellow]Some changes could not be saved to {engine.save_path}[/]")
            raise typer.Exit(1)

    @app.command()
    def export(
        path: PathOption = None,
        output: Annotated[Path, typer.Option("--output", "-o", help="File or directory for the export")] = Path("."),
    ) -> None:
        """Export every board as readable JSON."""
        from tui_kanban.io import export_json, load_state

        config = load_config(path)
        try:
            state = load_state(config.save_path)
            written = export_json(state, output, __version__)
        except KanbanError as e:
            err_console.print(f"[red]Export failed:[/] {e}")
            raise typer.Exit(1)
        console.print(f"[green]Exported {len(state.boards)} board(s) → {written}[/]")

    @app.command()
    def info(
        path: PathOption = None,
        json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    ) -> None:
        """Show what a board file contains."""
        from tui_kanban.io.reader import read_bytes
        from tui_kanban.savefile import read_header, state_from_bytes

        config = load_config(path)
        try:
            data = read_bytes(config.save_path)
            if data is None:
                err_console.print(f"[yellow]No board file at {config.save_path}[/]")
                raise typer.Exit(1)
            header = read_header(data)
            state = state_from_bytes(data)
        except KanbanError as e:
            err_console.print(f"[red]Cannot read {config.save_path}:[/] {e}")
            raise typer.Exit(1)

        summary = {
            "path": str(config.save_path),
            "schema_version": header.schema_version,
            "boards": len(state.boards),
            "lists": len(state.lists),
            "cards": len(state.cards),
            "tags": len(state.tags),
        }
        if json_output:
            print(json.dumps(summary, indent=2))
            return

        console.print(f"[bold cyan]{config.save_path}[/]  (schema v{header.schema_version})")
        if not header.is_current:
            console.print("  [dim]Older format; upgraded on the next save[/]")
        table = Table("Board", "Lists", "Cards")
        for board in state.board_order():
            cards = sum(len(state.lists[list_id].card_ids) for list_id in board.list_ids)
            table.add_row(board.name, str(len(board.list_ids)), str(cards))
        console.print(table)
        console.print(f"  [bold]Tags:[/] {summary['tags']}")

    @app.command()
    def keys(
        write: Annotated[bool, typer.Option("--write", help="Write the default bindings to the key bindings file")] = False,
        force: Annotated[bool, typer.Option("--force", help="Replace an existing key bindings file")] = False,
    ) -> None:
        """Show the board key bindings, or write the defaults for editing."""
        from tui_kanban.engine import Mode
        from tui_kanban.engine.keymap import default_keybindings, load_shortcuts, write_keybindings

        target = Config.from_env().keybindings_path
        if write:
            if target.exists() and not force:
                err_console.print(f"[yellow]{target} already exists; use --force to replace it[/]")
                raise typer.Exit(1)
            try:
                write_keybindings(target, default_keybindings())
            except KanbanError as e:
                err_console.print(f"[red]Cannot write key bindings:[/] {e}")
                raise typer.Exit(1)
            console.print(f"[green]Wrote default key bindings → {target}[/]")
            return

        try:
            registry = load_shortcuts(target)
        except KanbanError as e:
            err_console.print(f"[red]{target}:[/] {e}")
            raise typer.Exit(1)
        table = Table("Action", "Keys", "Description")
        for shortcut in registry.for_mode(Mode.BOARD):
            table.add_row(shortcut.id, shortcut.key_display, shortcut.description)
        console.print(table)

    return app
