#!/usr/bin/env python3
"""
CellView TUI Application using Textual
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual.app import App
from textual.binding import Binding

from cellview import __version__
from cellview.errors import CellViewError
from cellview.parsing import NOT_JSON, try_parse
from cellview.render import format_json, render_text
from cellview.repair import try_repair
from cellview.scanner import load_table, scan_table
from cellview.settings import SettingsStore
from cellview.tree import iter_containers
from paths import get_log_path, get_tui_path

from .screens import CellsScreen
from .screens.cells._widgets.cell_panel import REPAIRED_LABEL
from .services import CellService

console = Console()
err_console = Console(stderr=True)


def load_css_path_list(path: str) -> list[str]:
    """Load a list of CSS paths"""
    tui_path = Path(path)

    # Use rglob to recursively find all .tcss files
    css_path_list = [str(p) for p in tui_path.rglob("*.tcss")]

    return css_path_list


class CellViewTUI(App):
    """CellView TUI Application"""

    CSS_PATH = load_css_path_list(str(get_tui_path("")))

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
    ]

    def __init__(self, service: CellService):
        super().__init__(ansi_color=True)
        self.service = service

    def on_mount(self) -> None:
        """Show the cells of the input table"""
        self.push_screen(CellsScreen(self.service))

    def action_quit(self) -> None:
        """Quit the application"""
        self.exit()


def configure_logging(log_file: Path) -> None:
    """Send cellview and tui logs to a file, keeping the root logger silent."""
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Clear any existing log file
    with open(log_file, "w") as f:
        f.write("")

    # Set root logger to WARNING to suppress most noise
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[],  # No handlers for root logger
        force=True,
    )

    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    for name in ("cellview", "tui"):
        project_logger = logging.getLogger(name)
        project_logger.setLevel(logging.DEBUG)
        project_logger.propagate = False
        project_logger.handlers.clear()
        project_logger.addHandler(handler)


def _open_store(
    env_file: Path,
    repair: Optional[bool] = None,
    fields: Optional[List[str]] = None,
) -> SettingsStore:
    """Load persisted settings and apply per-run overrides (not saved)."""
    store = SettingsStore(env_file)
    try:
        store.load()
        overrides = {}
        if repair is not None:
            overrides["repair_truncated"] = repair
        if fields:
            overrides["field_names"] = fields
        if overrides:
            store.override(**overrides)
    except CellViewError as e:
        err_console.print(Text(f"Error: {e}", style="bold red"))
        raise typer.Exit(1)
    return store


# CLI interface
app = typer.Typer(help="Beautify and repair JSON in exported table cells")

ENV_FILE_OPTION = typer.Option(Path(".env"), "--env-file", help="Settings file")
REPAIR_OPTION = typer.Option(
    None, "--repair/--no-repair", help="Repair truncated JSON for this run"
)
FIELD_OPTION = typer.Option(
    None, "--field", "-f", help="Column to beautify (repeatable, 'all' for every column)"
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v"),
    debug: bool = typer.Option(False, "--log", "-l", help="Enable debug logging"),
):
    """CellView"""
    if version:
        print(f"CellView v{__version__}")
        raise typer.Exit()

    if debug:
        configure_logging(get_log_path("cellview.log"))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def view(
    path: Path = typer.Argument(..., help="CSV, TSV or JSON Lines file"),
    repair: Optional[bool] = REPAIR_OPTION,
    field: Optional[List[str]] = FIELD_OPTION,
    env_file: Path = ENV_FILE_OPTION,
):
    """Browse the JSON cells of a table interactively."""
    store = _open_store(env_file, repair, field)
    tui = CellViewTUI(CellService(path, store))
    tui.run()


@app.command()
def show(
    path: Path = typer.Argument(..., help="CSV, TSV or JSON Lines file"),
    repair: Optional[bool] = REPAIR_OPTION,
    field: Optional[List[str]] = FIELD_OPTION,
    expand_all: bool = typer.Option(False, "--expand-all", "-e", help="Expand every container"),
    env_file: Path = ENV_FILE_OPTION,
):
    """Print the JSON cells of a table as trees."""
    store = _open_store(env_file, repair, field)
    try:
        scanned = scan_table(load_table(path), store.settings)
    except CellViewError as e:
        err_console.print(Text(f"Error: {e}", style="bold red"))
        raise typer.Exit(1)

    if not scanned:
        console.print(Text("No JSON cells found", style="dim"))
        return

    for item in scanned:
        tree = item.result.tree
        if expand_all:
            for node in iter_containers(tree):
                if not node.expanded:
                    node.toggle()
        repaired = item.result.repaired
        console.print(
            Panel(
                render_text(tree),
                title=Text(f"Row {item.cell.row} · {item.cell.column}"),
                title_align="left",
                subtitle=Text(REPAIRED_LABEL, style="bold yellow") if repaired else None,
                subtitle_align="left",
                border_style="yellow" if repaired else "green",
                padding=(0, 1),
            )
        )


@app.command()
def repair(
    text: str = typer.Argument(..., help="Candidate JSON text, or '-' to read stdin"),
):
    """Print truncated JSON repaired and pretty-printed."""
    if text == "-":
        text = sys.stdin.read()

    value = try_parse(text)
    if value is NOT_JSON:
        outcome = try_repair(text)
        if not outcome:
            err_console.print(Text("Could not repair JSON", style="bold red"))
            raise typer.Exit(1)
        value = outcome.value
        err_console.print(Text(REPAIRED_LABEL, style="bold yellow"))

    typer.echo(format_json(value))


@app.command()
def config(
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Turn beautifying on or off"),
    repair: Optional[bool] = typer.Option(
        None, "--repair/--no-repair", help="Repair truncated JSON"
    ),
    add_field: Optional[List[str]] = typer.Option(None, "--add-field", help="Add a field name"),
    remove_field: Optional[List[str]] = typer.Option(
        None, "--remove-field", help="Remove a field name"
    ),
    add_source: Optional[List[str]] = typer.Option(None, "--add-source", help="Add a source pattern"),
    remove_source: Optional[List[str]] = typer.Option(
        None, "--remove-source", help="Remove a source pattern"
    ),
    env_file: Path = ENV_FILE_OPTION,
):
    """Show or change the saved settings."""
    store = _open_store(env_file)
    try:
        if enable is not None:
            store.update(enabled=enable)
        if repair is not None:
            store.update(repair_truncated=repair)
        for name, added, removed in (
            ("field_names", add_field, remove_field),
            ("source_patterns", add_source, remove_source),
        ):
            for value in added or []:
                store.add_item(name, value)
            for value in removed or []:
                current = getattr(store.settings, name)
                if value in current:
                    store.remove_item(name, current.index(value))
    except CellViewError as e:
        err_console.print(Text(f"Error: {e}", style="bold red"))
        raise typer.Exit(1)

    settings = store.settings
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="cyan")
    table.add_row("Enabled", str(settings.enabled))
    table.add_row("Repair truncated JSON", str(settings.repair_truncated))
    table.add_row("Field names", Text(", ".join(settings.field_names) or "-"))
    table.add_row("Source patterns", Text(", ".join(settings.source_patterns) or "-"))
    console.print(table)


if __name__ == "__main__":
    app()
