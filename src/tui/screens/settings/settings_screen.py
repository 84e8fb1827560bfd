"""Settings screen: what to beautify and whether to repair truncated JSON."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Input, Label, Static, Switch

from cellview.errors import SettingsError
from cellview.settings import SettingsStore, parse_list

from ...widgets.instruction_text import InstructionText


class SettingsScreen(Screen):
    """Edit and save settings. Saving reprocesses every cell."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, store: SettingsStore):
        super().__init__()
        self.store = store

    def compose(self) -> ComposeResult:
        settings = self.store.settings
        yield Container(
            Static("Settings", classes="header"),
            Horizontal(
                Label("Enabled"),
                Switch(value=settings.enabled, id="enabled"),
                classes="setting-row",
            ),
            Horizontal(
                Label("Repair truncated JSON"),
                Switch(value=settings.repair_truncated, id="repair_truncated"),
                classes="setting-row",
            ),
            Label("Field names (comma separated, 'all' for every column)"),
            Input(value=", ".join(settings.field_names), id="field_names"),
            Label("Source patterns (comma separated)"),
            Input(value=", ".join(settings.source_patterns), id="source_patterns"),
            InstructionText("Ctrl+S to save · Esc to cancel"),
            classes="settings-container",
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in either input"""
        self.action_save()

    def action_save(self) -> None:
        """Save settings and return to the cells"""
        try:
            changed = self.store.update(
                enabled=self.query_one("#enabled", Switch).value,
                repair_truncated=self.query_one("#repair_truncated", Switch).value,
                field_names=parse_list(self.query_one("#field_names", Input).value),
                source_patterns=parse_list(self.query_one("#source_patterns", Input).value),
            )
        except SettingsError as e:
            self.notify(str(e), title="Invalid settings", severity="error")
            return
        if changed:
            self.notify("Settings saved")
        self.app.pop_screen()

    def action_cancel(self) -> None:
        self.app.pop_screen()
