"""Screen listing every beautified cell of the input table."""

from typing import FrozenSet, List

from textual import work
from textual.worker import get_current_worker
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import Screen
from textual.widgets import Static

from cellview.errors import CellViewError
from cellview.scanner import ScannedCell
from cellview.settings import Settings
from tui.services import CellService

from ...widgets.instruction_text import InstructionText
from ._widgets import CellPanel


class CellsScreen(Screen):
    """Main screen: one panel per JSON cell."""

    BINDINGS = [
        Binding("ctrl+c", "app.quit", "Quit", priority=True),
        Binding("s", "open_settings", "Settings"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(self, service: CellService):
        super().__init__()
        self.service = service

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self.service.source, classes="header", markup=False),
            VerticalScroll(id="cells-container"),
            InstructionText("↑/↓ move · Enter toggle · c copy · s settings · r reload"),
            classes="main-container",
        )

    def on_mount(self) -> None:
        """Scan the table and follow settings changes."""
        self.cells_container = self.query_one("#cells-container", VerticalScroll)
        self.service.store.subscribe(self.on_settings_changed)
        self.load_cells()

    def on_unmount(self) -> None:
        self.service.store.unsubscribe(self.on_settings_changed)

    def on_settings_changed(self, settings: Settings, changed: FrozenSet[str]) -> None:
        """Any settings change reprocesses every cell from scratch."""
        self.load_cells()

    @work(thread=True, exclusive=True)
    def load_cells(self) -> None:
        """Scan the table in a worker thread"""
        worker = get_current_worker()
        try:
            scanned = self.service.scan()
        except CellViewError as e:
            self.app.call_from_thread(
                self.app.notify, str(e), title="Cannot load cells", severity="error"
            )
            return
        # A newer scan replaced this one
        if worker.is_cancelled:
            return
        self.app.call_from_thread(self.show_cells, scanned)

    async def show_cells(self, scanned: List[ScannedCell]) -> None:
        await self.cells_container.remove_children()
        if not scanned:
            await self.cells_container.mount(
                Static("No JSON cells found", classes="empty-message")
            )
            return
        await self.cells_container.mount_all(CellPanel(item) for item in scanned)

    def action_reload(self) -> None:
        self.load_cells()

    def action_open_settings(self) -> None:
        from ..settings.settings_screen import SettingsScreen

        self.app.push_screen(SettingsScreen(self.service.store))
