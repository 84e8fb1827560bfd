"""Panel showing one beautified cell."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from cellview.scanner import ScannedCell

from .json_tree_view import JsonTreeView

REPAIRED_LABEL = "Truncated JSON (repaired)"


class CellPanel(Vertical):
    """Header, optional repaired badge and the tree view of a cell."""

    def __init__(self, scanned: ScannedCell, **kwargs):
        super().__init__(**kwargs)
        self.scanned = scanned
        self.add_class("cell-panel")
        if scanned.result.repaired:
            self.add_class("repaired")

    def compose(self) -> ComposeResult:
        cell = self.scanned.cell
        yield Static(f"Row {cell.row} · {cell.column}", classes="cell-header", markup=False)
        if self.scanned.result.repaired:
            yield Static(REPAIRED_LABEL, classes="repaired-badge")
        yield JsonTreeView(self.scanned.result, classes="json-tree")
