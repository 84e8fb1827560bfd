"""Service loading a table and beautifying its cells for the UI."""

import logging
from pathlib import Path
from typing import List, Union

from cellview.scanner import ScannedCell, load_table, scan_table
from cellview.settings import SettingsStore

logger = logging.getLogger(__name__)


class CellService:
    """Reads the input table and scans it with the current settings."""

    def __init__(self, path: Union[str, Path], store: SettingsStore):
        """Initialize the service.

        Args:
            path: CSV, TSV or JSON Lines file to read
            store: Settings store consulted on every scan
        """
        self.path = Path(path)
        self.store = store

    @property
    def source(self) -> str:
        return str(self.path)

    def scan(self) -> List[ScannedCell]:
        """Re-read the file and build fresh trees for every JSON cell.

        Raises:
            InputFormatError: If the file cannot be read.
        """
        table = load_table(self.path)
        logger.debug("Loaded %d rows from %s", len(table.rows), self.path)
        return scan_table(table, self.store.settings)
