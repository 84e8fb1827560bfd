"""Find candidate JSON cells in exported tables.

Columns are selected by configured field names: an exact match, a column id
ending with the name, or a header containing it. The name ``all`` selects
every column.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Union

from .errors import InputFormatError
from .pipeline import BeautifyResult, beautify
from .settings import Settings

logger = logging.getLogger(__name__)

AUTO_DETECT_KEYWORD = "all"
_SUPPORTED_SUFFIXES = (".csv", ".tsv", ".jsonl", ".ndjson")


@dataclass
class Table:
    """Rows of cell text under a header row."""

    source: str
    headers: List[str]
    rows: List[List[str]]


@dataclass(frozen=True)
class Cell:
    row: int
    column: str
    text: str


@dataclass
class ScannedCell:
    """A candidate cell and its beautified value."""

    cell: Cell
    result: BeautifyResult


def load_table(path: Union[str, Path]) -> Table:
    """Load a CSV, TSV or JSON Lines file.

    Raises:
        InputFormatError: If the file is missing, unreadable or of an
            unsupported type.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in _SUPPORTED_SUFFIXES:
        raise InputFormatError(f"Unsupported file type: {path.suffix or path.name}")
    try:
        with open(path, encoding="utf-8", newline="") as f:
            if suffix in (".jsonl", ".ndjson"):
                return _read_json_lines(str(path), f)
            return _read_delimited(str(path), f, "\t" if suffix == ".tsv" else ",")
    except OSError as e:
        raise InputFormatError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InputFormatError(f"{path} is not UTF-8 text") from e


def _read_delimited(source: str, lines: Iterable[str], delimiter: str) -> Table:
    reader = csv.reader(lines, delimiter=delimiter)
    try:
        headers = next(reader)
    except StopIteration:
        return Table(source=source, headers=[], rows=[])
    except csv.Error as e:
        raise InputFormatError(f"{source}: {e}") from e
    try:
        rows = [row for row in reader]
    except csv.Error as e:
        raise InputFormatError(f"{source}: {e}") from e
    return Table(source=source, headers=headers, rows=rows)


def _read_json_lines(source: str, lines: Iterable[str]) -> Table:
    headers: List[str] = []
    records = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise InputFormatError(f"{source}:{number}: invalid JSON line ({e.msg})") from e
        except RecursionError as e:
            raise InputFormatError(f"{source}:{number}: JSON line nested too deeply") from e
        if not isinstance(record, dict):
            raise InputFormatError(f"{source}:{number}: expected an object per line")
        for key in record:
            if key not in headers:
                headers.append(key)
        records.append(record)

    rows = [[_cell_text(record.get(header)) for header in headers] for record in records]
    return Table(source=source, headers=headers, rows=rows)


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def auto_detect_all(field_names: Sequence[str]) -> bool:
    return any(name.lower() == AUTO_DETECT_KEYWORD for name in field_names)


def matches_field(column: str, field_names: Sequence[str]) -> bool:
    return any(
        column == name or column.endswith(name) or name in column
        for name in field_names
        if name
    )


def matching_columns(headers: Sequence[str], field_names: Sequence[str]) -> List[int]:
    """Indices of the columns selected by the field names."""
    if auto_detect_all(field_names):
        return list(range(len(headers)))
    return [index for index, header in enumerate(headers) if matches_field(header.strip(), field_names)]


def matches_source(source: str, patterns: Sequence[str]) -> bool:
    """True if any pattern occurs in source. No patterns match nothing."""
    return any(pattern in source for pattern in patterns if pattern)


def iter_candidate_cells(table: Table, field_names: Sequence[str]) -> Iterator[Cell]:
    """Yield cells of the selected columns, row by row. Header cells are skipped."""
    columns = matching_columns(table.headers, field_names)
    for row_number, row in enumerate(table.rows, start=1):
        for index in columns:
            if index < len(row):
                yield Cell(row=row_number, column=table.headers[index], text=row[index])


def scan_table(table: Table, settings: Settings) -> List[ScannedCell]:
    """Beautify every candidate cell the settings select.

    Cells that are not JSON (and cannot be repaired, when repair is on) are
    left out; their text stays as it is.
    """
    if not settings.enabled:
        logger.debug("Beautifying disabled, skipping %s", table.source)
        return []
    if not matches_source(table.source, settings.source_patterns):
        logger.debug("No source pattern matches %s", table.source)
        return []
    if not settings.field_names:
        return []

    scanned = []
    for cell in iter_candidate_cells(table, settings.field_names):
        result = beautify(cell.text, repair_enabled=settings.repair_truncated)
        if result is not None:
            scanned.append(ScannedCell(cell=cell, result=result))
    logger.info(
        "Scanned %s: %d JSON cells (%d repaired)",
        table.source,
        len(scanned),
        sum(1 for item in scanned if item.result.repaired),
    )
    return scanned

