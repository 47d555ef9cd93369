"""Aligned plain-text tables for heterogeneous records.

Widths are measured in terminal cells with ``rich.cells.cell_len`` so wide
glyphs (CJK ideographs, full-width punctuation) line up in monospace output.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import Any

from rich.cells import cell_len

GAP = 2
"""Blank cells between two columns."""


def record_fields(record: Any) -> list[str]:
    """Field names of a record in declaration order."""
    match record:
        case Mapping():
            return [str(k) for k in record]
        case _ if dataclasses.is_dataclass(record) and not isinstance(record, type):
            return [f.name for f in dataclasses.fields(record)]
        case _ if hasattr(record, "__dict__"):
            return list(vars(record))
        case _:
            raise TypeError(f"Expected a record, got {type(record).__name__}")


def _cell(record: Any, column: str) -> str:
    if isinstance(record, Mapping):
        value = record.get(column)
    elif dataclasses.is_dataclass(record) or hasattr(record, "__dict__"):
        value = getattr(record, column, None)
    else:
        raise TypeError(f"Expected a record, got {type(record).__name__}")
    return "" if value is None else str(value)


def _pad(text: str, width: int) -> str:
    return text + " " * max(width - cell_len(text), 0)


def render_table(rows: Sequence[Any], columns: Sequence[str] | None = None) -> str:
    """Render records as a left-aligned table with a header line.

    Args:
        rows: Records (dataclasses, mappings or plain objects).
        columns: Column names in display order. Defaults to the fields of the
            first record.

    Raises:
        TypeError: If rows is not a sequence of records.
    """
    if isinstance(rows, str | bytes | Mapping) or not isinstance(rows, Sequence):
        raise TypeError(f"render_table expects a sequence of records, got {type(rows).__name__}")

    header = list(columns) if columns is not None else (record_fields(rows[0]) if rows else [])
    if not header:
        return ""

    cells = [[_cell(row, col) for col in header] for row in rows]
    widths = [
        max([cell_len(col), *(cell_len(line[i]) for line in cells)]) + GAP
        for i, col in enumerate(header)
    ]

    lines = ["".join(_pad(col, w) for col, w in zip(header, widths, strict=True))]
    lines.extend(
        "".join(_pad(text, w) for text, w in zip(line, widths, strict=True)) for line in cells
    )
    return "\n".join(lines) + "\n"
