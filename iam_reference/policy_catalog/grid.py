"""Sparse HTML table to dense grid resolution."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class TableError(ValueError):
    """A table could not be turned into records; carries where it happened."""

    def __init__(self, message: str, *, table: str, row_index: int) -> None:
        super().__init__(f"{table} row {row_index}: {message}")
        self.table = table
        self.row_index = row_index


class MalformedSpanError(TableError):
    pass


@dataclass(frozen=True)
class Cell:
    """One ``<td>`` with its span counts. A span of 0 means "to the end"."""

    rowspan: int = 1
    colspan: int = 1
    text: str = ""


def parse_span(
    value: str | None,
    *,
    row_index: int,
    attribute: str = "rowspan",
    table: str = "table",
) -> int:
    """Parse a ``rowspan``/``colspan`` attribute; an absent attribute is 1."""
    if value is None:
        return 1
    try:
        span = int(value)
    except ValueError:
        span = -1
    if span < 0:
        raise MalformedSpanError(
            f"{attribute} {value!r} is not a non-negative integer",
            table=table,
            row_index=row_index,
        )
    return span


def _check_spans(rows: Sequence[Sequence[Cell]], table: str) -> None:
    for row_index, row in enumerate(rows):
        for cell in row:
            for attribute in ("rowspan", "colspan"):
                span = getattr(cell, attribute)
                if isinstance(span, bool) or not isinstance(span, int) or span < 0:
                    raise MalformedSpanError(
                        f"{attribute} {span!r} is not a non-negative integer",
                        table=table,
                        row_index=row_index,
                    )


def count_columns(rows: Sequence[Sequence[Cell]]) -> int:
    """Return the grid width needed to hold ``rows``.

    The colspan of each row's last cell is ignored (counted as 1) so that a
    trailing span cannot create phantom columns with no real cells. Zero
    colspans on earlier cells count as 1 as well.
    """
    row_count = len(rows)
    open_rowspans: list[int] = []
    col_count = 0
    for row_index, row in enumerate(rows):
        width = sum(max(cell.colspan, 1) for cell in row[:-1])
        if row:
            width += 1
        width += len(open_rowspans)
        col_count = max(col_count, width)

        for cell in row:
            open_rowspans.append(cell.rowspan if cell.rowspan else row_count - row_index)
        open_rowspans = [span - 1 for span in open_rowspans if span > 1]
    return col_count


def resolve_grid(rows: Sequence[Sequence[Cell]], *, table: str = "table") -> list[list[str]]:
    """Expand span-annotated rows into a rectangular grid of strings.

    Row spans still open after the last row are dropped; positions no cell
    covers are left as empty strings.
    """
    _check_spans(rows, table)
    row_count = len(rows)
    col_count = count_columns(rows)
    grid = [["" for _ in range(col_count)] for _ in range(row_count)]

    # column -> rows still covered by a cell from an earlier row
    pending: dict[int, int] = {}
    for row_index, row in enumerate(rows):
        span_offset = 0
        for cell_index, cell in enumerate(row):
            column = cell_index + span_offset
            while pending.get(column, 0):
                span_offset += 1
                column += 1

            rowspan = cell.rowspan or row_count - row_index
            colspan = cell.colspan or col_count - column
            pending[column] = rowspan
            span_offset += colspan - 1

            for target_row in range(row_index, min(row_index + rowspan, row_count)):
                for target_col in range(column, min(column + colspan, col_count)):
                    grid[target_row][target_col] = cell.text
                    pending[target_col] = rowspan

        pending = {column: span - 1 for column, span in pending.items() if span > 1}

    logger.debug("Resolved %s into %d x %d grid", table, row_count, col_count)
    return grid
