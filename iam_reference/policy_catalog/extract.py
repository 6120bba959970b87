"""Turn resolved grids into typed records, one function per table kind."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .grid import TableError
from .models import (
    ActionRecord,
    ConditionKeyRecord,
    ResourceTypeRecord,
    ResourceTypeReference,
)

logger = logging.getLogger(__name__)

ACTIONS_TABLE = "actions"
RESOURCE_TYPES_TABLE = "resource types"
CONDITION_KEYS_TABLE = "condition keys"

TABLE_WIDTHS = {
    ACTIONS_TABLE: 6,
    RESOURCE_TYPES_TABLE: 3,
    CONDITION_KEYS_TABLE: 3,
}

REQUIRED_MARKER = "*"


class ColumnShapeError(TableError):
    """A grid row is narrower than its table kind; usually a span resolution drift."""

    def __init__(self, *, table: str, row_index: int, expected: int, actual: int) -> None:
        super().__init__(
            f"expected at least {expected} columns, got {actual}",
            table=table,
            row_index=row_index,
        )
        self.expected = expected
        self.actual = actual


def cleanup_list(values: Iterable[str]) -> list[str]:
    """Trim each entry and drop the empty ones."""
    result: list[str] = []
    for value in values:
        cleaned = value.strip()
        if cleaned:
            result.append(cleaned)
    return result


def split_cell(value: str) -> list[str]:
    return cleanup_list(value.split("\n"))


def parse_resource_type_reference(entry: str) -> ResourceTypeReference:
    if entry.endswith(REQUIRED_MARKER):
        return ResourceTypeReference(name=entry.rstrip(REQUIRED_MARKER).strip(), required=True)
    return ResourceTypeReference(name=entry, required=False)


def _checked_rows(grid: Sequence[Sequence[str]], table: str) -> Iterable[Sequence[str]]:
    expected = TABLE_WIDTHS[table]
    for row_index, row in enumerate(grid):
        if len(row) < expected:
            logger.error("Row %d of %s table has %d columns", row_index, table, len(row))
            raise ColumnShapeError(
                table=table, row_index=row_index, expected=expected, actual=len(row)
            )
        yield row


def extract_actions(grid: Sequence[Sequence[str]]) -> list[ActionRecord]:
    actions: list[ActionRecord] = []
    for row in _checked_rows(grid, ACTIONS_TABLE):
        actions.append(
            ActionRecord(
                name=row[0].strip(),
                description=row[1].strip(),
                access_level=row[2].strip(),
                resource_type_refs=tuple(
                    parse_resource_type_reference(entry) for entry in split_cell(row[3])
                ),
                condition_key_names=tuple(split_cell(row[4])),
                dependent_action_names=tuple(split_cell(row[5])),
            )
        )
    return actions


def extract_resource_types(grid: Sequence[Sequence[str]]) -> list[ResourceTypeRecord]:
    return [
        ResourceTypeRecord(
            name=row[0].strip(),
            arn=row[1].strip(),
            condition_key_names=tuple(split_cell(row[2])),
        )
        for row in _checked_rows(grid, RESOURCE_TYPES_TABLE)
    ]


def extract_condition_keys(grid: Sequence[Sequence[str]]) -> list[ConditionKeyRecord]:
    return [
        ConditionKeyRecord(
            name=row[0].strip(),
            description=row[1].strip(),
            type=row[2].strip(),
        )
        for row in _checked_rows(grid, CONDITION_KEYS_TABLE)
    ]
