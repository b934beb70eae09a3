"""
Row-oriented record sources.

RowSource is the only thing the row adapters need from a data-access layer:
a qualified table name and a way to read a column value. Row is a simple
in-memory implementation.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RowSource(Protocol):
    """A single record that can be read by column."""

    @property
    def full_table_name(self) -> str:
        ...

    def get_column_value(self, column: Any) -> Any:
        ...


def column_label(column: Any) -> str:
    """Render a column for mapping names: enum members by name, anything else by str()."""
    if isinstance(column, Enum):
        return column.name
    return str(column)


class Row:
    """
    In-memory row backed by a mapping of column name to value.

    Rows compare by identity; two rows holding equal values are still
    different rows. Use differences() to compare contents.
    """

    def __init__(self, table: str, values: Mapping[str, Any], schema: str | None = None):
        self.table = table
        self.schema = schema
        self.values = dict(values)

    @property
    def full_table_name(self) -> str:
        if self.schema:
            return f"{self.schema}.{self.table}"
        return self.table

    def get_column_value(self, column: Any) -> Any:
        """
        Read a column value

        Args:
            column: Column name, or an Enum member whose name is the column

        Raises:
            KeyError: If the row has no such column
        """
        key = column_label(column)
        if key not in self.values:
            raise KeyError(f"Column {key!r} not found in {self.full_table_name}")
        return self.values[key]

    def differences(self, other: "Row", ignore_columns: Iterable[Any] = ()) -> set[str]:
        """
        Columns whose values differ between this row and another

        A column present in only one of the rows counts as a difference.
        """
        ignored = {column_label(column) for column in ignore_columns}
        columns = (set(self.values) | set(other.values)) - ignored
        return {
            column
            for column in columns
            if column not in self.values
            or column not in other.values
            or self.values[column] != other.values[column]
        }

    def __repr__(self) -> str:
        return f"Row(table={self.full_table_name!r}, values={self.values!r})"


def determine_row_differences(
    rows_a: Iterable[Row],
    rows_b: Iterable[Row],
    ignore_columns: Iterable[Any] = (),
) -> list[str]:
    """
    Describe how two collections of rows differ, ignoring row order

    Each row of the first collection claims the first unclaimed row of the
    second collection with no differing columns.

    Args:
        rows_a: First collection
        rows_b: Second collection
        ignore_columns: Columns excluded from the comparison

    Returns:
        List of difference descriptions; empty when the collections match

    Raises:
        ValueError: If either collection is None
    """
    if rows_a is None or rows_b is None:
        raise ValueError("Row collections cannot be None")

    rows_a = list(rows_a)
    remaining = list(rows_b)
    ignore_columns = list(ignore_columns)
    diffs = []

    if len(rows_a) != len(remaining):
        diffs.append(
            f"Collection Sizes do not match! "
            f"[Collection1 ({len(rows_a)}) != Collection2 ({len(remaining)})]"
        )

    for row_a in rows_a:
        for index, row_b in enumerate(remaining):
            if not row_a.differences(row_b, ignore_columns):
                del remaining[index]
                break
        else:
            diffs.append(f"Collection 1 row could not be found in Collection 2: {row_a!r}")

    for row_b in remaining:
        diffs.append(f"Collection 2 row could not be found in Collection 1: {row_b!r}")

    return diffs
