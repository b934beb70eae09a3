"""
Row adapters: mappings built from row-oriented record sources.

RowCollectionMappingValidator projects a column out of one or more rows on
either side (or takes literal values) and compares the resulting
collections. RowMappingValidator compares a single column of one row against
a single column of another with a scalar validator.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from datamapping.flags import FlagDefaults
from datamapping.validators.base import DataMappingValidator, EquivalenceOracle
from datamapping.validators.collection import CollectionMappingValidator
from datamapping.validators.kinds import ValueKind, create_validator

from .source import RowSource, column_label

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "UNKNOWN"


def _split_side(value: Any, column: Any, side: str) -> tuple[list, list]:
    """
    Split one side of a mapping into rows or literal values

    Returns:
        (rows, literal_values); exactly one of them is used
    """
    if isinstance(value, RowSource):
        rows = [value]
    elif isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return [], [value]
    else:
        items = list(value)
        row_count = sum(isinstance(item, RowSource) for item in items)
        if row_count == 0:
            return [], items
        if row_count != len(items):
            raise ValueError(f"The {side} mixes rows and literal values")
        rows = items

    if column is None:
        raise ValueError(f"A {side} column is required when the {side} is given as rows")
    return rows, []


def _side_name(rows: list, values: list, column: Any) -> str:
    if rows:
        name = rows[0].full_table_name
    elif len(values) == 1:
        name = f'"{values[0]}"'
    else:
        name = UNKNOWN_NAME

    if column is not None:
        name += f"#{column_label(column)}"
    return name


class RowCollectionMappingValidator(CollectionMappingValidator):
    """
    Collection mapping whose sides come from rows or literal values.

    Each side may be a single row, an iterable of rows, a list of literal
    values or a single literal value. Destination rows are kept in
    `destination_rows` so that consolidate_on_destination() can group
    mappings that read the same rows.

    Flags are the given CollectionFlags plus both the `collection` and
    `row_collection` defaults.

    Example:
        >>> mapping = RowCollectionMappingValidator(
        ...     source_rows, destination_rows,
        ...     source_column="customer_id", destination_column="cust_id",
        ... )
        >>> mapping.mapping_name
        'dbo.customers#customer_id -> public.customers#cust_id'
    """

    family = "row_collection"

    def __init__(
        self,
        source: Any,
        destination: Any,
        *flags: Enum,
        source_column: Any = None,
        destination_column: Any = None,
        mapping_name: str | None = None,
        defaults: FlagDefaults | None = None,
    ):
        """
        Args:
            source: Row, rows, literal values or a literal value
            destination: Row, rows, literal values or a literal value
            *flags: CollectionFlag members
            source_column: Column read from source rows
            destination_column: Column read from destination rows
            mapping_name: Explicit label; None derives one from the sides
            defaults: Flag defaults

        Raises:
            ValueError: If rows are given without a column, a side mixes rows
                and literals, or the flags are invalid
        """
        defaults = defaults or FlagDefaults()

        source_rows, source_values = _split_side(source, source_column, "source")
        destination_rows, destination_values = _split_side(
            destination, destination_column, "destination"
        )

        if mapping_name is None:
            mapping_name = (
                f"{_side_name(source_rows, source_values, source_column)} -> "
                f"{_side_name(destination_rows, destination_values, destination_column)}"
            )

        if source_rows:
            source_values = [row.get_column_value(source_column) for row in source_rows]
        if destination_rows:
            destination_values = [
                row.get_column_value(destination_column) for row in destination_rows
            ]

        super().__init__(
            source_values,
            destination_values,
            *flags,
            mapping_name=mapping_name,
            defaults=FlagDefaults(collection=defaults.collection | defaults.row_collection),
        )

        self.source_column = source_column
        self.destination_column = destination_column
        self.destination_rows = list(destination_rows)

        logger.debug(
            f"Built row collection mapping {self}: "
            f"{len(self.source_values)} source value(s), "
            f"{len(self.destination_values)} destination value(s)"
        )

    def convert_source_values_to_string(self) -> "RowCollectionMappingValidator":
        """Replace every non-null source value with its str() form, in place."""
        _stringify(self.source_values)
        return self

    def convert_destination_values_to_string(self) -> "RowCollectionMappingValidator":
        """Replace every non-null destination value with its str() form, in place."""
        _stringify(self.destination_values)
        return self


def _stringify(values: list) -> None:
    for index, value in enumerate(values):
        if value is not None:
            values[index] = str(value)


class RowMappingValidator(DataMappingValidator):
    """
    Compare one column of a source row with one column of a destination row.

    The comparison is delegated to the scalar validator family named by
    `kind`; flags must belong to that family.
    """

    family = "row"

    def __init__(
        self,
        kind: ValueKind,
        source_row: RowSource,
        source_column: Any,
        destination_row: RowSource,
        destination_column: Any,
        *flags: Enum,
        mapping_name: str | None = None,
        defaults: FlagDefaults | None = None,
    ):
        if not isinstance(source_row, RowSource) or not isinstance(destination_row, RowSource):
            raise ValueError("RowMappingValidator requires a source row and a destination row")

        if mapping_name is None:
            mapping_name = (
                f"{source_row.full_table_name}#{column_label(source_column)} -> "
                f"{destination_row.full_table_name}#{column_label(destination_column)}"
            )
        super().__init__(mapping_name)

        self.kind = kind
        self.source_row = source_row
        self.source_column = source_column
        self.destination_row = destination_row
        self.destination_column = destination_column

        self._validator = create_validator(
            kind,
            source_row.get_column_value(source_column),
            destination_row.get_column_value(destination_column),
            *flags,
            mapping_name=self.mapping_name,
            defaults=defaults,
        )

    @property
    def source_value(self) -> Any:
        return self._validator.source_value

    @property
    def destination_value(self) -> Any:
        return self._validator.destination_value

    @property
    def mapping_flags(self) -> frozenset:
        return self._validator.mapping_flags

    def set_comparator(self, comparator: EquivalenceOracle | None) -> "RowMappingValidator":
        super().set_comparator(comparator)

        if comparator is None:
            self._validator.set_comparator(None)
        else:
            # The oracle sees this mapping, not the inner scalar validator
            self._validator.set_comparator(
                lambda _inner, source, destination: comparator(self, source, destination)
            )
        return self

    def _validate(self) -> str | None:
        return self._validator._validate()
