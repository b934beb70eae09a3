"""
Row-oriented mappings

Adapters that build mappings from rows (any object with `full_table_name`
and `get_column_value()`), plus the consolidation pass over them.
"""

from .adapter import RowCollectionMappingValidator, RowMappingValidator
from .consolidate import consolidate_on_destination
from .source import Row, RowSource, column_label, determine_row_differences

__all__ = [
    "RowSource",
    "Row",
    "column_label",
    "determine_row_differences",
    "RowCollectionMappingValidator",
    "RowMappingValidator",
    "consolidate_on_destination",
]
