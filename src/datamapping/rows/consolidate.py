"""
Consolidation of row collection mappings that share a destination.

Several mappings often check different sources against the same destination
rows and column. Consolidating them first yields one mapping (and one report
entry) per destination instead of many fragmented ones.
"""

import logging
from collections.abc import Hashable, Iterable

from datamapping.utils.tracing import add_span_attributes, trace_function

from .adapter import RowCollectionMappingValidator

logger = logging.getLogger(__name__)


def _table_key(mapping: RowCollectionMappingValidator) -> Hashable | None:
    """Destination identity: the exact row objects read, plus the column."""
    if not mapping.destination_rows or mapping.destination_column is None:
        return None
    return (tuple(id(row) for row in mapping.destination_rows), mapping.destination_column)


def _value_key(mapping: RowCollectionMappingValidator) -> Hashable:
    key = tuple(mapping.destination_values)
    try:
        hash(key)
    except TypeError:
        return repr(key)
    return key


def _merge(target: RowCollectionMappingValidator, other: RowCollectionMappingValidator) -> None:
    target.source_values.extend(other.source_values)

    names = [name for name in (target.mapping_name, other.mapping_name) if name]
    target.set_mapping_name(" & ".join(names))


@trace_function(component="consolidation")
def consolidate_on_destination(
    mappings: Iterable[RowCollectionMappingValidator],
) -> list[RowCollectionMappingValidator]:
    """
    Merge mappings that target the same destination

    Mappings are grouped by (destination rows, destination column) when the
    destination was read from rows, otherwise by their destination values.
    Within a group the first mapping survives: the source values of every
    later mapping are appended to it and the names are joined with " & ".

    Args:
        mappings: Row collection mappings to consolidate

    Returns:
        Surviving mappings: row-keyed groups first, then value-keyed groups,
        each in order of first appearance

    Raises:
        ValueError: If no mappings are given
    """
    if mappings is None:
        raise ValueError("Mappings cannot be None")

    mappings = list(mappings)
    if not mappings:
        raise ValueError("No mappings given to consolidate")

    by_table: dict[Hashable, RowCollectionMappingValidator] = {}
    by_values: dict[Hashable, RowCollectionMappingValidator] = {}

    for mapping in mappings:
        key = _table_key(mapping)
        groups = by_table
        if key is None:
            key = _value_key(mapping)
            groups = by_values

        survivor = groups.get(key)
        if survivor is None:
            groups[key] = mapping
            continue

        logger.debug(f"Consolidating mapping {mapping} into {survivor}")
        _merge(survivor, mapping)

    consolidated = list(by_table.values()) + list(by_values.values())

    add_span_attributes(input_count=len(mappings), output_count=len(consolidated))
    logger.info(f"Consolidated {len(mappings)} mapping(s) into {len(consolidated)}")

    return consolidated
