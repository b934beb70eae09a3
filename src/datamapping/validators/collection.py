"""
Collection mapping validator.

Reconciles two collections of values and reports every entry that could not
be matched. Four matching disciplines are supported:

- exact multiset equality (no containment flag, order ignored)
- pairwise equality by position (ORDER_MATTERS)
- source is a superset of destination (SOURCE_CONTAINS_DESTINATION)
- destination is a superset of source (DESTINATION_CONTAINS_SOURCE)

Unordered matching is greedy: each entry claims the first still-unclaimed
equal entry on the other side, in input order. With an oracle that is not
injective another claim order could attribute differences to other entries;
the order used here is fixed, so identical input gives identical output.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from datamapping.flags import CollectionFlag, FlagDefaults, check_exclusive, resolve_flags

from .base import DataMappingValidator, format_error_string, null_count


def deduplicate(values: list) -> list:
    """
    Drop repeated entries, keeping the first occurrence of each

    Hashable entries are tracked in a set; unhashable ones fall back to an
    equality scan over what has been kept so far.
    """
    kept: list = []
    seen: set = set()
    for value in values:
        try:
            if value in seen:
                continue
            seen.add(value)
        except TypeError:
            if value in kept:
                continue
        kept.append(value)
    return kept


class CollectionMappingValidator(DataMappingValidator):
    """
    Compare two collections under duplicate, null, order and containment flags.

    With ORDER_MATTERS and a containment flag, positions are compared only
    while the contained side has entries, so an empty contained side always
    matches.

    Example:
        >>> CollectionMappingValidator(
        ...     [1, 2, 3], [1, 2],
        ...     CollectionFlag.SOURCE_CONTAINS_DESTINATION,
        ... ).validate() is None
        True
    """

    family = "collection"

    def __init__(
        self,
        source_values: Iterable | None,
        destination_values: Iterable | None,
        *flags: Enum,
        mapping_name: str | None = None,
        defaults: FlagDefaults | None = None,
    ):
        """
        Args:
            source_values: Source entries, or None
            destination_values: Destination entries, or None
            *flags: CollectionFlag members
            mapping_name: Optional label for reports
            defaults: Family defaults unioned with the given flags

        Raises:
            ValueError: If a flag is not a CollectionFlag, or both containment
                flags are given
        """
        super().__init__(mapping_name)

        defaults = defaults or FlagDefaults()
        self._flags = resolve_flags(CollectionFlag, flags, defaults.collection)
        check_exclusive(
            self._flags,
            CollectionFlag.SOURCE_CONTAINS_DESTINATION,
            CollectionFlag.DESTINATION_CONTAINS_SOURCE,
            type(self).__name__,
        )

        # Own copies; the caller's collections are never touched
        self.source_values = None if source_values is None else list(source_values)
        self.destination_values = (
            None if destination_values is None else list(destination_values)
        )

    @property
    def mapping_flags(self) -> frozenset:
        return self._flags

    def _working_copies(self) -> tuple[list, list]:
        if CollectionFlag.IGNORE_DUPLICATES in self._flags:
            source = deduplicate(self.source_values)
            destination = deduplicate(self.destination_values)
        else:
            source = list(self.source_values)
            destination = list(self.destination_values)

        if CollectionFlag.IGNORE_NULLS in self._flags:
            source = [value for value in source if value is not None]
            destination = [value for value in destination if value is not None]

        return source, destination

    def _validate(self) -> str | None:
        nulls = null_count(self.source_values, self.destination_values)
        if nulls == 1:
            return format_error_string(self.source_values, self.destination_values)
        if nulls == 2:
            return None

        source, destination = self._working_copies()

        if CollectionFlag.ORDER_MATTERS in self._flags:
            errors = self._compare_ordered(source, destination)
        else:
            errors = self._compare_unordered(source, destination)

        return "\n".join(errors) if errors else None

    def _compare_ordered(self, source: list, destination: list) -> list[str]:
        source_contains = CollectionFlag.SOURCE_CONTAINS_DESTINATION in self._flags
        destination_contains = CollectionFlag.DESTINATION_CONTAINS_SOURCE in self._flags

        errors = []
        for index in range(max(len(source), len(destination))):
            # Entries past the end of the contained side are expected extras
            if source_contains and index >= len(destination):
                break
            if destination_contains and index >= len(source):
                break

            source_entry = source[index] if index < len(source) else None
            destination_entry = destination[index] if index < len(destination) else None

            if not self._equals(source_entry, destination_entry):
                errors.append(f"Entry {index} in Source Collection is: {source_entry}")
                errors.append(f"Entry {index} in Destination Collection is: {destination_entry}")

        return errors

    def _claim_destination(self, source_entry: Any, destination: list, consumed: list[bool]) -> bool:
        for index, destination_entry in enumerate(destination):
            if not consumed[index] and self._equals(source_entry, destination_entry):
                consumed[index] = True
                return True
        return False

    def _claim_source(self, destination_entry: Any, source: list, consumed: list[bool]) -> bool:
        for index, source_entry in enumerate(source):
            if not consumed[index] and self._equals(source_entry, destination_entry):
                consumed[index] = True
                return True
        return False

    def _compare_unordered(self, source: list, destination: list) -> list[str]:
        source_contains = CollectionFlag.SOURCE_CONTAINS_DESTINATION in self._flags
        destination_contains = CollectionFlag.DESTINATION_CONTAINS_SOURCE in self._flags

        source_consumed = [False] * len(source)
        destination_consumed = [False] * len(destination)
        errors = []

        if not source_contains:
            for source_entry in source:
                if not self._claim_destination(source_entry, destination, destination_consumed):
                    errors.append(
                        f"Destination Collection does not contain Source Entry: {source_entry}"
                    )

        if not destination_contains:
            for index, destination_entry in enumerate(destination):
                if destination_consumed[index]:
                    continue

                # Unless the source pass was skipped, source entries have
                # already claimed their matches
                if source_contains and self._claim_source(
                    destination_entry, source, source_consumed
                ):
                    continue

                errors.append(
                    f"Source Collection does not contain Destination Entry: {destination_entry}"
                )

        return errors
