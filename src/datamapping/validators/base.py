"""
Base classes shared by all mapping validators.

A mapping wraps a source value and a destination value, a set of flags and
an optional equivalence oracle. validate() returns None when the two sides
are equivalent, otherwise a human-readable description of the difference.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

from prometheus_client import Counter, Histogram

from datamapping.flags import FlagDefaults, resolve_flags
from datamapping.utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)

# (mapping, source, destination) -> True when the two values are equivalent
EquivalenceOracle = Callable[["DataMappingValidator", Any, Any], bool]

VALIDATIONS_TOTAL = get_or_create_metric(
    lambda: Counter(
        "datamapping_validations_total",
        "Total mapping validations by validator family and outcome",
        ["family", "outcome"],  # match, mismatch
    ),
    "datamapping_validations_total",
)

VALIDATION_SECONDS = get_or_create_metric(
    lambda: Histogram(
        "datamapping_validation_seconds",
        "Time spent in a single mapping validation",
        ["family"],
        buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5],
    ),
    "datamapping_validation_seconds",
)


def format_error_string(source_value: Any, destination_value: Any) -> str:
    """
    Build the mismatch message for a source/destination pair

    Args:
        source_value: Source side, rendered with str()
        destination_value: Destination side, rendered with str()

    Returns:
        Fixed-format multi-line description
    """
    return (
        "Source does not Equal Destination!"
        f"\n\tSource      : {source_value}"
        f"\n\tDestination : {destination_value}"
    )


def null_count(source_value: Any, destination_value: Any) -> int:
    """Number of the two values that are None (0, 1 or 2)."""
    return (source_value is None) + (destination_value is None)


class DataMappingValidator(ABC):
    """
    A single source/destination comparison unit.

    Subclasses set `family` (used as a metrics label) and implement
    `mapping_flags` and `_validate()`.
    """

    family = "object"

    def __init__(self, mapping_name: str | None = None):
        self._mapping_name: str | None = None
        self._comparator: EquivalenceOracle | None = None
        self.set_mapping_name(mapping_name)

    @property
    def mapping_name(self) -> str | None:
        return self._mapping_name

    def set_mapping_name(self, name: str | None) -> "DataMappingValidator":
        """
        Set the human-readable label of this mapping

        Surrounding whitespace is removed; a blank name clears the label.
        """
        self._mapping_name = name.strip() if name and name.strip() else None
        return self

    @property
    def comparator(self) -> EquivalenceOracle | None:
        return self._comparator

    def set_comparator(self, comparator: EquivalenceOracle | None) -> "DataMappingValidator":
        """
        Override default equality with a caller-supplied oracle

        The oracle is called as comparator(mapping, source, destination) with
        the values as held by the mapping, before any flag-driven transform
        is applied, and must return True when they are equivalent.

        Args:
            comparator: Equivalence oracle, or None to restore default equality

        Returns:
            This mapping, for chaining
        """
        self._comparator = comparator
        return self

    @property
    @abstractmethod
    def mapping_flags(self) -> frozenset:
        """Effective flags: per-call flags unioned with family defaults."""

    def validate(self) -> str | None:
        """
        Compare source and destination

        Returns:
            None when both sides are equivalent, otherwise a description of
            the differences
        """
        start_time = time.perf_counter()
        result = self._validate()
        duration = time.perf_counter() - start_time

        outcome = "match" if result is None else "mismatch"
        VALIDATIONS_TOTAL.labels(family=self.family, outcome=outcome).inc()
        VALIDATION_SECONDS.labels(family=self.family).observe(duration)

        logger.debug(f"Validated {self}: {outcome} ({duration * 1000:.3f}ms)")
        return result

    @abstractmethod
    def _validate(self) -> str | None:
        ...

    def _equals(self, source_value: Any, destination_value: Any) -> bool:
        if self._comparator is not None:
            return bool(self._comparator(self, source_value, destination_value))
        return source_value == destination_value

    def __str__(self) -> str:
        if self._mapping_name is not None:
            return self._mapping_name
        return super().__str__()


class ScalarMappingValidator(DataMappingValidator):
    """
    Base for validators holding one source and one destination value.

    Null handling happens here: without an oracle, exactly one None is a
    mismatch and two Nones are a match. Subclasses only see non-null values
    in `_compare()`.
    """

    flag_type: type[Enum] | None = None

    def __init__(
        self,
        source_value: Any,
        destination_value: Any,
        *flags: Enum,
        mapping_name: str | None = None,
        defaults: FlagDefaults | None = None,
    ):
        super().__init__(mapping_name)

        if self.flag_type is None:
            if flags:
                raise ValueError(f"{type(self).__name__} does not accept mapping flags")
            self._flags: frozenset = frozenset()
        else:
            defaults = defaults or FlagDefaults()
            self._flags = resolve_flags(
                self.flag_type, flags, defaults.for_family(self.flag_type)
            )

        self._check_flags(self._flags)

        self.source_value = self._coerce(source_value)
        self.destination_value = self._coerce(destination_value)

    @property
    def mapping_flags(self) -> frozenset:
        return self._flags

    def _check_flags(self, flags: frozenset) -> None:
        """Hook for rejecting conflicting flag combinations."""

    def _coerce(self, value: Any) -> Any:
        """Convert a constructor input to the family's value type."""
        return value

    @abstractmethod
    def _compare(self, source_value: Any, destination_value: Any) -> bool:
        ...

    def _validate(self) -> str | None:
        error_message = format_error_string(self.source_value, self.destination_value)

        if self._comparator is not None:
            if self._comparator(self, self.source_value, self.destination_value):
                return None
            return error_message

        nulls = null_count(self.source_value, self.destination_value)
        if nulls == 1:
            return error_message
        if nulls == 2:
            return None

        return None if self._compare(self.source_value, self.destination_value) else error_message
