"""
Validator selection by value kind.

Callers name the kind of value they are comparing; the matching validator
family is looked up here instead of being inferred from runtime types.
"""

from enum import Enum
from typing import Any

from datamapping.flags import FlagDefaults

from .base import ScalarMappingValidator
from .datetimes import DateTimeMappingValidator
from .numeric import DecimalMappingValidator, LongMappingValidator
from .objects import ObjectMappingValidator
from .strings import StringMappingValidator


class ValueKind(Enum):
    """Supported scalar value kinds, one per validator family."""

    DECIMAL = "decimal"
    LONG = "long"
    OBJECT = "object"
    STRING = "string"
    DATE_TIME = "date_time"

    @property
    def validator_class(self) -> type[ScalarMappingValidator]:
        return _VALIDATORS[self]


_VALIDATORS: dict[ValueKind, type[ScalarMappingValidator]] = {
    ValueKind.DECIMAL: DecimalMappingValidator,
    ValueKind.LONG: LongMappingValidator,
    ValueKind.OBJECT: ObjectMappingValidator,
    ValueKind.STRING: StringMappingValidator,
    ValueKind.DATE_TIME: DateTimeMappingValidator,
}


def create_validator(
    kind: ValueKind,
    source_value: Any,
    destination_value: Any,
    *flags: Enum,
    mapping_name: str | None = None,
    defaults: FlagDefaults | None = None,
) -> ScalarMappingValidator:
    """
    Build the scalar validator for a value kind

    Args:
        kind: Which validator family to use
        source_value: Source side value
        destination_value: Destination side value
        *flags: Flags of the chosen family
        mapping_name: Optional label for reports
        defaults: Flag defaults for the family

    Returns:
        A validator instance of the family named by kind

    Raises:
        ValueError: If kind is not a ValueKind, or the values/flags are not
            valid for the family
    """
    if not isinstance(kind, ValueKind):
        raise ValueError(f"Unknown value kind: {kind!r}")

    return kind.validator_class(
        source_value,
        destination_value,
        *flags,
        mapping_name=mapping_name,
        defaults=defaults,
    )
