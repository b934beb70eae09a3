"""
Numeric mapping validators.

Decimal values are compared with decimal arithmetic, never as binary floats.
"""

from decimal import Decimal, InvalidOperation
from numbers import Integral
from typing import Any

from datamapping.flags import DecimalFlag

from .base import ScalarMappingValidator


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a numeric input to Decimal

    Floats go through repr() so that 0.1 becomes Decimal("0.1") rather than
    its exact binary expansion.

    Args:
        value: Decimal, int, float, numeric string or None

    Returns:
        Decimal value, or None for None

    Raises:
        ValueError: If the value is a bool, cannot be read as a number, or
            is not finite (NaN, sNaN, Infinity)
    """
    if value is None:
        return None

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Boolean is not a decimal value: {value!r}")
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a decimal value: {value!r}") from None
    else:
        raise ValueError(f"Unsupported decimal value type: {type(value).__name__}")

    # NaN and infinities have no scale and do not compare as numbers
    if not result.is_finite():
        raise ValueError(f"Not a finite decimal value: {value!r}")
    return result


class DecimalMappingValidator(ScalarMappingValidator):
    """
    Compare two decimal numbers.

    By default both value and scale must match, so 1.50 differs from 1.5.
    IGNORE_PRECISION compares numeric value only.
    """

    family = "decimal"
    flag_type = DecimalFlag

    def _coerce(self, value: Any) -> Decimal | None:
        return to_decimal(value)

    def _compare(self, source_value: Decimal, destination_value: Decimal) -> bool:
        if DecimalFlag.IGNORE_PRECISION in self._flags:
            return source_value.compare(destination_value) == 0

        return (
            source_value == destination_value
            and source_value.as_tuple().exponent == destination_value.as_tuple().exponent
        )


class LongMappingValidator(ScalarMappingValidator):
    """Compare two integers."""

    family = "long"

    def _coerce(self, value: Any) -> int | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValueError(f"Not an integer value: {value!r}")
        return int(value)

    def _compare(self, source_value: int, destination_value: int) -> bool:
        return source_value == destination_value
