"""
Date/time mapping validator.

Every input is converted at construction into a DateTimeValue: a local,
zone-less (date, time) pair in which either part may be missing. Date and
time parts are then compared independently.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Any

from datamapping.flags import DateTimeFlag, check_exclusive

from .base import ScalarMappingValidator


@dataclass(frozen=True)
class DateTimeValue:
    """Local date and/or time of day, never carrying zone information."""

    date: dt.date | None = None
    time: dt.time | None = None

    def __post_init__(self):
        if self.time is not None and self.time.tzinfo is not None:
            raise ValueError("DateTimeValue time must not carry a time zone")

    def __str__(self) -> str:
        return f"{self.date} {self.time}"


def _local_offset() -> dt.timedelta:
    return dt.datetime.now().astimezone().utcoffset()


def to_date_time_value(value: Any) -> DateTimeValue | None:
    """
    Convert a timestamp-like value to a local DateTimeValue

    Args:
        value: datetime (aware values are converted to local time, naive
            values are taken as local), date, time (with no zone or a fixed
            offset), POSIX timestamp (int/float), DateTimeValue or None

    Returns:
        DateTimeValue, or None for None

    Raises:
        ValueError: If the value type is not supported, or a time carries a
            zone whose offset depends on the date
    """
    if value is None or isinstance(value, DateTimeValue):
        return value

    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, dt.datetime):
        if value.utcoffset() is not None:
            value = value.astimezone().replace(tzinfo=None)
        return DateTimeValue(value.date(), value.time())

    if isinstance(value, dt.date):
        return DateTimeValue(value, None)

    if isinstance(value, dt.time):
        # Region zones (e.g. ZoneInfo) need a date to know their offset
        if value.tzinfo is not None and value.utcoffset() is None:
            raise ValueError(
                f"Cannot resolve offset of a zoned time without a date: {value!r}"
            )
        if value.utcoffset() is not None:
            shift = _local_offset() - value.utcoffset()
            naive = value.replace(tzinfo=None)
            shifted = dt.datetime.combine(dt.date.today(), naive) + shift
            return DateTimeValue(None, shifted.time())
        return DateTimeValue(None, value)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        local = dt.datetime.fromtimestamp(value)
        return DateTimeValue(local.date(), local.time())

    raise ValueError(f"Unsupported date/time value type: {type(value).__name__}")


class DateTimeMappingValidator(ScalarMappingValidator):
    """
    Compare two timestamp-like values.

    IGNORE_DATE compares only the time of day; IGNORE_TIME compares only the
    calendar date. The two flags cannot be combined.
    """

    family = "date_time"
    flag_type = DateTimeFlag

    def _check_flags(self, flags: frozenset) -> None:
        check_exclusive(
            flags,
            DateTimeFlag.IGNORE_DATE,
            DateTimeFlag.IGNORE_TIME,
            type(self).__name__,
        )

    def _coerce(self, value: Any) -> DateTimeValue | None:
        return to_date_time_value(value)

    def _compare(self, source_value: DateTimeValue, destination_value: DateTimeValue) -> bool:
        if DateTimeFlag.IGNORE_DATE not in self._flags:
            if source_value.date != destination_value.date:
                return False

        if DateTimeFlag.IGNORE_TIME not in self._flags:
            if source_value.time != destination_value.time:
                return False

        return True
