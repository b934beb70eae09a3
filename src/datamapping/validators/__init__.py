"""
Mapping validators

Each validator compares a source side with a destination side and returns
None on a match or a description of the differences.

Usage:
    from datamapping.validators import DecimalMappingValidator
    from datamapping.flags import DecimalFlag

    mapping = DecimalMappingValidator("1.50", "1.5", DecimalFlag.IGNORE_PRECISION)
    assert mapping.validate() is None
"""

from .base import (
    DataMappingValidator,
    EquivalenceOracle,
    ScalarMappingValidator,
    format_error_string,
    null_count,
)
from .collection import CollectionMappingValidator, deduplicate
from .datetimes import DateTimeMappingValidator, DateTimeValue, to_date_time_value
from .kinds import ValueKind, create_validator
from .numeric import DecimalMappingValidator, LongMappingValidator, to_decimal
from .objects import ObjectMappingValidator
from .strings import StringMappingValidator, normalize_whitespace, trim_whitespace, xml_escape

__all__ = [
    "DataMappingValidator",
    "ScalarMappingValidator",
    "EquivalenceOracle",
    "format_error_string",
    "null_count",
    "DecimalMappingValidator",
    "LongMappingValidator",
    "to_decimal",
    "ObjectMappingValidator",
    "StringMappingValidator",
    "normalize_whitespace",
    "trim_whitespace",
    "xml_escape",
    "DateTimeValue",
    "DateTimeMappingValidator",
    "to_date_time_value",
    "CollectionMappingValidator",
    "deduplicate",
    "ValueKind",
    "create_validator",
]
