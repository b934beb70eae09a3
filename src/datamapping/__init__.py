"""
datamapping: source/destination data mapping validation

Compares source values (or collections) against destination values under
per-mapping flags and reports the differences as readable text.

Usage:
    from datamapping import CollectionMappingValidator, CollectionFlag, validate_mappings

    mapping = CollectionMappingValidator(
        legacy_ids, migrated_ids, CollectionFlag.IGNORE_DUPLICATES,
        mapping_name="customer ids",
    )
    results = validate_mappings([mapping])
"""

__version__ = "1.0.0"

from .batch import MappingResult, ParallelValidator, validate_mappings
from .flags import CollectionFlag, DateTimeFlag, DecimalFlag, FlagDefaults, StringFlag
from .report import generate_report
from .rows import (
    Row,
    RowCollectionMappingValidator,
    RowMappingValidator,
    RowSource,
    consolidate_on_destination,
)
from .validators import (
    CollectionMappingValidator,
    DataMappingValidator,
    DateTimeMappingValidator,
    DateTimeValue,
    DecimalMappingValidator,
    LongMappingValidator,
    ObjectMappingValidator,
    StringMappingValidator,
    ValueKind,
    create_validator,
)

__all__ = [
    "__version__",
    "DecimalFlag",
    "StringFlag",
    "DateTimeFlag",
    "CollectionFlag",
    "FlagDefaults",
    "DataMappingValidator",
    "DecimalMappingValidator",
    "LongMappingValidator",
    "ObjectMappingValidator",
    "StringMappingValidator",
    "DateTimeValue",
    "DateTimeMappingValidator",
    "CollectionMappingValidator",
    "ValueKind",
    "create_validator",
    "RowSource",
    "Row",
    "RowCollectionMappingValidator",
    "RowMappingValidator",
    "consolidate_on_destination",
    "MappingResult",
    "validate_mappings",
    "ParallelValidator",
    "generate_report",
]
