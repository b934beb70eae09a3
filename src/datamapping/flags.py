"""
Mapping flags and flag defaults.

Each validator family has its own closed set of flags. Defaults that should
apply to every mapping of a family are carried by an immutable FlagDefaults
object handed to the validator at construction time.

Usage:
    from datamapping.flags import CollectionFlag, FlagDefaults

    defaults = FlagDefaults(collection=frozenset({CollectionFlag.IGNORE_NULLS}))
    mapping = CollectionMappingValidator(src, dst, defaults=defaults)
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_FLAGS_ENV_VAR = "DATAMAPPING_DEFAULT_FLAGS"


class DecimalFlag(Enum):
    """Flags for decimal number mappings."""

    # Ignore trailing zeros after the decimal point (1.50 == 1.5)
    IGNORE_PRECISION = "IGNORE_PRECISION"


class StringFlag(Enum):
    """Flags for string mappings, applied per side in a fixed order."""

    IGNORE_CASE = "IGNORE_CASE"
    NORMALIZE_SOURCE = "NORMALIZE_SOURCE"
    NORMALIZE_DESTINATION = "NORMALIZE_DESTINATION"
    TRIM_SOURCE = "TRIM_SOURCE"
    TRIM_DESTINATION = "TRIM_DESTINATION"
    XML_ESCAPE_SOURCE = "XML_ESCAPE_SOURCE"
    XML_ESCAPE_DESTINATION = "XML_ESCAPE_DESTINATION"


class DateTimeFlag(Enum):
    """
    Flags for date/time mappings.

    IGNORE_DATE and IGNORE_TIME cannot be combined.
    """

    IGNORE_DATE = "IGNORE_DATE"
    IGNORE_TIME = "IGNORE_TIME"


class CollectionFlag(Enum):
    """
    Flags for collection mappings.

    SOURCE_CONTAINS_DESTINATION and DESTINATION_CONTAINS_SOURCE cannot be combined.
    """

    IGNORE_DUPLICATES = "IGNORE_DUPLICATES"
    IGNORE_NULLS = "IGNORE_NULLS"
    ORDER_MATTERS = "ORDER_MATTERS"
    SOURCE_CONTAINS_DESTINATION = "SOURCE_CONTAINS_DESTINATION"
    DESTINATION_CONTAINS_SOURCE = "DESTINATION_CONTAINS_SOURCE"


FLAG_FAMILIES: dict[str, type[Enum]] = {
    "DecimalFlag": DecimalFlag,
    "StringFlag": StringFlag,
    "DateTimeFlag": DateTimeFlag,
    "CollectionFlag": CollectionFlag,
}


@dataclass(frozen=True)
class FlagDefaults:
    """
    Default flags per validator family.

    Replaces process-wide mutable flag sets: build one of these and pass it
    to every validator that should share the defaults.

    Attributes:
        decimal: Defaults for DecimalMappingValidator
        string: Defaults for StringMappingValidator
        date_time: Defaults for DateTimeMappingValidator
        collection: Defaults for CollectionMappingValidator (and row collections)
        row_collection: Extra defaults only for RowCollectionMappingValidator
    """

    decimal: frozenset[DecimalFlag] = field(default_factory=frozenset)
    string: frozenset[StringFlag] = field(default_factory=frozenset)
    date_time: frozenset[DateTimeFlag] = field(default_factory=frozenset)
    collection: frozenset[CollectionFlag] = field(default_factory=frozenset)
    row_collection: frozenset[CollectionFlag] = field(default_factory=frozenset)

    def for_family(self, flag_type: type[Enum]) -> frozenset:
        """
        Get the defaults for a flag family

        Args:
            flag_type: One of the flag enum classes

        Returns:
            Frozen set of default flags for that family

        Raises:
            ValueError: If flag_type is not a known flag family
        """
        if flag_type is DecimalFlag:
            return self.decimal
        if flag_type is StringFlag:
            return self.string
        if flag_type is DateTimeFlag:
            return self.date_time
        if flag_type is CollectionFlag:
            return self.collection
        raise ValueError(f"Unknown flag family: {flag_type!r}")

    @classmethod
    def from_flags(cls, flags: Iterable[Enum]) -> "FlagDefaults":
        """
        Build defaults from a mixed iterable of flags, grouping by family.

        Args:
            flags: Flags of any family

        Returns:
            FlagDefaults with each flag placed in its family's set
        """
        grouped: dict[type[Enum], set] = {family: set() for family in FLAG_FAMILIES.values()}
        for flag in flags:
            if type(flag) not in grouped:
                raise ValueError(f"Not a mapping flag: {flag!r}")
            grouped[type(flag)].add(flag)

        return cls(
            decimal=frozenset(grouped[DecimalFlag]),
            string=frozenset(grouped[StringFlag]),
            date_time=frozenset(grouped[DateTimeFlag]),
            collection=frozenset(grouped[CollectionFlag]),
        )

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_FLAGS_ENV_VAR) -> "FlagDefaults":
        """
        Build defaults from an environment variable

        The variable holds comma separated Family.FLAG entries, e.g.
        "StringFlag.TRIM_SOURCE,CollectionFlag.IGNORE_NULLS".

        Args:
            env_var: Name of the environment variable to read

        Returns:
            FlagDefaults (empty when the variable is unset or blank)

        Raises:
            ValueError: If an entry does not name a known family and flag
        """
        raw = os.getenv(env_var, "")
        flags = [parse_flag(entry) for entry in raw.split(",") if entry.strip()]

        if flags:
            logger.info(f"Loaded {len(flags)} default mapping flag(s) from {env_var}")

        return cls.from_flags(flags)


def parse_flag(entry: str) -> Enum:
    """
    Parse a "Family.FLAG" string into a flag member

    Args:
        entry: Text such as "StringFlag.IGNORE_CASE"

    Returns:
        The matching flag enum member

    Raises:
        ValueError: If the family or the flag name is unknown
    """
    family_name, _, flag_name = entry.strip().partition(".")
    family = FLAG_FAMILIES.get(family_name)
    if family is None or not flag_name:
        raise ValueError(f"Invalid mapping flag entry: {entry!r}")

    try:
        return family[flag_name]
    except KeyError:
        raise ValueError(f"Unknown {family_name} flag: {flag_name!r}") from None


def resolve_flags(
    flag_type: type[Enum],
    flags: Iterable[Enum],
    defaults: frozenset,
) -> frozenset:
    """
    Union per-call flags with family defaults and check the family

    Args:
        flag_type: The flag enum accepted by the validator
        flags: Per-call flags
        defaults: Family defaults

    Returns:
        Immutable set of effective flags

    Raises:
        ValueError: If a flag belongs to another family
    """
    resolved = set(defaults)
    for flag in flags:
        if not isinstance(flag, flag_type):
            raise ValueError(
                f"{flag!r} is not a {flag_type.__name__}; cannot be used on this mapping"
            )
        resolved.add(flag)
    return frozenset(resolved)


def check_exclusive(flags: frozenset, first: Enum, second: Enum, mapping_type: str) -> None:
    """
    Raise if two mutually exclusive flags are both present

    Raises:
        ValueError: If both flags are set
    """
    if first in flags and second in flags:
        raise ValueError(
            f"Cannot use both {first.name} & {second.name} flags in the same {mapping_type}!"
        )
