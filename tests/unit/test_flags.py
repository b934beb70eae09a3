"""
Unit tests for datamapping.flags

Tests verify:
- Flag family resolution and defaults
- Flag parsing from "Family.FLAG" text
- FlagDefaults loaded from the environment
- Mutually exclusive flag checks
"""

import pytest

from datamapping.flags import (
    CollectionFlag,
    DateTimeFlag,
    DecimalFlag,
    FlagDefaults,
    StringFlag,
    check_exclusive,
    parse_flag,
    resolve_flags,
)


class TestFlagDefaults:
    """Test FlagDefaults configuration object"""

    def test_empty_by_default(self):
        """Test that no family has defaults unless given"""
        defaults = FlagDefaults()

        assert defaults.decimal == frozenset()
        assert defaults.string == frozenset()
        assert defaults.date_time == frozenset()
        assert defaults.collection == frozenset()
        assert defaults.row_collection == frozenset()

    def test_for_family_returns_matching_set(self):
        """Test that for_family picks the set of the given flag enum"""
        defaults = FlagDefaults(
            decimal=frozenset({DecimalFlag.IGNORE_PRECISION}),
            string=frozenset({StringFlag.IGNORE_CASE}),
            date_time=frozenset({DateTimeFlag.IGNORE_TIME}),
            collection=frozenset({CollectionFlag.IGNORE_NULLS}),
        )

        assert defaults.for_family(DecimalFlag) == {DecimalFlag.IGNORE_PRECISION}
        assert defaults.for_family(StringFlag) == {StringFlag.IGNORE_CASE}
        assert defaults.for_family(DateTimeFlag) == {DateTimeFlag.IGNORE_TIME}
        assert defaults.for_family(CollectionFlag) == {CollectionFlag.IGNORE_NULLS}

    def test_for_family_unknown_raises(self):
        """Test that an unknown flag type is rejected"""
        with pytest.raises(ValueError, match="Unknown flag family"):
            FlagDefaults().for_family(int)

    def test_is_immutable(self):
        """Test that defaults cannot be reassigned after construction"""
        defaults = FlagDefaults()

        with pytest.raises(AttributeError):
            defaults.decimal = frozenset({DecimalFlag.IGNORE_PRECISION})

    def test_from_flags_groups_by_family(self):
        """Test that a mixed flag list is split per family"""
        defaults = FlagDefaults.from_flags([
            StringFlag.TRIM_SOURCE,
            CollectionFlag.IGNORE_DUPLICATES,
            StringFlag.TRIM_DESTINATION,
        ])

        assert defaults.string == {StringFlag.TRIM_SOURCE, StringFlag.TRIM_DESTINATION}
        assert defaults.collection == {CollectionFlag.IGNORE_DUPLICATES}
        assert defaults.decimal == frozenset()

    def test_from_flags_rejects_non_flag(self):
        """Test that values other than flag members are rejected"""
        with pytest.raises(ValueError, match="Not a mapping flag"):
            FlagDefaults.from_flags(["IGNORE_CASE"])

    def test_from_env(self, monkeypatch):
        """Test loading defaults from DATAMAPPING_DEFAULT_FLAGS"""
        monkeypatch.setenv(
            "DATAMAPPING_DEFAULT_FLAGS",
            "StringFlag.IGNORE_CASE, CollectionFlag.IGNORE_NULLS,DecimalFlag.IGNORE_PRECISION",
        )

        defaults = FlagDefaults.from_env()

        assert defaults.string == {StringFlag.IGNORE_CASE}
        assert defaults.collection == {CollectionFlag.IGNORE_NULLS}
        assert defaults.decimal == {DecimalFlag.IGNORE_PRECISION}

    def test_from_env_unset(self, monkeypatch):
        """Test that a missing variable yields empty defaults"""
        monkeypatch.delenv("DATAMAPPING_DEFAULT_FLAGS", raising=False)

        assert FlagDefaults.from_env() == FlagDefaults()

    def test_from_env_custom_variable(self, monkeypatch):
        """Test reading a different environment variable"""
        monkeypatch.setenv("NIGHTLY_FLAGS", "DateTimeFlag.IGNORE_DATE")

        defaults = FlagDefaults.from_env("NIGHTLY_FLAGS")

        assert defaults.date_time == {DateTimeFlag.IGNORE_DATE}

    def test_from_env_invalid_entry(self, monkeypatch):
        """Test that an unknown entry fails loudly"""
        monkeypatch.setenv("DATAMAPPING_DEFAULT_FLAGS", "StringFlag.SHOUT")

        with pytest.raises(ValueError, match="Unknown StringFlag flag"):
            FlagDefaults.from_env()


class TestParseFlag:
    """Test parse_flag"""

    def test_parse_valid(self):
        assert parse_flag("CollectionFlag.ORDER_MATTERS") is CollectionFlag.ORDER_MATTERS
        assert parse_flag("  DecimalFlag.IGNORE_PRECISION ") is DecimalFlag.IGNORE_PRECISION

    @pytest.mark.parametrize("entry", ["IGNORE_CASE", "NoSuchFlag.IGNORE_CASE", "StringFlag."])
    def test_parse_invalid_entry(self, entry):
        """Test entries without a known family or flag name"""
        with pytest.raises(ValueError, match="Invalid mapping flag entry"):
            parse_flag(entry)


class TestResolveFlags:
    """Test resolve_flags"""

    def test_union_with_defaults(self):
        """Test that per-call flags are added to family defaults"""
        resolved = resolve_flags(
            StringFlag,
            [StringFlag.TRIM_SOURCE],
            frozenset({StringFlag.IGNORE_CASE}),
        )

        assert resolved == {StringFlag.TRIM_SOURCE, StringFlag.IGNORE_CASE}
        assert isinstance(resolved, frozenset)

    def test_wrong_family_rejected(self):
        """Test that a flag from another family raises"""
        with pytest.raises(ValueError, match="is not a StringFlag"):
            resolve_flags(StringFlag, [CollectionFlag.IGNORE_NULLS], frozenset())


class TestCheckExclusive:
    """Test check_exclusive"""

    def test_both_present_raises(self):
        flags = frozenset({DateTimeFlag.IGNORE_DATE, DateTimeFlag.IGNORE_TIME})

        with pytest.raises(
            ValueError,
            match="Cannot use both IGNORE_DATE & IGNORE_TIME flags in the same DateTimeMappingValidator!",
        ):
            check_exclusive(
                flags, DateTimeFlag.IGNORE_DATE, DateTimeFlag.IGNORE_TIME, "DateTimeMappingValidator"
            )

    def test_one_present_passes(self):
        check_exclusive(
            frozenset({DateTimeFlag.IGNORE_DATE}),
            DateTimeFlag.IGNORE_DATE,
            DateTimeFlag.IGNORE_TIME,
            "DateTimeMappingValidator",
        )
