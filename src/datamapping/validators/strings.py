"""
String mapping validator and the text transforms it applies.

Each side is transformed independently according to its own flags, always
in this order: whitespace normalization, trimming, XML escaping. IGNORE_CASE
then lowercases both sides; it does not casefold, so "straße" and "STRASSE"
still differ.
"""

import re
from typing import Any

from datamapping.flags import StringFlag

from .base import ScalarMappingValidator

_WHITESPACE_RUN = re.compile(r"\s+")
# "&" that does not start an entity such as &amp; &#38; &#x26;
_BARE_AMPERSAND = re.compile(r"&(?![#0-9a-zA-Z]+;)")


def normalize_whitespace(value: str) -> str:
    """Collapse every run of whitespace (any Unicode whitespace) to a single space."""
    return _WHITESPACE_RUN.sub(" ", value)


def trim_whitespace(value: str) -> str:
    return value.strip()


def xml_escape(value: str) -> str:
    """
    Escape bare ampersands for XML

    Ampersands already starting an entity are left alone, so escaping is
    idempotent: "A & B &amp; C" becomes "A &amp; B &amp; C".
    """
    return _BARE_AMPERSAND.sub("&amp;", value)


class StringMappingValidator(ScalarMappingValidator):
    """
    Compare two strings after optional per-side transforms.

    Example:
        >>> StringMappingValidator(
        ...     " Foo ", "foo",
        ...     StringFlag.TRIM_SOURCE, StringFlag.IGNORE_CASE,
        ... ).validate() is None
        True
    """

    family = "string"
    flag_type = StringFlag

    def _coerce(self, value: Any) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Not a string value: {value!r}")
        return value

    def _transform(
        self,
        value: str,
        normalize: StringFlag,
        trim: StringFlag,
        escape: StringFlag,
    ) -> str:
        if normalize in self._flags:
            value = normalize_whitespace(value)
        if trim in self._flags:
            value = trim_whitespace(value)
        if escape in self._flags:
            value = xml_escape(value)
        return value

    def transform_source(self, value: str) -> str:
        return self._transform(
            value,
            StringFlag.NORMALIZE_SOURCE,
            StringFlag.TRIM_SOURCE,
            StringFlag.XML_ESCAPE_SOURCE,
        )

    def transform_destination(self, value: str) -> str:
        return self._transform(
            value,
            StringFlag.NORMALIZE_DESTINATION,
            StringFlag.TRIM_DESTINATION,
            StringFlag.XML_ESCAPE_DESTINATION,
        )

    def _compare(self, source_value: str, destination_value: str) -> bool:
        source = self.transform_source(source_value)
        destination = self.transform_destination(destination_value)

        if StringFlag.IGNORE_CASE in self._flags:
            return source.lower() == destination.lower()
        return source == destination
