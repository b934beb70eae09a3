"""Generic mapping validator for any values that support ==."""

from typing import Any

from .base import ScalarMappingValidator


class ObjectMappingValidator(ScalarMappingValidator):
    family = "object"

    def _compare(self, source_value: Any, destination_value: Any) -> bool:
        return source_value == destination_value
