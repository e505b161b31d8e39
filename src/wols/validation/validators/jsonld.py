"""JSON-LD marker validators.

The "@context" and "@type" markers are fixed constants of the standard.
Absence or mismatch is always an error, regardless of validation level.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from wols.errors import WolsErrorCode
from wols.validation.base import FieldValidator, ValidationIssue, ValidationOptions


class ConstantValidator(FieldValidator):
    """Validator for fields that must equal a fixed value."""

    def __init__(self, expected: str, code: WolsErrorCode = WolsErrorCode.INVALID_FORMAT):
        """Initialize validator.

        Args:
            expected: Required value (compared exactly, case-sensitive)
            code: Error code used for both absence and mismatch
        """
        self.expected = expected
        self.code = code

    @property
    def name(self) -> str:
        return "constant"

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if value is None:
            return [self.error(path, self.code, f"{path} is required")]
        if value != self.expected or not isinstance(value, str):
            return [self.error(path, self.code, f"{path} must be '{self.expected}', got '{value}'")]
        return []
