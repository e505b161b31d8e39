"""Identity validators: specimen id and version.

Id validation is selectable:
- strict (default): wemush: + lowercase alphanumerics
- ulid: wemush: + 26 Crockford base32 characters, any case
- uuid: wemush: + hyphenated 8-4-4-4-12 hex
- any: wemush: + any non-empty suffix

A custom predicate, when supplied in the options, replaces the mode entirely.
"""

from __future__ import annotations

from wols.errors import WolsErrorCode
from wols.validation.base import RequiredStringValidator, ValidationIssue, ValidationOptions
from wols.validation.schemas import ID_PATTERN_DESCRIPTIONS, ID_PATTERNS, SEMVER_PATTERN


class SpecimenIdValidator(RequiredStringValidator):
    """Validator for the namespaced specimen id."""

    def __init__(self) -> None:
        # Non-string ids use a different code than pattern mismatches
        super().__init__(type_code=WolsErrorCode.INVALID_FORMAT)

    @property
    def name(self) -> str:
        return "specimen_id"

    def validate_string(
        self,
        value: str,
        path: str,
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if options.custom_id_validator is not None:
            if options.custom_id_validator(value):
                return []
            return [
                self.error(
                    path,
                    WolsErrorCode.INVALID_ID_FORMAT,
                    f"id failed custom validation, got '{value}'",
                )
            ]

        pattern = ID_PATTERNS.get(options.id_mode)
        if pattern is None:
            # id_mode was reassigned after construction
            return [
                self.error(
                    path,
                    WolsErrorCode.INVALID_ID_FORMAT,
                    f"id cannot be checked: unknown id mode '{options.id_mode}'",
                )
            ]
        if pattern.fullmatch(value):
            return []

        description = ID_PATTERN_DESCRIPTIONS[options.id_mode]
        return [
            self.error(
                path,
                WolsErrorCode.INVALID_ID_FORMAT,
                f"id must match pattern '{description}', got '{value}'",
            )
        ]


class SemverValidator(RequiredStringValidator):
    """Validator for major.minor.patch version strings."""

    def __init__(self) -> None:
        super().__init__(type_code=WolsErrorCode.INVALID_VERSION)

    @property
    def name(self) -> str:
        return "semver"

    def validate_string(
        self,
        value: str,
        path: str,
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if SEMVER_PATTERN.fullmatch(value):
            return []
        return [
            self.error(
                path,
                WolsErrorCode.INVALID_VERSION,
                f"version must be valid semver (major.minor.patch), got '{value}'",
            )
        ]
