"""Validators for simple specimen fields: type, species, stage and created."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from wols.errors import WolsErrorCode
from wols.models import GROWTH_STAGES, SPECIMEN_TYPES, is_growth_stage, is_specimen_type
from wols.timestamps import is_valid_iso8601
from wols.validation.base import (
    INVALID_GROWTH_STAGE,
    UNKNOWN_GROWTH_STAGE,
    FieldValidator,
    ValidationIssue,
    ValidationOptions,
)


class SpecimenTypeValidator(FieldValidator):
    """Validator for the canonical specimen type.

    Aliases are not resolved here; callers resolve them before building the
    record (see wols.specimen.create_specimen).
    """

    @property
    def name(self) -> str:
        return "specimen_type"

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if value is None:
            return [self.error(path, WolsErrorCode.REQUIRED_FIELD, f"{path} is required")]
        if not is_specimen_type(value):
            return [
                self.error(
                    path,
                    WolsErrorCode.INVALID_SPECIMEN_TYPE,
                    f"type must be one of {', '.join(SPECIMEN_TYPES)}, got '{value}'",
                )
            ]
        return []


class NonEmptyStringValidator(FieldValidator):
    """Validator for required free-text fields such as species."""

    @property
    def name(self) -> str:
        return "non_empty_string"

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if value is None:
            return [self.error(path, WolsErrorCode.REQUIRED_FIELD, f"{path} is required")]
        if not isinstance(value, str) or not value.strip():
            return [self.error(path, WolsErrorCode.REQUIRED_FIELD, f"{path} must be a non-empty string")]
        return []


class GrowthStageValidator(FieldValidator):
    """Validator for the optional growth stage.

    Unknown stages are errors in strict mode and warnings in lenient mode.
    """

    @property
    def name(self) -> str:
        return "growth_stage"

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if value is None or is_growth_stage(value):
            return []

        stages = ", ".join(GROWTH_STAGES)
        if options.lenient:
            return [
                self.warning(
                    path,
                    UNKNOWN_GROWTH_STAGE,
                    f"Unknown growth stage '{value}'",
                    suggestion=f"Use one of: {stages}",
                )
            ]
        return [self.error(path, INVALID_GROWTH_STAGE, f"stage must be one of {stages}, got '{value}'")]


class ISO8601Validator(FieldValidator):
    """Validator for optional ISO 8601 date-time fields.

    A non-string value is always an error; a malformed string is an error in
    strict mode and a warning in lenient mode.
    """

    @property
    def name(self) -> str:
        return "iso8601"

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        if value is None:
            return []
        if not isinstance(value, str):
            return [self.error(path, WolsErrorCode.INVALID_DATE_FORMAT, f"{path} must be a string")]
        if is_valid_iso8601(value):
            return []

        if options.lenient:
            return [
                self.warning(
                    path,
                    WolsErrorCode.INVALID_DATE_FORMAT,
                    f"Invalid ISO 8601 date format: '{value}'",
                    suggestion="Use format: YYYY-MM-DDTHH:mm:ssZ",
                )
            ]
        return [
            self.error(
                path,
                WolsErrorCode.INVALID_DATE_FORMAT,
                f"{path} must be valid ISO 8601 datetime, got '{value}'",
            )
        ]
