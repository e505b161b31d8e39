"""Base classes for the validation framework.

This module provides the core data structures and abstract base class
for field validators that check specimen records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Literal

from wols.errors import WolsErrorCode
from wols.validation.schemas import ID_PATTERNS

IdMode = Literal["strict", "ulid", "uuid", "any"]
ValidationLevel = Literal["strict", "lenient"]

# Codes used only by the validator; everything else is a WolsErrorCode value
UNKNOWN_FIELD = "UNKNOWN_FIELD"
INVALID_GROWTH_STAGE = "INVALID_GROWTH_STAGE"
UNKNOWN_GROWTH_STAGE = "UNKNOWN_GROWTH_STAGE"


class Severity(str, Enum):
    """Severity levels for validation issues."""

    ERROR = "error"  # Record does not conform; valid is False
    WARNING = "warning"  # Suspicious but accepted


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation issue found in a specimen.

    Attributes:
        path: Dotted field path (e.g., "strain.generation"); "" for the record itself
        code: Machine-readable code (a WolsErrorCode value or a validator-local code)
        message: Human-readable description of the issue
        severity: How serious the issue is
        suggestion: Suggested fix (if applicable)
        source: Document the issue came from (set when aggregated into a report)
    """

    path: str
    code: str
    message: str
    severity: Severity = Severity.ERROR
    suggestion: str | None = None
    source: str | None = None

    def __str__(self) -> str:
        """Format issue for display."""
        loc = f"{self.source}:{self.path}" if self.source else self.path or "<root>"
        sev = self.severity.value.upper()
        return f"[{sev}] {loc} [{self.code}]: {self.message}"


@dataclass
class ValidationOptions:
    """Options controlling validate_specimen().

    Attributes:
        allow_unknown_fields: Suppress warnings for unknown top-level fields
        level: "strict" treats format problems as errors; "lenient" downgrades
            unknown stages and malformed timestamps to warnings
        id_mode: Pattern for the id suffix ("strict", "ulid", "uuid", "any")
        custom_id_validator: Predicate over the full id; overrides id_mode

    Raises:
        ValueError: If id_mode is not one of ID_PATTERNS
    """

    allow_unknown_fields: bool = False
    level: ValidationLevel = "strict"
    id_mode: IdMode = "strict"
    custom_id_validator: Callable[[str], bool] | None = None

    def __post_init__(self) -> None:
        if self.id_mode not in ID_PATTERNS:
            raise ValueError(f"Unknown id mode: {self.id_mode}. Available: {list(ID_PATTERNS.keys())}")

    @property
    def lenient(self) -> bool:
        return self.level == "lenient"


@dataclass
class ValidationResult:
    """Outcome of validating one specimen.

    Attributes:
        errors: Issues that make the record invalid
        warnings: Issues that do not affect validity
    """

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add an issue to the errors or warnings list by severity."""
        if issue.severity == Severity.ERROR:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    @property
    def issues(self) -> list[ValidationIssue]:
        return [*self.errors, *self.warnings]


@dataclass
class ValidationReport:
    """Aggregated validation results for one or more documents.

    Attributes:
        documents_checked: Names of the documents that were validated
        valid_count: Number of documents with no errors
        issues: All validation issues found, tagged with their source
        stats: Counts by issue code
    """

    documents_checked: list[str] = field(default_factory=list)
    valid_count: int = 0
    issues: list[ValidationIssue] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add an issue and update stats."""
        self.issues.append(issue)
        self.stats[issue.code] = self.stats.get(issue.code, 0) + 1

    def add_result(self, source: str, result: ValidationResult) -> None:
        """Record the result of validating one document."""
        self.documents_checked.append(source)
        if result.valid:
            self.valid_count += 1
        for issue in result.issues:
            self.add_issue(replace(issue, source=source))

    def merge(self, other: ValidationReport) -> None:
        """Merge another report into this one."""
        self.documents_checked.extend(other.documents_checked)
        self.valid_count += other.valid_count
        for issue in other.issues:
            self.add_issue(issue)

    @property
    def error_count(self) -> int:
        """Count of ERROR severity issues."""
        return sum(1 for i in self.issues if i.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Count of WARNING severity issues."""
        return sum(1 for i in self.issues if i.severity == Severity.WARNING)

    def get_issues_by_severity(self, severity: Severity) -> list[ValidationIssue]:
        """Get all issues of a specific severity."""
        return [i for i in self.issues if i.severity == severity]

    def get_issues_by_code(self, code: str) -> list[ValidationIssue]:
        """Get all issues with a specific code."""
        return [i for i in self.issues if i.code == code]

    def get_issues_for_document(self, source: str) -> list[ValidationIssue]:
        """Get all issues for a specific document."""
        return [i for i in self.issues if i.source == source]


def _code(code: WolsErrorCode | str) -> str:
    return code.value if isinstance(code, WolsErrorCode) else code


class FieldValidator(ABC):
    """Abstract base class for field validators.

    Validators check a single top-level field of a specimen and return a list
    of any issues found. Unlike most schema checkers, validate() is called
    whether or not the field is present, so required-field checks live in
    the validator itself.

    Subclasses must implement:
        - validate(): Check a value and return issues
        - name: Property returning the validator's name
    """

    @abstractmethod
    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        """Validate a single field value.

        Args:
            value: The field value (None if absent)
            present: Whether the key exists in the record
            path: Field path for reporting
            record: The whole record, for cross-field checks
            options: Active validation options

        Returns:
            List of ValidationIssue objects (empty if valid)
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return validator name for reporting."""

    @staticmethod
    def error(path: str, code: WolsErrorCode | str, message: str) -> ValidationIssue:
        return ValidationIssue(path=path, code=_code(code), message=message)

    @staticmethod
    def warning(
        path: str,
        code: WolsErrorCode | str,
        message: str,
        suggestion: str | None = None,
    ) -> ValidationIssue:
        return ValidationIssue(
            path=path,
            code=_code(code),
            message=message,
            severity=Severity.WARNING,
            suggestion=suggestion,
        )


class RequiredStringValidator(FieldValidator):
    """Base class for validators of required string fields.

    Handles the missing and wrong-type cases; subclasses implement
    validate_string() for the format check.
    """

    def __init__(
        self,
        missing_code: WolsErrorCode = WolsErrorCode.REQUIRED_FIELD,
        type_code: WolsErrorCode = WolsErrorCode.INVALID_FORMAT,
    ):
        """Initialize with the codes used for missing and non-string values.

        Args:
            missing_code: Error code reported when the value is absent or null
            type_code: Error code reported when the value is not a string
        """
        self.missing_code = missing_code
        self.type_code = type_code

    def validate(
        self,
        value: Any,
        present: bool,
        path: str,
        record: Mapping[str, Any],
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        """Check presence and type, then delegate to validate_string()."""
        if value is None:
            return [self.error(path, self.missing_code, f"{path} is required")]
        if not isinstance(value, str):
            return [self.error(path, self.type_code, f"{path} must be a string")]
        return self.validate_string(value, path, options)

    @abstractmethod
    def validate_string(
        self,
        value: str,
        path: str,
        options: ValidationOptions,
    ) -> list[ValidationIssue]:
        """Validate a value already known to be a string.

        Args:
            value: The string value
            path: Field path for reporting
            options: Active validation options

        Returns:
            List of ValidationIssue objects (empty if valid)
        """
