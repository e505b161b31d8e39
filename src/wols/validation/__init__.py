"""Specimen validation framework.

This package checks candidate records against the WOLS schema, producing
structured errors and warnings instead of raising.

Main entry points:
    - validate_specimen(): Validate a single record
    - validate_specimen_file(): Validate a JSON document on disk
    - validate_directory(): Validate all JSON documents in a directory

Example:
    from wols.validation import ValidationOptions, validate_specimen

    result = validate_specimen(data, ValidationOptions(id_mode="ulid"))
    if not result.valid:
        for issue in result.errors:
            print(issue)
"""

from wols.validation.base import (
    FieldValidator,
    RequiredStringValidator,
    Severity,
    ValidationIssue,
    ValidationOptions,
    ValidationReport,
    ValidationResult,
)
from wols.validation.engine import (
    VALIDATOR_REGISTRY,
    export_validation_report,
    get_validator,
    print_validation_report,
    validate_directory,
    validate_specimen,
    validate_specimen_file,
    validate_specimen_files,
)
from wols.validation.schemas import (
    ID_PATTERNS,
    KNOWN_FIELDS,
    SPECIMEN_SCHEMA,
    get_field_schema,
    get_id_pattern,
    list_validated_fields,
)

__all__ = [
    "ID_PATTERNS",
    "KNOWN_FIELDS",
    "SPECIMEN_SCHEMA",
    "VALIDATOR_REGISTRY",
    "FieldValidator",
    "RequiredStringValidator",
    "Severity",
    "ValidationIssue",
    "ValidationOptions",
    "ValidationReport",
    "ValidationResult",
    "export_validation_report",
    "get_field_schema",
    "get_id_pattern",
    "get_validator",
    "list_validated_fields",
    "print_validation_report",
    "validate_directory",
    "validate_specimen",
    "validate_specimen_file",
    "validate_specimen_files",
]
