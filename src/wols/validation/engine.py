"""Validation engine for orchestrating specimen validation.

This module provides the main entry points for validating specimens:
- validate_specimen(): Validate a single record (pure; bad records never raise)
- validate_specimen_file(): Validate a JSON document on disk
- validate_directory(): Validate every JSON document in a directory
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path  # noqa: TC003 - Path is used at runtime
from typing import Any

from wols.errors import WolsErrorCode
from wols.models import Specimen
from wols.serializer import decode_json, specimen_to_dict
from wols.validation.base import (
    UNKNOWN_FIELD,
    FieldValidator,
    Severity,
    ValidationIssue,
    ValidationOptions,
    ValidationReport,
    ValidationResult,
)
from wols.validation.schemas import KNOWN_FIELDS, SPECIMEN_SCHEMA
from wols.validation.validators import (
    ConstantValidator,
    GrowthStageValidator,
    ISO8601Validator,
    NonEmptyStringValidator,
    SemverValidator,
    SpecimenIdValidator,
    SpecimenTypeValidator,
    StrainValidator,
)

logger = logging.getLogger(__name__)

# Registry of validator names to classes
VALIDATOR_REGISTRY: dict[str, type[FieldValidator]] = {
    "constant": ConstantValidator,
    "specimen_id": SpecimenIdValidator,
    "semver": SemverValidator,
    "specimen_type": SpecimenTypeValidator,
    "non_empty_string": NonEmptyStringValidator,
    "growth_stage": GrowthStageValidator,
    "iso8601": ISO8601Validator,
    "strain": StrainValidator,
}


def get_validator(name: str, options: dict[str, Any]) -> FieldValidator:
    """Create a validator instance by name.

    Args:
        name: Validator name (must be in VALIDATOR_REGISTRY)
        options: Options to pass to validator constructor

    Returns:
        Configured FieldValidator instance

    Raises:
        ValueError: If validator name not found
    """
    if name not in VALIDATOR_REGISTRY:
        raise ValueError(f"Unknown validator: {name}. Available: {list(VALIDATOR_REGISTRY.keys())}")

    validator_class = VALIDATOR_REGISTRY[name]
    return validator_class(**options)


def _build_validators(schema: Mapping[str, tuple[str, dict[str, Any]]]) -> dict[str, FieldValidator]:
    validators: dict[str, FieldValidator] = {}
    for field_name, (validator_name, options) in schema.items():
        try:
            validators[field_name] = get_validator(validator_name, options)
        except ValueError as e:
            logger.warning(f"Skipping {field_name}: {e}")
    return validators


def validate_specimen(
    candidate: Any,
    options: ValidationOptions | None = None,
    schema: Mapping[str, tuple[str, dict[str, Any]]] | None = None,
) -> ValidationResult:
    """Validate a specimen record.

    Every field rule runs; issues accumulate in schema order, followed by
    unknown-field warnings in key order. The same input and options always
    produce the same issue lists.

    Args:
        candidate: A Specimen, a wire-shaped mapping, or any other value
        options: Validation options (defaults: strict level, strict id mode)
        schema: Optional schema override. If None, uses SPECIMEN_SCHEMA.

    Returns:
        ValidationResult with errors and warnings
    """
    if options is None:
        options = ValidationOptions()
    if schema is None:
        schema = SPECIMEN_SCHEMA

    result = ValidationResult()

    if candidate is None:
        result.add_issue(
            ValidationIssue(path="", code=WolsErrorCode.REQUIRED_FIELD.value, message="Specimen is required")
        )
        return result

    if isinstance(candidate, Specimen):
        candidate = specimen_to_dict(candidate)

    if not isinstance(candidate, Mapping):
        result.add_issue(
            ValidationIssue(path="", code=WolsErrorCode.INVALID_FORMAT.value, message="Specimen must be an object")
        )
        return result

    for field_name, validator in _build_validators(schema).items():
        issues = validator.validate(
            value=candidate.get(field_name),
            present=field_name in candidate,
            path=field_name,
            record=candidate,
            options=options,
        )
        for issue in issues:
            result.add_issue(issue)

    if not options.allow_unknown_fields:
        for key in candidate:
            if key not in KNOWN_FIELDS:
                result.add_issue(
                    FieldValidator.warning(
                        str(key),
                        UNKNOWN_FIELD,
                        f"Unknown field '{key}'",
                        suggestion="Unknown fields should be placed in the custom object",
                    )
                )

    return result


def validate_specimen_file(path: Path, options: ValidationOptions | None = None) -> ValidationReport:
    """Validate a JSON specimen document.

    Unreadable or malformed files are reported as a single error issue
    rather than raised.

    Args:
        path: Path to a JSON file containing one specimen
        options: Validation options

    Returns:
        ValidationReport covering the one document
    """
    report = ValidationReport()
    source = path.name

    if not path.exists():
        logger.warning(f"Specimen file not found: {path}")
        report.documents_checked.append(source)
        report.add_issue(
            ValidationIssue(
                path="",
                code=WolsErrorCode.PARSE_ERROR.value,
                message=f"File not found: {path}",
                source=source,
            )
        )
        return report

    try:
        data = decode_json(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Invalid JSON in {path}: {e}")
        report.documents_checked.append(source)
        report.add_issue(
            ValidationIssue(
                path="",
                code=WolsErrorCode.INVALID_JSON.value,
                message=f"Invalid JSON: {e}",
                source=source,
            )
        )
        return report

    report.add_result(source, validate_specimen(data, options))
    logger.info(f"Validated {source}: {len(report.issues)} issues")
    return report


def validate_specimen_files(paths: Iterable[Path], options: ValidationOptions | None = None) -> ValidationReport:
    """Validate several documents into one combined report."""
    report = ValidationReport()
    for path in paths:
        report.merge(validate_specimen_file(path, options))
    return report


def validate_directory(
    directory: Path,
    options: ValidationOptions | None = None,
    pattern: str = "*.json",
) -> ValidationReport:
    """Validate all matching documents in a directory.

    Args:
        directory: Directory to scan (not recursive)
        options: Validation options
        pattern: Glob pattern for specimen files

    Returns:
        Combined ValidationReport from all documents
    """
    paths = sorted(directory.glob(pattern))
    if not paths:
        logger.info(f"No files matching {pattern} in {directory}")
    return validate_specimen_files(paths, options)


def print_validation_report(report: ValidationReport, verbose: bool = False) -> None:
    """Print human-readable validation report.

    Args:
        report: ValidationReport to print
        verbose: If True, include suggestions for warnings and per-code summary
    """
    print("\nVALIDATION REPORT")
    print("=" * 60)
    print(f"Documents checked: {len(report.documents_checked)}")
    print(f"Valid documents:   {report.valid_count}")
    print(f"Issues found:      {len(report.issues)}")
    print()

    # Print errors
    errors = report.get_issues_by_severity(Severity.ERROR)
    if errors:
        print(f"ERRORS ({len(errors)}):")
        for issue in errors:
            print(f"  {issue}")
            if issue.suggestion:
                print(f"    -> {issue.suggestion}")
        print()

    # Print warnings
    warnings = report.get_issues_by_severity(Severity.WARNING)
    if warnings:
        print(f"WARNINGS ({len(warnings)}):")
        for issue in warnings:
            print(f"  {issue}")
            if verbose and issue.suggestion:
                print(f"    -> {issue.suggestion}")
        print()

    # Summary by code
    if verbose and report.stats:
        print("Summary by code:")
        for code, count in sorted(report.stats.items()):
            print(f"  {code}: {count}")


def export_validation_report(report: ValidationReport, path: Path) -> None:
    """Export validation report to JSON file.

    Args:
        report: ValidationReport to export
        path: Output file path
    """
    data = {
        "documents_checked": report.documents_checked,
        "valid_count": report.valid_count,
        "stats": report.stats,
        "issues": [
            {
                "source": i.source,
                "path": i.path,
                "code": i.code,
                "severity": i.severity.value,
                "message": i.message,
                "suggestion": i.suggestion,
            }
            for i in report.issues
        ],
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    logger.info(f"Exported validation report to {path}")
