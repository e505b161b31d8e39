"""Strain sub-record validator.

Checks the nested strain object. Sub-fields are validated whenever their key
is present, including explicit nulls; only "name" is required.

The generation check accepts only parental ("P") and filial ("F<n>")
notation. wols.aliases.is_valid_generation is deliberately broader (it also
accepts G<n> and bare digits) because it serves input normalization, not
record validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from wols.errors import WolsErrorCode
from wols.validation.base import FieldValidator, ValidationIssue, ValidationOptions
from wols.validation.schemas import STRAIN_GENERATION_PATTERN


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass; True must not count as 1
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class StrainValidator(FieldValidator):
    """Validator for the optional strain object."""

    @property
    def name(self) -> str:
        return "strain"

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
        if not isinstance(value, Mapping):
            return [self.error(path, WolsErrorCode.INVALID_FORMAT, f"{path} must be an object")]

        issues: list[ValidationIssue] = []

        name = value.get("name")
        if not isinstance(name, str) or not name.strip():
            issues.append(self.error(f"{path}.name", WolsErrorCode.REQUIRED_FIELD, f"{path}.name is required"))

        if "generation" in value:
            generation = value["generation"]
            if not isinstance(generation, str) or not STRAIN_GENERATION_PATTERN.fullmatch(generation):
                issues.append(
                    self.error(
                        f"{path}.generation",
                        WolsErrorCode.INVALID_GENERATION,
                        f"{path}.generation must match pattern 'P' or 'F<number>', got '{generation}'",
                    )
                )

        if "clonalGeneration" in value and not _is_positive_int(value["clonalGeneration"]):
            issues.append(
                self.error(
                    f"{path}.clonalGeneration",
                    WolsErrorCode.INVALID_FORMAT,
                    f"{path}.clonalGeneration must be a positive integer",
                )
            )

        for key in ("source", "lineage"):
            if key in value and not isinstance(value[key], str):
                issues.append(
                    self.error(f"{path}.{key}", WolsErrorCode.INVALID_FORMAT, f"{path}.{key} must be a string")
                )

        return issues
