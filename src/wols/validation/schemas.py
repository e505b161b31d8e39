"""Specimen validation schema.

Maps specimen fields to their validators and validation options, and holds
the patterns the validators check against.
"""

from __future__ import annotations

import re
from typing import Any

from wols.errors import WolsErrorCode
from wols.models import JSONLD_TYPE, WOLS_CONTEXT

# Schema format:
# {
#     "field_name": ("validator_name", {options}),
#     ...
# }
#
# Validator names correspond to registered validators in the engine.
# Options are passed to the validator constructor. Order is significant:
# fields are validated, and issues reported, in declaration order.

SPECIMEN_SCHEMA: dict[str, tuple[str, dict[str, Any]]] = {
    # JSON-LD markers
    "@context": (
        "constant",
        {"expected": WOLS_CONTEXT, "code": WolsErrorCode.INVALID_CONTEXT},
    ),
    "@type": (
        "constant",
        {"expected": JSONLD_TYPE, "code": WolsErrorCode.INVALID_TYPE},
    ),
    # Required fields
    "id": ("specimen_id", {}),
    "version": ("semver", {}),
    "type": ("specimen_type", {}),
    "species": ("non_empty_string", {}),
    # Optional fields
    "stage": ("growth_stage", {}),
    "created": ("iso8601", {}),
    "strain": ("strain", {}),
}

# Fields that never trigger an unknown-field warning
KNOWN_FIELDS: frozenset[str] = frozenset(
    {
        "@context",
        "@type",
        "id",
        "version",
        "type",
        "species",
        "strain",
        "stage",
        "created",
        "batch",
        "organization",
        "creator",
        "custom",
        "signature",
        "_meta",
    }
)

# Id patterns by mode, applied with fullmatch; the prefix is always required
ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "strict": re.compile(r"wemush:[a-z0-9]+"),
    # Crockford base32: no I, L, O, U
    "ulid": re.compile(r"wemush:[0-9A-HJKMNP-TV-Z]{26}", re.IGNORECASE | re.ASCII),
    "uuid": re.compile(
        r"wemush:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        re.IGNORECASE | re.ASCII,
    ),
    "any": re.compile(r"wemush:.+", re.DOTALL),
}

# Human-readable pattern descriptions used in error messages
ID_PATTERN_DESCRIPTIONS: dict[str, str] = {
    "strict": "wemush:[a-z0-9]+",
    "ulid": "wemush:<26-character ULID>",
    "uuid": "wemush:<UUID>",
    "any": "wemush:<non-empty suffix>",
}

# major.minor.patch with optional pre-release/build qualifier
SEMVER_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+(?:[-+][0-9A-Za-z.+-]+)?")

# Narrower than wols.aliases.GENERATION_PATTERN: only parental and filial
STRAIN_GENERATION_PATTERN = re.compile(r"P|F[0-9]+")


def get_id_pattern(mode: str) -> re.Pattern[str]:
    """Get the id pattern for a validation mode.

    Raises:
        ValueError: If mode is not one of ID_PATTERNS
    """
    if mode not in ID_PATTERNS:
        raise ValueError(f"Unknown id mode: {mode}. Available: {list(ID_PATTERNS.keys())}")
    return ID_PATTERNS[mode]


def get_field_schema(field: str) -> tuple[str, dict[str, Any]] | None:
    """Get the validator name and options for a field."""
    return SPECIMEN_SCHEMA.get(field)


def list_validated_fields() -> list[str]:
    """List fields that have validators, in validation order."""
    return list(SPECIMEN_SCHEMA.keys())
