"""Canonical wire representation of specimens.

Field order is fixed: the JSON-LD markers, then id, version, type, species,
then optional fields in declared order with "_meta" last. Absent optional
fields are omitted, never written as null. Output is single-line JSON so it
does not inflate QR payloads.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from wols.models import Specimen, Strain

REQUIRED_FIELD_ORDER: tuple[str, ...] = ("@context", "@type", "id", "version", "type", "species")
OPTIONAL_FIELD_ORDER: tuple[str, ...] = (
    "strain",
    "stage",
    "created",
    "batch",
    "organization",
    "creator",
    "custom",
    "signature",
    "_meta",
)
FIELD_ORDER: tuple[str, ...] = REQUIRED_FIELD_ORDER + OPTIONAL_FIELD_ORDER

# Wire name -> Specimen attribute, where they differ
_ATTRIBUTE_NAMES = {"@context": "context", "@type": "entity_type", "_meta": "meta"}


def _wire_value(value: Any) -> Any:
    if isinstance(value, Strain):
        return value.to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    return value


def specimen_to_dict(specimen: Specimen | Mapping[str, Any]) -> dict[str, Any]:
    """Project a specimen onto an ordered wire dict.

    Args:
        specimen: A Specimen, or a wire-shaped mapping (keys such as "@context"
            and "_meta"). Keys outside the standard are dropped.

    Returns:
        Dict in canonical field order with absent optional fields omitted
    """
    if isinstance(specimen, Specimen):

        def lookup(key: str) -> Any:
            return getattr(specimen, _ATTRIBUTE_NAMES.get(key, key))

    else:

        def lookup(key: str) -> Any:
            return specimen.get(key)

    ordered: dict[str, Any] = {key: _wire_value(lookup(key)) for key in REQUIRED_FIELD_ORDER}
    for key in OPTIONAL_FIELD_ORDER:
        value = lookup(key)
        if value is not None:
            ordered[key] = _wire_value(value)
    return ordered


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def decode_json(text: str | bytes) -> Any:
    """Decode JSON text, rejecting the non-standard NaN and Infinity literals.

    Raises:
        json.JSONDecodeError: On syntax errors or non-finite literals
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        if isinstance(e, json.JSONDecodeError):
            raise
        raise json.JSONDecodeError(str(e), text if isinstance(text, str) else "", 0) from e


def serialize_specimen(specimen: Specimen | Mapping[str, Any]) -> str:
    """Serialize a specimen to canonical single-line JSON.

    Example:
        >>> serialize_specimen(spec)[:40]
        '{"@context":"https://wemush.com/wols/v1"'
    """
    return json.dumps(specimen_to_dict(specimen), ensure_ascii=False, separators=(",", ":"))
