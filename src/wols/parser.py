"""Specimen parsing.

parse_specimen() composes JSON decoding with validation and returns a
ParseSuccess holding a Specimen, or a ParseFailure whose error says which
stage failed:

- WOLS_INVALID_JSON: the text is not JSON (position carries the offset)
- WOLS_INVALID_FORMAT: the JSON is not an object
- a specific validation code: exactly one validation error
- WolsValidationError: several validation errors, bundled
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from wols.errors import WolsErrorCode, WolsParseError, WolsValidationError, is_error_code
from wols.models import Specimen, Strain, as_specimen_id
from wols.result import ParseFailure, ParseResult, ParseSuccess
from wols.serializer import decode_json
from wols.validation import validate_specimen

logger = logging.getLogger(__name__)

# Optional wire fields copied verbatim when present
_OPTIONAL_FIELDS = ("stage", "created", "batch", "organization", "creator", "custom", "signature")

_JSON_TYPE_NAMES: dict[type, str] = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def _decode_error(exc: Exception) -> WolsParseError:
    if isinstance(exc, json.JSONDecodeError):
        return WolsParseError(
            WolsErrorCode.INVALID_JSON,
            f"Invalid JSON: {exc.msg}",
            {"line": exc.lineno, "column": exc.colno},
            position=exc.pos,
        )
    return WolsParseError(WolsErrorCode.PARSE_ERROR, f"Failed to parse JSON: {exc}")


def specimen_from_dict(data: Mapping[str, Any]) -> Specimen:
    """Project an already-validated wire mapping onto a Specimen.

    Required fields are copied unconditionally; optional fields only when
    present. Keys outside the standard are not carried over.
    """
    kwargs: dict[str, Any] = {
        "id": as_specimen_id(data["id"]),
        "version": data["version"],
        "type": data["type"],
        "species": data["species"],
    }
    strain = data.get("strain")
    if strain is not None:
        kwargs["strain"] = Strain.from_dict(strain)
    for key in _OPTIONAL_FIELDS:
        if key in data:
            kwargs[key] = data[key]
    if "_meta" in data:
        kwargs["meta"] = data["_meta"]
    return Specimen(**kwargs)


def parse_specimen(text: str | bytes) -> ParseResult[Specimen]:
    """Parse a JSON document into a validated Specimen.

    Args:
        text: JSON text

    Returns:
        ParseSuccess with the Specimen, or ParseFailure with a classified error

    Example:
        >>> result = parse_specimen(serialize_specimen(spec))
        >>> result.success
        True
    """
    try:
        parsed = decode_json(text)
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug(f"JSON decoding failed: {e}")
        return ParseFailure(_decode_error(e))

    if not isinstance(parsed, dict):
        return ParseFailure(
            WolsParseError(
                WolsErrorCode.INVALID_FORMAT,
                "Specimen must be a JSON object",
                {"receivedType": _json_type_name(parsed)},
            )
        )

    validation = validate_specimen(parsed)
    if not validation.valid:
        errors = validation.errors
        if len(errors) == 1:
            first = errors[0]
            code = WolsErrorCode(first.code) if is_error_code(first.code) else WolsErrorCode.INVALID_FORMAT
            return ParseFailure(WolsParseError(code, first.message, {"path": first.path}))

        summary = "; ".join(f"{e.path}: {e.message}" for e in errors)
        return ParseFailure(WolsValidationError(f"Validation failed: {summary}", errors))

    return ParseSuccess(specimen_from_dict(parsed))
