"""Specimen id generation.

Ids are 24-character lowercase base36 strings starting with a letter,
prefixed with the WOLS namespace. They satisfy the default (strict) id mode.
"""

from __future__ import annotations

import secrets
import string

from wols.models import SPECIMEN_ID_PREFIX, SpecimenId
from wols.validation.schemas import get_id_pattern

ID_LENGTH = 24
_ALPHABET = string.digits + string.ascii_lowercase


def create_id(length: int = ID_LENGTH) -> str:
    """Generate a random lowercase alphanumeric id.

    Args:
        length: Number of characters (at least 2)

    Returns:
        Random id whose first character is a letter
    """
    if length < 2:
        raise ValueError(f"id length must be at least 2, got {length}")
    head = secrets.choice(string.ascii_lowercase)
    tail = "".join(secrets.choice(_ALPHABET) for _ in range(length - 1))
    return head + tail


def create_specimen_id() -> SpecimenId:
    """Generate a namespaced specimen id, e.g. "wemush:c4k2..."."""
    return SpecimenId(f"{SPECIMEN_ID_PREFIX}{create_id()}")


def is_valid_specimen_id(value: object, mode: str = "strict") -> bool:
    """Check an id against one of the validator id modes.

    Args:
        value: Candidate id
        mode: One of "strict", "ulid", "uuid", "any"

    Returns:
        True if value is a string matching the mode's pattern
    """
    return isinstance(value, str) and get_id_pattern(mode).fullmatch(value) is not None
