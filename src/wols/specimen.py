"""Specimen creation.

create_specimen() is the only way to mint a new record: it assigns the id,
the library version and the JSON-LD markers, and resolves type aliases.
Serialization lives in wols.serializer and is re-exported here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from wols.aliases import resolve_type_alias
from wols.errors import WolsError, WolsErrorCode
from wols.identifiers import create_specimen_id
from wols.models import (
    SPECIMEN_TYPES,
    WOLS_VERSION,
    Specimen,
    Strain,
    as_specimen_id,
    is_specimen_type,
)
from wols.serializer import serialize_specimen, specimen_to_dict

logger = logging.getLogger(__name__)

__all__ = ["create_specimen", "expand_strain", "serialize_specimen", "specimen_to_dict"]


def expand_strain(strain: str | Strain | Mapping[str, Any] | None) -> Strain | None:
    """Expand strain shorthand to a Strain.

    Args:
        strain: A strain name, a Strain, a wire-shaped mapping, or None

    Returns:
        Strain instance, or None if no strain was given

    Raises:
        TypeError: If strain is of an unsupported type
        KeyError: If a mapping has no "name"
    """
    if strain is None:
        return None
    if isinstance(strain, Strain):
        return strain
    if isinstance(strain, str):
        return Strain(name=strain)
    if isinstance(strain, Mapping):
        return Strain.from_dict(strain)
    raise TypeError(f"strain must be a string, Strain or mapping, got {type(strain).__name__}")


def create_specimen(
    type: str,
    species: str,
    *,
    strain: str | Strain | Mapping[str, Any] | None = None,
    stage: str | None = None,
    created: str | None = None,
    batch: str | None = None,
    organization: str | None = None,
    creator: str | None = None,
    custom: Mapping[str, Any] | None = None,
    meta: Mapping[str, Any] | None = None,
    id: str | None = None,
) -> Specimen:
    """Create a new specimen with a generated id and JSON-LD markers.

    Args:
        type: Specimen type or alias (e.g., "CULTURE", "LC", "grain_spawn")
        species: Scientific name
        strain: Strain name, Strain, or strain mapping
        stage: Growth stage
        created: ISO 8601 creation timestamp
        batch: Batch identifier
        organization: Organization identifier
        creator: Creator identifier
        custom: Free-form payload
        meta: Round-trip metadata (serialized as "_meta")
        id: Explicit id; generated when omitted

    Returns:
        New Specimen stamped with the current library version

    Raises:
        WolsError: If type does not resolve to a canonical specimen type

    Example:
        >>> spec = create_specimen("LIQUID_CULTURE", "Pleurotus ostreatus", strain="Blue Oyster")
        >>> spec.type, spec.strain.name
        ('CULTURE', 'Blue Oyster')
    """
    resolved = resolve_type_alias(type)
    if not is_specimen_type(resolved):
        raise WolsError(
            WolsErrorCode.INVALID_SPECIMEN_TYPE,
            f"Invalid specimen type: '{type}'. Must be one of: {', '.join(SPECIMEN_TYPES)} (or a registered alias).",
            {"type": type},
        )
    if resolved != type:
        logger.debug(f"Resolved specimen type {type!r} -> {resolved}")

    return Specimen(
        id=as_specimen_id(id) if id is not None else create_specimen_id(),
        version=WOLS_VERSION,
        type=resolved,
        species=species,
        strain=expand_strain(strain),
        stage=stage,
        created=created,
        batch=batch,
        organization=organization,
        creator=creator,
        custom=custom,
        meta=meta,
    )
