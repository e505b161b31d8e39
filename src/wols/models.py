"""Domain models for WOLS specimen records.

This module defines the core data structures and constants of the labeling
standard. Records are immutable value objects; every operation that changes a
specimen (creation, migration, decryption) returns a new instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, NewType

# Version of the standard implemented by this library
WOLS_VERSION = "1.2.0"

# JSON-LD markers
WOLS_CONTEXT = "https://wemush.com/wols/v1"
JSONLD_TYPE = "Specimen"

# Namespace prefix carried by every specimen id
SPECIMEN_ID_PREFIX = "wemush:"


class SpecimenType(str, Enum):
    """Canonical specimen types."""

    CULTURE = "CULTURE"  # Liquid culture, agar, slants
    SPAWN = "SPAWN"  # Grain or sawdust spawn
    SUBSTRATE = "SUBSTRATE"  # Bulk substrate blocks and bags
    FRUITING = "FRUITING"  # Block in fruiting conditions
    HARVEST = "HARVEST"  # Harvested mushrooms


class GrowthStage(str, Enum):
    """Canonical lifecycle stages."""

    INOCULATION = "INOCULATION"
    COLONIZATION = "COLONIZATION"
    FRUITING = "FRUITING"
    HARVEST = "HARVEST"


SPECIMEN_TYPES: tuple[str, ...] = tuple(t.value for t in SpecimenType)
GROWTH_STAGES: tuple[str, ...] = tuple(s.value for s in GrowthStage)

# Nominal id type; no runtime representation change
SpecimenId = NewType("SpecimenId", str)


def as_specimen_id(value: str) -> SpecimenId:
    """Tag a string as a specimen id without validating it."""
    return SpecimenId(value)


# Wire keys modelled by Strain
STRAIN_FIELDS = frozenset({"name", "generation", "clonalGeneration", "lineage", "source"})


@dataclass(frozen=True)
class Strain:
    """Genetic and lineage information for a specimen.

    Sub-keys outside the modelled fields are kept in extra and written back
    after them, so a parsed strain serializes without loss.
    """

    name: str
    generation: str | None = None  # P, F1, F2, ...
    clonal_generation: int | None = None  # Number of clonal transfers
    lineage: str | None = None  # Parent specimen id
    source: str | None = None  # Provenance, e.g. "spore print" or "tissue clone"
    extra: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation, omitting absent fields."""
        data: dict[str, Any] = {"name": self.name}
        if self.generation is not None:
            data["generation"] = self.generation
        if self.clonal_generation is not None:
            data["clonalGeneration"] = self.clonal_generation
        if self.lineage is not None:
            data["lineage"] = self.lineage
        if self.source is not None:
            data["source"] = self.source
        if self.extra:
            data.update((key, value) for key, value in self.extra.items() if key not in STRAIN_FIELDS)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Strain:
        """Build a Strain from its wire representation."""
        extra = {key: value for key, value in data.items() if key not in STRAIN_FIELDS}
        return cls(
            name=data["name"],
            generation=data.get("generation"),
            clonal_generation=data.get("clonalGeneration"),
            lineage=data.get("lineage"),
            source=data.get("source"),
            extra=extra or None,
        )


@dataclass(frozen=True)
class Specimen:
    """A WOLS specimen record.

    Attributes:
        id: Namespaced identifier, e.g. "wemush:clx1a2b3c4"
        version: Version of the standard the record was written against
        type: Canonical specimen type (see SPECIMEN_TYPES)
        species: Scientific name, e.g. "Pleurotus ostreatus"
        strain: Optional strain information
        stage: Optional growth stage (see GROWTH_STAGES)
        created: Optional ISO 8601 creation timestamp
        batch: Optional batch identifier
        organization: Optional organization identifier
        creator: Optional creator identifier
        custom: Optional free-form payload, opaque to validation
        signature: Optional opaque signature string
        meta: Optional round-trip metadata, serialized as "_meta"
        context: JSON-LD "@context" marker
        entity_type: JSON-LD "@type" marker
    """

    id: SpecimenId
    version: str
    type: str
    species: str
    strain: Strain | None = None
    stage: str | None = None
    created: str | None = None
    batch: str | None = None
    organization: str | None = None
    creator: str | None = None
    custom: Mapping[str, Any] | None = None
    signature: str | None = None
    meta: Mapping[str, Any] | None = None
    context: str = WOLS_CONTEXT
    entity_type: str = JSONLD_TYPE


@dataclass(frozen=True)
class StrainRef:
    """Strain fields recoverable from a compact URL."""

    name: str
    generation: str | None = None


@dataclass(frozen=True)
class SpecimenRef:
    """Partial specimen reconstructed from a compact URL.

    Fields absent from the URL are None; this is a lossy projection of a
    full Specimen.
    """

    id: SpecimenId
    species: str
    version: str
    type: str | None = None
    stage: str | None = None
    timestamp: int | None = None  # Unix seconds
    batch: str | None = None
    strain: StrainRef | None = None


def is_specimen_type(value: object) -> bool:
    """Return True if value is a canonical specimen type."""
    return isinstance(value, str) and value in SPECIMEN_TYPES


def is_growth_stage(value: object) -> bool:
    """Return True if value is a canonical growth stage."""
    return isinstance(value, str) and value in GROWTH_STAGES


def is_strain(value: object) -> bool:
    """Return True if value is a Strain or a strain-shaped mapping."""
    if isinstance(value, Strain):
        return True
    if isinstance(value, Mapping):
        name = value.get("name")
        return isinstance(name, str) and bool(name.strip())
    return False
