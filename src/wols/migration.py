"""Version comparison and specimen migration.

Migrations are registered as (from_version, to_version, handler) steps.
migrate() walks the chain from a record's version, following the step whose
from_version equals the current version exactly, until the record is no
longer older than WOLS_VERSION.

Example:
    from wols.migration import migrate, register_migration

    register_migration("1.0.0", "1.1.0", add_default_stage)
    register_migration("1.1.0", "1.2.0", rename_batch_field)
    current = migrate(old_specimen)
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Literal

from wols.errors import WolsMigrationError
from wols.models import WOLS_VERSION, Specimen

logger = logging.getLogger(__name__)

VersionComparison = Literal[-1, 0, 1]
MigrationHandler = Callable[[Specimen], Specimen]

# Leading major.minor.patch; trailing qualifiers are ignored
VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


@dataclass(frozen=True)
class MigrationDefinition:
    """A single registered migration step."""

    from_version: str
    to_version: str
    handler: MigrationHandler


def parse_version(version: str) -> tuple[int, int, int] | None:
    """Parse the leading numeric triple of a version string.

    Returns:
        (major, minor, patch), or None if the string does not start with one
    """
    match = VERSION_PATTERN.match(version)
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def compare_versions(a: str, b: str) -> VersionComparison:
    """Compare two version strings.

    Well-formed versions compare numerically by major, minor, patch. If
    either side is malformed the comparison falls back to plain string
    ordering.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    parsed_a = parse_version(a)
    parsed_b = parse_version(b)

    if parsed_a is None or parsed_b is None:
        left, right = a, b
    else:
        left, right = parsed_a, parsed_b  # type: ignore[assignment]

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def _version_of(specimen: Specimen | str) -> str:
    return specimen if isinstance(specimen, str) else specimen.version


def is_outdated(specimen: Specimen | str) -> bool:
    """Return True if the record (or version string) predates WOLS_VERSION."""
    return compare_versions(_version_of(specimen), WOLS_VERSION) < 0


def is_newer(specimen: Specimen | str) -> bool:
    """Return True if the record (or version string) is ahead of WOLS_VERSION."""
    return compare_versions(_version_of(specimen), WOLS_VERSION) > 0


def get_current_version() -> str:
    """Version of the standard implemented by this library."""
    return WOLS_VERSION


class MigrationRegistry:
    """Ordered list of migration steps, sorted by from_version."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._migrations: list[MigrationDefinition] = []

    def register(self, definition: MigrationDefinition) -> None:
        with self._lock:
            self._migrations.append(definition)
            # Stable sort: duplicates keep registration order
            self._migrations.sort(key=cmp_to_key(lambda x, y: compare_versions(x.from_version, y.from_version)))

    def find(self, from_version: str) -> MigrationDefinition | None:
        with self._lock:
            return next((m for m in self._migrations if m.from_version == from_version), None)

    def snapshot(self) -> tuple[MigrationDefinition, ...]:
        with self._lock:
            return tuple(self._migrations)

    def clear(self) -> None:
        with self._lock:
            self._migrations.clear()


_registry = MigrationRegistry()


def register_migration(from_version: str, to_version: str, handler: MigrationHandler) -> None:
    """Register a migration step.

    Args:
        from_version: Version the handler accepts
        to_version: Version the handler produces
        handler: Function taking and returning a Specimen
    """
    _registry.register(MigrationDefinition(from_version, to_version, handler))
    logger.debug(f"Registered migration {from_version} -> {to_version}")


def get_migrations() -> tuple[MigrationDefinition, ...]:
    """Registered migrations in resolution order."""
    return _registry.snapshot()


def clear_migrations() -> None:
    """Remove all registered migrations."""
    _registry.clear()


def _resolve_chain(version: str) -> tuple[list[MigrationDefinition], str | None]:
    """Find the chain of steps from version up to WOLS_VERSION.

    Returns:
        (steps, stuck_version); stuck_version is None when the chain is complete
    """
    steps: list[MigrationDefinition] = []
    seen: set[str] = set()
    current = version
    while compare_versions(current, WOLS_VERSION) < 0:
        if current in seen:
            raise WolsMigrationError(
                f"Migration cycle detected at version {current}",
                {"version": current, "chain": [m.from_version for m in steps]},
            )
        seen.add(current)
        step = _registry.find(current)
        if step is None:
            return steps, current
        steps.append(step)
        current = step.to_version
    return steps, None


def can_migrate(specimen: Specimen) -> bool:
    """Return True if an outdated record has a complete migration chain.

    Current or newer records return False: there is nothing to migrate.
    """
    if not is_outdated(specimen):
        return False
    try:
        _, stuck = _resolve_chain(specimen.version)
    except WolsMigrationError as e:
        logger.warning(f"Cannot migrate {specimen.id}: {e.message}")
        return False
    return stuck is None


def migrate(specimen: Specimen) -> Specimen:
    """Migrate a record to the current version.

    Records already at or ahead of WOLS_VERSION are returned unchanged. The
    result's version is always WOLS_VERSION, whatever the last handler set.

    Raises:
        WolsMigrationError: If no complete migration chain exists
    """
    if not is_outdated(specimen):
        return specimen

    steps, stuck = _resolve_chain(specimen.version)
    if stuck is not None:
        raise WolsMigrationError(
            f"No migration path from version {stuck} to {WOLS_VERSION}. "
            f"Register a migration using register_migration().",
            {"from": stuck, "to": WOLS_VERSION},
        )

    current = specimen
    for step in steps:
        logger.debug(f"Migrating {specimen.id}: {step.from_version} -> {step.to_version}")
        current = step.handler(current)

    return replace(current, version=WOLS_VERSION)
