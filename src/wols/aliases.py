"""Type aliases, platform vocabulary and generation notation.

Three lookups map free-form input onto the canonical vocabulary:

- Type aliases: short synonyms such as "LC" or "GRAIN_SPAWN" resolved by
  resolve_type_alias().
- Platform types: descriptive names used by cultivation platforms
  ("Liquid Culture", "Fruiting Block") resolved by map_to_wols_type().
- Generation notation: P/P1, F<n>, G<n> or bare <n>, normalized by
  normalize_generation().

The alias and platform tables are process-wide and guarded by a lock.
"""

from __future__ import annotations

import logging
import re
import threading
from types import MappingProxyType
from typing import Literal

from wols.errors import WolsError, WolsErrorCode
from wols.models import SPECIMEN_TYPES

logger = logging.getLogger(__name__)

GenerationFormat = Literal["preserve", "filial", "numeric"]

BUILTIN_TYPE_ALIASES: dict[str, str] = {
    "LIQUID_CULTURE": "CULTURE",
    "LC": "CULTURE",
    "AGAR": "CULTURE",
    "GRAIN_SPAWN": "SPAWN",
    "SAWDUST_SPAWN": "SPAWN",
}

# Canonical type -> descriptive platform names
BUILTIN_PLATFORM_TYPES: dict[str, tuple[str, ...]] = {
    "CULTURE": ("Liquid Culture", "LC", "Agar", "Agar Plate", "Slant"),
    "SPAWN": ("Grain Spawn", "Sawdust Spawn", "Plug Spawn"),
    "SUBSTRATE": ("Block", "Bag", "Bulk Substrate"),
    "FRUITING": ("Flush", "Fruiting Block", "Pinning"),
    "HARVEST": ("Fresh", "Dried", "Harvest"),
}

# P, P1, F<n>, G<n> or bare <n>
GENERATION_PATTERN = re.compile(r"(?:(P1?)|([FG])([0-9]+)|([0-9]+))", re.IGNORECASE | re.ASCII)


def _normalize_key(value: str) -> str:
    """Collapse whitespace to underscores and uppercase."""
    return re.sub(r"\s+", "_", value.strip()).upper()


def _require_canonical(wols_type: str) -> str:
    canonical = wols_type.upper()
    if canonical not in SPECIMEN_TYPES:
        raise WolsError(
            WolsErrorCode.INVALID_SPECIMEN_TYPE,
            f"type must be one of {', '.join(SPECIMEN_TYPES)}, got '{wols_type}'",
        )
    return canonical


class TypeAliasRegistry:
    """Mutable alias and platform tables seeded with built-ins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._aliases: dict[str, str] = {}
        self._platform: dict[str, list[str]] = {}
        self.reset()

    def reset(self) -> None:
        """Restore built-in aliases and platform types."""
        with self._lock:
            self._aliases = dict(BUILTIN_TYPE_ALIASES)
            self._platform = {t: list(names) for t, names in BUILTIN_PLATFORM_TYPES.items()}

    def reset_aliases(self) -> None:
        with self._lock:
            self._aliases = dict(BUILTIN_TYPE_ALIASES)

    def reset_platform(self) -> None:
        with self._lock:
            self._platform = {t: list(names) for t, names in BUILTIN_PLATFORM_TYPES.items()}

    def register_alias(self, alias: str, target: str) -> None:
        canonical = _require_canonical(target)
        key = alias.upper()
        with self._lock:
            self._aliases[key] = canonical
        logger.debug(f"Registered type alias {key} -> {canonical}")

    def resolve(self, value: str) -> str:
        upper = value.upper()
        if upper in SPECIMEN_TYPES:
            return upper
        with self._lock:
            return self._aliases.get(upper, value)

    def aliases(self) -> MappingProxyType[str, str]:
        with self._lock:
            return MappingProxyType(dict(self._aliases))

    def platform_lookup(self, platform_type: str) -> str | None:
        key = _normalize_key(platform_type)
        with self._lock:
            for wols_type, names in self._platform.items():
                if any(_normalize_key(name) == key for name in names):
                    return wols_type
        return None

    def platform_names(self, wols_type: str) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._platform.get(wols_type.upper(), ()))

    def register_platform(self, platform_type: str, wols_type: str) -> None:
        canonical = _require_canonical(wols_type)
        key = _normalize_key(platform_type)
        with self._lock:
            for names in self._platform.values():
                names[:] = [n for n in names if _normalize_key(n) != key]
            self._platform.setdefault(canonical, []).append(platform_type)
            # Keyed the way resolve() looks values up
            self._aliases[platform_type.upper()] = canonical
        logger.debug(f"Registered platform type {platform_type!r} -> {canonical}")


_registry = TypeAliasRegistry()


def resolve_type_alias(value: str) -> str:
    """Resolve a type alias to its canonical type.

    The input is uppercased; canonical types are returned as-is, known
    aliases are mapped, and anything else is returned unchanged. Never raises;
    callers decide whether an unresolved value is an error.

    Args:
        value: Type or alias, any case

    Returns:
        Canonical type, or the original input if it cannot be resolved

    Example:
        >>> resolve_type_alias("lc")
        'CULTURE'
        >>> resolve_type_alias("mystery")
        'mystery'
    """
    return _registry.resolve(value)


def register_type_alias(alias: str, target: str) -> None:
    """Register a custom alias for a canonical type.

    Raises:
        WolsError: If target is not a canonical specimen type
    """
    _registry.register_alias(alias, target)


def get_type_aliases() -> MappingProxyType[str, str]:
    """Read-only snapshot of the alias table."""
    return _registry.aliases()


def reset_type_aliases() -> None:
    """Restore the built-in alias table."""
    _registry.reset_aliases()


def map_to_wols_type(platform_type: str) -> str | None:
    """Map platform vocabulary to a canonical type.

    Alias resolution is tried first, then the platform table with
    case- and whitespace-insensitive matching.

    Returns:
        Canonical type, or None if nothing matches
    """
    resolved = resolve_type_alias(platform_type)
    if resolved in SPECIMEN_TYPES:
        return resolved
    return _registry.platform_lookup(platform_type)


def map_from_wols_type(wols_type: str) -> tuple[str, ...]:
    """Platform names known for a canonical type (empty if none)."""
    return _registry.platform_names(wols_type)


def register_platform_type(platform_type: str, wols_type: str) -> None:
    """Map a platform name to a canonical type.

    An existing mapping for the same name is replaced. The name is also
    registered as a type alias.

    Raises:
        WolsError: If wols_type is not a canonical specimen type
    """
    _registry.register_platform(platform_type, wols_type)


def reset_platform_types() -> None:
    """Restore the built-in platform table."""
    _registry.reset_platform()


def is_valid_generation(value: object) -> bool:
    """Return True for P, P1, F<n>, G<n> or bare <n> (case-insensitive)."""
    return isinstance(value, str) and GENERATION_PATTERN.fullmatch(value) is not None


def normalize_generation(value: str, fmt: GenerationFormat = "preserve") -> str:
    """Normalize generation notation.

    Args:
        value: Generation such as "f1", "G3", "2" or "P"
        fmt: Target notation. "preserve" keeps the notation (uppercased),
            "filial" converts to P/F<n>, "numeric" converts to bare digits
            with parental as "0".

    Returns:
        Normalized generation; unparseable input is returned unchanged
    """
    if not isinstance(value, str):
        return value
    match = GENERATION_PATTERN.fullmatch(value)
    if not match:
        return value

    parental, prefix, digits, bare = match.groups()
    if fmt == "preserve":
        return value.upper()

    if parental:
        return "P" if fmt == "filial" else "0"

    number = int(digits if prefix else bare)
    if fmt == "filial":
        return f"F{number}"
    return str(number)
