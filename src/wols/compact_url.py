"""Compact URL encoding for small-format labels.

A compact URL carries the fields a printed label needs:

    wemush://v1/{id-suffix}?s=POSTR&ty=CULTURE&st=COLONIZATION&t=1705312200&b=B1&sn=Blue&sg=F2

Query keys:
    s   species (registered code, or the full name)
    ty  specimen type
    st  growth stage (literal value)
    t   creation time in Unix seconds
    b   batch
    sn  strain name
    sg  strain generation

Decoding is lossy: the result is a SpecimenRef, not a Specimen. Species
codes are not syntactically distinguishable from names, so an unregistered
code decodes as the species name itself.
"""

from __future__ import annotations

import logging
import re
import threading
from types import MappingProxyType
from urllib.parse import parse_qsl, quote, unquote, urlencode

from wols.errors import WolsErrorCode, WolsParseError
from wols.models import SPECIMEN_ID_PREFIX, WOLS_VERSION, Specimen, SpecimenRef, StrainRef, as_specimen_id
from wols.result import ParseFailure, ParseResult, ParseSuccess
from wols.timestamps import to_unix_timestamp

logger = logging.getLogger(__name__)

URL_SCHEME = "wemush://"

# Path version segment -> standard version it decodes to; any other
# segment predates the table and decodes as LEGACY_URL_VERSION
COMPACT_URL_VERSIONS: dict[str, str] = {"v1": WOLS_VERSION}
CURRENT_URL_VERSION = "v1"
LEGACY_URL_VERSION = "1.0.0"

TIMESTAMP_PATTERN = re.compile(r"-?[0-9]+")

BUILTIN_SPECIES_CODES: dict[str, str] = {
    "POSTR": "Pleurotus ostreatus",
    "PCITRI": "Pleurotus citrinopileatus",
    "PDJAR": "Pleurotus djamor",
    "PERYN": "Pleurotus eryngii",
    "HERIN": "Hericium erinaceus",
    "GLUCI": "Ganoderma lucidum",
    "LPUDE": "Laetiporus pudens",
    "LLENC": "Lentinula edodes",
    "APOLY": "Agrocybe polyphylla",
    "STRUG": "Stropharia rugosoannulata",
}

BUILTIN_STAGE_CODES: dict[str, str] = {
    "IN": "INOCULATION",
    "CO": "COLONIZATION",
    "FR": "FRUITING",
    "HA": "HARVEST",
}


class CodeTable:
    """Bidirectional, case-sensitive code <-> value lookup.

    Forward and reverse entries are updated together under one lock.
    """

    def __init__(self, label: str, builtins: dict[str, str]):
        self.label = label
        self._builtins = dict(builtins)
        self._lock = threading.Lock()
        self._forward: dict[str, str] = {}
        self._reverse: dict[str, str] = {}
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._forward = dict(self._builtins)
            self._reverse = {value: code for code, value in self._builtins.items()}

    def register(self, code: str, value: str) -> None:
        with self._lock:
            previous = self._forward.get(code)
            if previous is not None and previous != value:
                self._reverse.pop(previous, None)
                logger.debug(f"Overwriting {self.label} code {code}: {previous!r} -> {value!r}")
            self._forward[code] = value
            self._reverse[value] = code

    def value_for(self, code: str) -> str | None:
        with self._lock:
            return self._forward.get(code)

    def code_for(self, value: str) -> str | None:
        with self._lock:
            return self._reverse.get(value)

    def snapshot(self) -> MappingProxyType[str, str]:
        with self._lock:
            return MappingProxyType(dict(self._forward))


_species_codes = CodeTable("species", BUILTIN_SPECIES_CODES)
_stage_codes = CodeTable("stage", BUILTIN_STAGE_CODES)


def register_species_code(code: str, species: str) -> None:
    """Register (or overwrite) a species code in both directions."""
    _species_codes.register(code, species)


def get_species_from_code(code: str) -> str | None:
    """Full species name for a code, or None if unregistered."""
    return _species_codes.value_for(code)


def get_code_from_species(species: str) -> str | None:
    """Code for a species name, or None if unregistered."""
    return _species_codes.code_for(species)


def get_species_codes() -> MappingProxyType[str, str]:
    """Read-only snapshot of the species code table."""
    return _species_codes.snapshot()


def reset_species_codes() -> None:
    """Restore the built-in species codes."""
    _species_codes.reset()


def register_stage_code(code: str, stage: str) -> None:
    """Register (or overwrite) a stage code in both directions."""
    _stage_codes.register(code, stage)


def get_stage_from_code(code: str) -> str | None:
    """Stage for a code, or None if unregistered."""
    return _stage_codes.value_for(code)


def get_code_from_stage(stage: str) -> str | None:
    """Code for a stage, or None if unregistered."""
    return _stage_codes.code_for(stage)


def reset_stage_codes() -> None:
    """Restore the built-in stage codes."""
    _stage_codes.reset()


def to_compact_url(specimen: Specimen) -> str:
    """Encode a specimen as a compact URL.

    Parameters are emitted in fixed order and only when the underlying value
    is present. A "created" value that cannot be parsed is left out.

    Args:
        specimen: Specimen to encode

    Returns:
        URL such as "wemush://v1/abc123?s=POSTR&ty=CULTURE"
    """
    suffix = specimen.id.removeprefix(SPECIMEN_ID_PREFIX)
    url = f"{URL_SCHEME}{CURRENT_URL_VERSION}/{quote(suffix, safe='')}"

    params: list[tuple[str, str]] = [
        ("s", get_code_from_species(specimen.species) or specimen.species),
        ("ty", specimen.type),
    ]
    if specimen.stage is not None:
        params.append(("st", specimen.stage))
    if specimen.created is not None:
        timestamp = to_unix_timestamp(specimen.created)
        if timestamp is not None:
            params.append(("t", str(timestamp)))
    if specimen.batch is not None:
        params.append(("b", specimen.batch))
    if specimen.strain is not None:
        params.append(("sn", specimen.strain.name))
        if specimen.strain.generation is not None:
            params.append(("sg", specimen.strain.generation))

    return f"{url}?{urlencode(params)}"


def _invalid(message: str, url: object) -> ParseFailure:
    return ParseFailure(WolsParseError(WolsErrorCode.INVALID_URL, message, {"url": url}))


def parse_compact_url(url: str) -> ParseResult[SpecimenRef]:
    """Decode a compact URL into a partial specimen reference.

    Never raises; any input, including non-strings, yields a result.

    Args:
        url: Compact URL

    Returns:
        ParseSuccess with a SpecimenRef, or ParseFailure with WOLS_INVALID_URL
    """
    if not isinstance(url, str):
        return _invalid(f"URL must be a string, got {type(url).__name__}", repr(url))
    if not url.startswith(URL_SCHEME):
        return _invalid("URL must start with wemush://", url)

    path, _, query = url[len(URL_SCHEME) :].partition("?")
    if not path:
        return _invalid("Invalid compact URL format: missing path", url)

    segments = path.split("/")
    if len(segments) < 2 or not segments[1]:
        return _invalid("Invalid compact URL format: missing specimen ID", url)

    if not segments[0]:
        return _invalid("Invalid compact URL format: missing version", url)
    version = COMPACT_URL_VERSIONS.get(segments[0], LEGACY_URL_VERSION)
    if segments[0] not in COMPACT_URL_VERSIONS:
        logger.debug(f"Unknown URL version segment '{segments[0]}', decoding as {version}")

    params: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        params.setdefault(key, value)

    species_param = params.get("s")
    if species_param is None:
        return _invalid("Invalid compact URL format: missing species parameter", url)

    timestamp: int | None = None
    if "t" in params:
        if not TIMESTAMP_PATTERN.fullmatch(params["t"]):
            return _invalid(f"Invalid compact URL format: timestamp must be an integer, got '{params['t']}'", url)
        timestamp = int(params["t"])

    stage = params.get("st")
    if stage is not None:
        stage = get_stage_from_code(stage) or stage

    strain = None
    if "sn" in params:
        strain = StrainRef(name=params["sn"], generation=params.get("sg"))

    return ParseSuccess(
        SpecimenRef(
            id=as_specimen_id(f"{SPECIMEN_ID_PREFIX}{unquote(segments[1])}"),
            species=get_species_from_code(species_param) or species_param,
            version=version,
            type=params.get("ty"),
            stage=stage,
            timestamp=timestamp,
            batch=params.get("b"),
            strain=strain,
        )
    )


def parse_compact_url_or_throw(url: str) -> SpecimenRef:
    """Decode a compact URL, raising on failure.

    Raises:
        WolsParseError: If the URL is not a valid compact URL
    """
    result = parse_compact_url(url)
    if not result.success:
        raise result.error
    return result.data


def parse_compact_url_or_null(url: object) -> SpecimenRef | None:
    """Decode a compact URL, returning None on failure."""
    result = parse_compact_url(url)  # type: ignore[arg-type]
    return result.data if result.success else None
