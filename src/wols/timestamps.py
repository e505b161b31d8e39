"""ISO 8601 timestamp helpers.

Only a strict profile is accepted: ``YYYY-MM-DDTHH:MM:SS`` with optional
fractional seconds (up to three digits) and a mandatory ``Z`` or ``+HH:MM``
offset. Matching the pattern is not enough; the value must also name a real
calendar instant.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timedelta, timezone

logger = logging.getLogger(__name__)

ISO8601_PATTERN = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,3}))?(Z|[+-][0-9]{2}:[0-9]{2})"
)
DATE_ONLY_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def parse_iso8601(value: str) -> datetime | None:
    """Parse a strict ISO 8601 date-time.

    Args:
        value: Candidate timestamp string

    Returns:
        Timezone-aware datetime, or None if the value is not a valid instant
    """
    if not isinstance(value, str):
        return None

    match = ISO8601_PATTERN.fullmatch(value)
    if not match:
        return None

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        off_hours, off_minutes = int(offset[1:3]), int(offset[4:6])
        if off_hours > 23 or off_minutes > 59:
            return None
        tz = timezone(sign * timedelta(hours=off_hours, minutes=off_minutes))

    microsecond = int(fraction.ljust(6, "0")) if fraction else 0
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            microsecond,
            tzinfo=tz,
        )
    except ValueError:
        return None


def is_valid_iso8601(value: object) -> bool:
    """Return True if value is a strict ISO 8601 date-time string."""
    return isinstance(value, str) and parse_iso8601(value) is not None


def is_valid_date_only(value: object) -> bool:
    """Return True if value is a real calendar date in YYYY-MM-DD form."""
    if not isinstance(value, str):
        return False
    match = DATE_ONLY_PATTERN.fullmatch(value)
    if not match:
        return False
    try:
        date(*(int(part) for part in match.groups()))
    except ValueError:
        return False
    return True


def to_unix_timestamp(value: str) -> int | None:
    """Convert an ISO 8601 timestamp to whole Unix seconds (floored)."""
    parsed = parse_iso8601(value)
    if parsed is None:
        logger.debug(f"Cannot convert to unix timestamp: {value!r}")
        return None
    return math.floor(parsed.timestamp())


def from_unix_timestamp(seconds: int) -> str:
    """Convert Unix seconds to an ISO 8601 UTC timestamp ending in Z."""
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def get_current_iso8601() -> str:
    """Current UTC time as ISO 8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
