"""
Time parsing utilities for Ubisoft session timestamps.

The sessions endpoint returns RFC 3339 timestamps with seven fractional
digits (e.g. ``2024-05-01T10:15:30.1234567Z``), which ``datetime`` cannot
read directly.
"""

import re
from datetime import datetime, timezone

_TIMESTAMP_RE = re.compile(
    r'^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})'
    r'(?:\.(?P<fraction>\d+))?'
    r'(?P<offset>Z|[+-]\d{2}:\d{2})?$'
)


def parse_ubi_timestamp(value: str) -> datetime:
    """
    Parse a Ubisoft expiration timestamp into an aware UTC datetime.

    Args:
        value: Timestamp string, fraction of any length, ``Z`` or ``+HH:MM`` offset

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the format is invalid
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")

    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid timestamp format: {value}")

    # datetime supports microseconds only
    fraction = (match.group('fraction') or '0')[:6].ljust(6, '0')
    offset = match.group('offset') or 'Z'
    if offset == 'Z':
        offset = '+00:00'

    parsed = datetime.fromisoformat(f"{match.group('base')}.{fraction}{offset}")
    return parsed.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime the way it is logged (ISO 8601, UTC)."""
    return moment.astimezone(timezone.utc).isoformat()
