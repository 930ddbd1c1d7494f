"""Time helpers."""

from __future__ import annotations

import time
from datetime import date, datetime, timezone

_COMPACT_DATE_FORMAT = "%Y%m%d"


def now_ms() -> int:
    """Return current timestamp in milliseconds."""
    return int(time.time() * 1000)


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def iso_now() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_iso_date(value: str) -> str:
    """Return ``value`` as ``YYYY-MM-DD``; accepts the extended and the compact ISO forms.

    Raises ``ValueError`` for anything else.
    """
    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        return datetime.strptime(text, _COMPACT_DATE_FORMAT).date().isoformat()
