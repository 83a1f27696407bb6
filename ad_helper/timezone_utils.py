from __future__ import annotations

import os
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _tz_name() -> str:
    """Preferred TZ name from environment (Docker/Unix TZ)."""
    return (os.getenv("TZ") or "").strip()


def get_local_tzinfo() -> tzinfo | None:
    """Return tzinfo for local time.

    - ``TZ`` set and known to zoneinfo -> that zone.
    - Otherwise ``None``, meaning the interpreter's local zone.
    """
    name = _tz_name()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def _parse_dt_any(v: Any) -> Optional[datetime]:
    if v is None:
        return None

    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    # Naive datetimes are UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_local_dt(v: Any, tz: tzinfo | None = None) -> Optional[datetime]:
    """Convert a timestamp to local time (aware datetime)."""
    dt = _parse_dt_any(v)
    if dt is None:
        return None
    return dt.astimezone(tz or get_local_tzinfo())


def format_iso_local(v: Any, *, tz: tzinfo | None = None, timespec: str = "seconds") -> str:
    """Format a timestamp as local time without TZ suffix: YYYY-MM-DD HH:MM:SS."""
    dt = to_local_dt(v, tz)
    if dt is None:
        return ""
    return dt.replace(tzinfo=None).isoformat(sep=" ", timespec=timespec)
