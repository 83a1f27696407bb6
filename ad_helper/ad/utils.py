from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any

from ldap3.protocol.formatters.formatters import format_sid

from ..timezone_utils import format_iso_local

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def filetime_to_datetime(v: Any) -> datetime | None:
    """Windows FILETIME (100ns ticks since 1601-01-01 UTC) -> aware UTC datetime."""
    try:
        n = int(v)
    except (TypeError, ValueError):
        return None
    if n <= 0:
        return None
    try:
        return _FILETIME_EPOCH + timedelta(microseconds=n // 10)
    except OverflowError:
        # 0x7FFFFFFFFFFFFFFF is AD's "never".
        return None


def filetime_to_local_str(v: Any, tz: tzinfo | None = None) -> str | None:
    dt = filetime_to_datetime(v)
    if dt is None:
        return None
    return format_iso_local(dt, tz=tz)


def guid_bytes_to_str(blob: bytes) -> str:
    """objectGUID octet string (little-endian layout) -> canonical GUID."""
    return str(uuid.UUID(bytes_le=bytes(blob)))


def guid_to_octet_string(guid: str) -> str:
    """GUID string -> ``\\xx`` escaped bytes usable in an objectGUID filter."""
    raw = uuid.UUID(guid.strip()).bytes_le
    return "".join(f"\\{b:02x}" for b in raw)


def sid_bytes_to_str(blob: bytes) -> str:
    """Binary security identifier -> ``S-R-I-S-S...``."""
    data = bytes(blob)
    if len(data) < 8:
        raise ValueError("SID is too short")
    if len(data) < 8 + 4 * data[1]:
        raise ValueError("SID is truncated")
    return format_sid(data)
