"""Pull typed values out of a raw :class:`SearchResult`.

Absent attributes map to ``""`` (or ``[]`` for collections), never ``None``;
the only exception is :func:`get_attribute_as_date`, which returns ``None``
when there is no usable timestamp.
"""

from __future__ import annotations

import uuid
from datetime import tzinfo
from typing import Any

from . import attributes as attrs
from .models import SearchResult
from .utils import filetime_to_local_str, guid_bytes_to_str, sid_bytes_to_str

_SMTP_PREFIX = "smtp:"


def _check(result: SearchResult | None, name: str | None = "-") -> None:
    if result is None:
        raise ValueError("result is required")
    if name is None or not name.strip():
        raise ValueError("attribute name is required")


def _to_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _first(result: SearchResult, name: str) -> Any:
    values = result.properties.get(name)
    return values[0] if values else None


def get_attribute(result: SearchResult, name: str) -> str:
    _check(result, name)
    value = _first(result, name)
    return "" if value is None else _to_str(value)


def get_attribute_collection(result: SearchResult, name: str) -> list[str]:
    _check(result, name)
    return [_to_str(v) for v in result.values(name)]


def get_attribute_as_guid(result: SearchResult, name: str) -> str:
    _check(result, name)
    value = _first(result, name)
    if value is None:
        return ""
    if isinstance(value, str):
        # Already formatted by the server schema, e.g. "{...}".
        return str(uuid.UUID(value.strip()))
    return guid_bytes_to_str(value)


def get_attribute_as_sid(result: SearchResult, name: str) -> str:
    _check(result, name)
    value = _first(result, name)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return sid_bytes_to_str(value)


def get_attribute_as_date(result: SearchResult, name: str, tz: tzinfo | None = None) -> str | None:
    """File-time attribute (pwdLastSet, lastLogonTimestamp, ...) as local time."""
    _check(result, name)
    value = _first(result, name)
    if value is None:
        return None
    return filetime_to_local_str(_to_str(value).strip(), tz=tz)


def get_attribute_emails(result: SearchResult) -> list[str]:
    """SMTP addresses from proxyAddresses, lower-cased, without the prefix."""
    _check(result)
    emails = []
    for value in get_attribute_collection(result, attrs.PROXY_ADDRESSES):
        lowered = value.lower()
        if _SMTP_PREFIX in lowered:
            emails.append(lowered.replace(_SMTP_PREFIX, ""))
    return emails


def get_domain(result: SearchResult) -> str:
    """Domain part (before the backslash) of msDS-PrincipalName, upper-cased."""
    _check(result)
    principal = get_attribute(result, attrs.MSDS_PRINCIPAL_NAME)
    if not principal:
        return ""
    return principal.split("\\", 1)[0].upper()
