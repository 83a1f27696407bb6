"""Typed Active Directory lookups over ldap3."""

from .ad import (
    DEFAULT_AUTH_TYPES,
    AuthenticationTypes,
    ComputerRecord,
    DirectorySearcher,
    GroupRecord,
    SearchResult,
    UserRecord,
    UserWithManagerRecord,
)
from .errors import DirectoryAccessError, DirectoryError, HostResolutionError, SearcherClosedError

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_AUTH_TYPES",
    "AuthenticationTypes",
    "ComputerRecord",
    "DirectorySearcher",
    "GroupRecord",
    "SearchResult",
    "UserRecord",
    "UserWithManagerRecord",
    "DirectoryAccessError",
    "DirectoryError",
    "HostResolutionError",
    "SearcherClosedError",
]
