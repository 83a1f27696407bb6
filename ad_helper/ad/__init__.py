"""Active Directory (LDAP) lookups.

Public API:
    - DirectorySearcher
    - SearchResult, SearcherConfig, AuthenticationTypes
    - UserRecord, UserWithManagerRecord, GroupRecord, ComputerRecord
"""

from .models import DEFAULT_AUTH_TYPES, AuthenticationTypes, SearcherConfig, SearchResult
from .records import ComputerRecord, GroupRecord, UserRecord, UserWithManagerRecord
from .client import DirectorySearcher

__all__ = [
    "DEFAULT_AUTH_TYPES",
    "AuthenticationTypes",
    "SearcherConfig",
    "SearchResult",
    "UserRecord",
    "UserWithManagerRecord",
    "GroupRecord",
    "ComputerRecord",
    "DirectorySearcher",
]
