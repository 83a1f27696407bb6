from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Iterable, Mapping

from ldap3.utils.ciDict import CaseInsensitiveDict

from ..ad_utils import base_dn_to_domain


class AuthenticationTypes(IntFlag):
    """ADSI authentication option bits."""

    NONE = 0
    SECURE = 1
    ENCRYPTION = 2
    READONLY_SERVER = 4
    ANONYMOUS = 16
    FAST_BIND = 32
    SIGNING = 64
    SEALING = 128
    DELEGATION = 256
    SERVER_BIND = 512


DEFAULT_AUTH_TYPES = (
    AuthenticationTypes.READONLY_SERVER
    | AuthenticationTypes.SEALING
    | AuthenticationTypes.SIGNING
    | AuthenticationTypes.SECURE
)

_DEFAULT_PORTS = {
    ("LDAP", False): 389,
    ("LDAP", True): 636,
    ("GC", False): 3268,
    ("GC", True): 3269,
}


@dataclass
class SearchResult:
    """One raw directory entry: its DN and multi-valued attributes."""

    path: str
    properties: Mapping[str, list] = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self) -> None:
        if not isinstance(self.properties, CaseInsensitiveDict):
            self.properties = CaseInsensitiveDict(
                {k: _as_list(v) for k, v in dict(self.properties).items()}
            )

    @classmethod
    def from_entry(cls, entry: Mapping[str, Any]) -> "SearchResult":
        """Build from an ldap3 response entry (``searchResEntry``)."""
        props = CaseInsensitiveDict()
        raw = entry.get("raw_attributes") or entry.get("attributes") or {}
        for name, values in raw.items():
            values = _as_list(values)
            if values:
                props[name] = values
        return cls(path=str(entry.get("dn") or ""), properties=props)

    def contains(self, name: str) -> bool:
        return bool(self.properties.get(name))

    def values(self, name: str) -> list:
        return list(self.properties.get(name) or [])


def _as_list(values: Any) -> list:
    if values is None:
        return []
    if isinstance(values, (bytes, bytearray, str)):
        return [values] if values else []
    if isinstance(values, Iterable):
        return [v for v in values if v is not None]
    return [values]


@dataclass
class SearcherConfig:
    """Parsed ADSI-style path plus bind settings.

    Path shapes: ``LDAP://DC=oit,DC=example,DC=com``,
    ``GC://dc01.example.com/DC=example,DC=com``,
    ``LDAPS://dc01.example.com:636/DC=example,DC=com``.
    """

    path: str
    username: str = ""
    password: str = ""
    port: int = 0
    auth_types: AuthenticationTypes = DEFAULT_AUTH_TYPES
    dns_server: str = ""
    tls_validate: bool = False
    scheme: str = field(default="LDAP", init=False)
    server_host: str = field(default="", init=False)
    path_port: int = field(default=0, init=False)
    base_dn: str = field(default="", init=False)

    def __post_init__(self) -> None:
        path = (self.path or "").strip()
        if not path:
            raise ValueError("path is required")
        self.path = path
        self.auth_types = AuthenticationTypes(int(self.auth_types))

        if "://" in path:
            scheme, rest = path.split("://", 1)
            self.scheme = scheme.strip().upper() or "LDAP"
        else:
            rest = path
        if self.scheme not in ("LDAP", "LDAPS", "GC"):
            raise ValueError(f"Unsupported directory path scheme: {self.scheme}")

        if "/" in rest:
            host_part, self.base_dn = rest.split("/", 1)
        elif "=" in rest:
            host_part, self.base_dn = "", rest
        else:
            host_part = rest
        host, sep, port = host_part.rpartition(":")
        if sep and port.isdigit():
            self.server_host, self.path_port = host, int(port)
        else:
            self.server_host = host_part
        self.base_dn = self.base_dn.strip()

    @property
    def use_ssl(self) -> bool:
        return self.scheme == "LDAPS" or bool(self.auth_types & AuthenticationTypes.ENCRYPTION)

    @property
    def domain(self) -> str:
        return base_dn_to_domain(self.base_dn)

    @property
    def host(self) -> str:
        # Serverless binding: the DNS domain locates a domain controller.
        return self.server_host or self.domain

    @property
    def effective_port(self) -> int:
        if self.port:
            return self.port
        if self.path_port:
            return self.path_port
        scheme = "LDAP" if self.scheme == "LDAPS" else self.scheme
        return _DEFAULT_PORTS[(scheme, self.use_ssl)]

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @property
    def bind_principal(self) -> str:
        u = (self.username or "").strip()
        d = self.domain
        if not u:
            return ""
        if "@" in u or "\\" in u:
            return u
        return f"{u}@{d}" if d else u

    @property
    def ntlm_principal(self) -> str:
        """DOMAIN\\user form required by NTLM binds."""
        u = (self.username or "").strip()
        if not u or "\\" in u:
            return u
        name, _, upn_domain = u.partition("@")
        netbios = (upn_domain or self.domain).split(".", 1)[0].upper()
        return f"{netbios}\\{name}" if netbios else name

    def rescoped(self, ldap_path: str) -> "SearcherConfig":
        """Same credentials and options against another path."""
        return SearcherConfig(
            path=ldap_path,
            username=self.username,
            password=self.password,
            auth_types=self.auth_types,
            dns_server=self.dns_server,
            tls_validate=self.tls_validate,
        )
