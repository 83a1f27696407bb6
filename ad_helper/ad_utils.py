from __future__ import annotations


def base_dn_to_domain(dn: str) -> str:
    """DC=oit,DC=example,DC=com -> oit.example.com (non-DC components ignored)."""
    parts = []
    for token in (dn or "").split(","):
        token = token.strip()
        if token[:3].upper() == "DC=":
            parts.append(token[3:])
    return ".".join(parts)


def get_common_name(distinguished_name: str) -> str | None:
    """First ``CN=`` component of a DN, or None."""
    for part in distinguished_name.split(","):
        if part[:3].upper() == "CN=":
            return part[3:]
    return None


def get_dcs_from_domain(domain: str) -> str:
    """oit.example.com -> DC=oit,DC=example,DC=com"""
    if not domain:
        raise ValueError("domain is required")
    return ",".join(f"DC={token}" for token in domain.split("."))


def get_dcs_from_distinguished_name(distinguished_name: str) -> str:
    """CN=Public\\, Joe,OU=Partners,DC=oit,DC=example,DC=com -> DC=oit,DC=example,DC=com"""
    if not distinguished_name:
        raise ValueError("distinguished_name is required")
    return ",".join(t for t in distinguished_name.split(",") if t.startswith("DC"))


def get_ldap_path(distinguished_name: str) -> str:
    """LDAP path of the domain root that holds ``distinguished_name``."""
    if not (distinguished_name or "").strip():
        raise ValueError("distinguished_name is required")
    return f"LDAP://{get_dcs_from_distinguished_name(distinguished_name)}"


def get_name_from_cn(distinguished_name: str) -> str:
    """'Last, First' label from a DN like ``CN=Public\\, Joe,OU=...``.

    Assumes the surname is the CN and the given name the next comma-separated
    token, which only holds for DNs with an escaped comma in the CN.
    """
    if not (distinguished_name or "").strip():
        raise ValueError("distinguished_name is required")
    parts = distinguished_name.split(",")
    if len(parts) < 2:
        raise ValueError(f"Not a 'Last, First' distinguished name: {distinguished_name!r}")
    last = parts[0].replace("CN=", "").replace("\\", "")
    return f"{last}, {parts[1].strip()}"
