from __future__ import annotations

import logging
import socket

import dns.exception
import dns.resolver

from ..errors import HostResolutionError

log = logging.getLogger(__name__)


def resolve_hostname_with_dns(hostname: str, dns_server: str) -> str | None:
    """Resolve hostname using a specific DNS server."""
    if not dns_server:
        return None

    resolver = dns.resolver.Resolver(configure=False)
    resolver.nameservers = [dns_server]
    resolver.timeout = 5.0
    resolver.lifetime = 5.0

    try:
        answers = resolver.resolve(hostname, "A")
        if answers:
            return str(answers[0])
    except dns.resolver.NXDOMAIN:
        log.warning("DNS: host '%s' not found on %s", hostname, dns_server)
    except dns.resolver.NoAnswer:
        log.warning("DNS: %s returned no A record for '%s'", dns_server, hostname)
    except dns.resolver.NoNameservers:
        log.warning("DNS: all nameservers (%s) failed for '%s'", dns_server, hostname)
    except dns.exception.Timeout:
        log.warning("DNS: timeout querying %s for '%s'", dns_server, hostname)
    return None


def resolve_host(hostname: str, dns_server: str = "") -> str:
    """First address of ``hostname``.

    A configured DNS server is tried first, then the system resolver.
    Raises HostResolutionError when neither yields an address.
    """
    name = (hostname or "").strip()
    if not name:
        raise HostResolutionError(hostname or "")

    if dns_server:
        ip = resolve_hostname_with_dns(name, dns_server)
        if ip:
            return ip

    try:
        infos = socket.getaddrinfo(name, None)
    except (socket.gaierror, UnicodeError) as e:
        raise HostResolutionError(name) from e
    if not infos:
        raise HostResolutionError(name)
    return str(infos[0][4][0])
