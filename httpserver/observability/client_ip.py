from __future__ import annotations

import ipaddress
from collections.abc import Mapping


def _is_ip(value: str) -> bool:
    # Zoned IPv6 literals (fe80::1%eth0) are not client addresses.
    if "%" in value:
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _header(headers: Mapping[str, str], name: str) -> str:
    """First value of ``name``, matched case-insensitively."""
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return ""


def remote_host(remote_addr: str | None) -> str:
    """Strip the port from a transport address (``host:port`` or ``[v6]:port``)."""
    if not remote_addr:
        return ""
    if remote_addr.startswith("["):
        host, sep, _ = remote_addr[1:].partition("]")
        return host if sep else remote_addr
    # A bare IPv6 address has several colons and no port.
    if remote_addr.count(":") == 1:
        return remote_addr.partition(":")[0]
    return remote_addr


def resolve_client_ip(headers: Mapping[str, str], remote_addr: str | None) -> str:
    """
    Best-effort client IP: X-Real-IP, then the first X-Forwarded-For hop,
    then the transport peer.

    Header names are matched case-insensitively. Header candidates that do not
    parse as an IP address are ignored. Never raises; returns "" when nothing
    usable is known.
    """
    candidate = _header(headers, "x-real-ip")
    if not candidate:
        candidate = _header(headers, "x-forwarded-for").split(",", 1)[0].strip()

    if candidate and _is_ip(candidate):
        return candidate
    return remote_host(remote_addr)
