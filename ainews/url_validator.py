"""
URL Validator - keep user-supplied URLs away from internal networks.

Reader mode fetches arbitrary pages on request, so URLs are checked before
fetching: http(s) only, no loopback/private/link-local/metadata targets.
"""

import ipaddress
import socket
from urllib.parse import urlparse

from fastapi import HTTPException


class SSRFError(Exception):
    """Raised when a URL fails SSRF validation."""


BLOCKED_IP_RANGES = [
    ipaddress.ip_network(cidr) for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "169.254.0.0/16",  # link-local, cloud metadata
        "0.0.0.0/8",
        "100.64.0.0/10",  # carrier-grade NAT
        "::1/128",
        "fc00::/7",
        "fe80::/10",
    )
]

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")

ALLOWED_SCHEMES = {"http", "https"}


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address is in a blocked range."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(ip in network for network in BLOCKED_IP_RANGES)


def validate_url(url: str, resolve_dns: bool = True) -> str:
    """
    Validate a URL before fetching it.

    Returns the URL unchanged. Raises SSRFError if it fails validation.
    """
    parsed = urlparse(url)

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise SSRFError(f"URL scheme '{parsed.scheme}' is not allowed. Use http or https.")
    if not parsed.hostname:
        raise SSRFError("URL must include a hostname")

    hostname = parsed.hostname.lower()
    if hostname in BLOCKED_HOSTNAMES or hostname.endswith(BLOCKED_SUFFIXES):
        raise SSRFError(f"Access to '{hostname}' is not allowed")
    if is_ip_blocked(hostname):
        raise SSRFError(f"Access to IP address '{hostname}' is not allowed")

    if resolve_dns:
        try:
            addrinfo = socket.getaddrinfo(hostname, parsed.port or 80, proto=socket.IPPROTO_TCP)
        except (socket.gaierror, UnicodeError):
            # Unresolvable hosts fail at fetch time
            return url
        for *_, sockaddr in addrinfo:
            if is_ip_blocked(sockaddr[0]):
                raise SSRFError(
                    f"Hostname '{hostname}' resolves to blocked IP address '{sockaddr[0]}'"
                )

    return url


def is_safe_url(url: str, resolve_dns: bool = True) -> bool:
    """Boolean form of validate_url."""
    try:
        validate_url(url, resolve_dns=resolve_dns)
        return True
    except SSRFError:
        return False


def validate_url_or_raise_http(url: str, resolve_dns: bool = True) -> str:
    """Validate a URL, raising a 400 HTTPException on failure."""
    try:
        return validate_url(url, resolve_dns=resolve_dns)
    except SSRFError as e:
        raise HTTPException(status_code=400, detail=str(e))
