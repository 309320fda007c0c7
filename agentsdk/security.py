"""URL validation with protection against server-side request forgery."""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass
from typing import Sequence, Union
from urllib.parse import SplitResult, urlsplit

__all__ = [
    "DEFAULT_BLOCKED_HOSTS",
    "UrlValidationError",
    "UrlValidator",
    "is_private_ip",
    "is_loopback",
    "is_link_local",
]

DEFAULT_BLOCKED_HOSTS: tuple[str, ...] = (
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "::1",
    "[::1]",
    "169.254.169.254",  # AWS metadata
    "metadata.google.internal",  # GCP metadata
    "metadata.goog",  # GCP metadata alternate
)

IpLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]

_PRIVATE_V4 = tuple(
    ipaddress.ip_network(net)
    for net in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "100.64.0.0/10")
)
_PRIVATE_V6 = ipaddress.ip_network("fc00::/7")
_LOOPBACK_V4 = ipaddress.ip_network("127.0.0.0/8")
_LOOPBACK_V6 = ipaddress.ip_address("::1")
_LINK_LOCAL_V4 = ipaddress.ip_network("169.254.0.0/16")
_LINK_LOCAL_V6 = ipaddress.ip_network("fe80::/10")


class UrlValidationError(ValueError):
    """Raised when a URL fails validation."""


def _as_ip(ip: IpLike) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    return ipaddress.ip_address(ip)


def is_private_ip(ip: IpLike) -> bool:
    """True for private, carrier-grade NAT and unique-local addresses."""
    addr = _as_ip(ip)
    if addr.version == 4:
        return any(addr in net for net in _PRIVATE_V4)
    return addr in _PRIVATE_V6


def is_loopback(ip: IpLike) -> bool:
    """True for loopback addresses."""
    addr = _as_ip(ip)
    if addr.version == 4:
        return addr in _LOOPBACK_V4
    return addr == _LOOPBACK_V6


def is_link_local(ip: IpLike) -> bool:
    """True for link-local addresses."""
    addr = _as_ip(ip)
    if addr.version == 4:
        return addr in _LINK_LOCAL_V4
    return addr in _LINK_LOCAL_V6


def _matches(host: str, domain: str) -> bool:
    return host.lower() == domain.lower() or host.endswith(f".{domain}")


def _resolve(host: str) -> list[str]:
    try:
        infos = socket.getaddrinfo(host, 80)
    except (OSError, UnicodeError):
        return []
    return [str(info[4][0]).split("%", 1)[0] for info in infos]


@dataclass
class UrlValidator:
    """Checks URLs before they are fetched.

    By default it requires HTTPS and blocks localhost, loopback, private
    and link-local addresses and cloud metadata endpoints.
    ``extra_blocked_hosts`` adds to the default block list.
    """

    allowed_domains: Sequence[str] | None = None
    extra_blocked_hosts: Sequence[str] = ()
    allow_private_ips: bool = False
    max_redirects: int = 3
    require_https: bool = True

    @property
    def blocked_hosts(self) -> tuple[str, ...]:
        """Every hostname that is refused."""
        return DEFAULT_BLOCKED_HOSTS + tuple(self.extra_blocked_hosts)

    def validate(self, url: str) -> SplitResult:
        """Validate ``url`` and return it parsed; raise UrlValidationError otherwise."""
        try:
            parts = urlsplit(url.strip())
            hostname = parts.hostname
            parts.port  # noqa: B018 - raises on a malformed port
        except ValueError as exc:
            raise UrlValidationError(f"Invalid URL format: {exc}") from exc
        if not parts.scheme or not parts.netloc and parts.scheme not in ("http", "https"):
            raise UrlValidationError(f"Invalid URL format: {url!r}")

        scheme = parts.scheme.lower()
        if scheme == "http":
            if self.require_https:
                raise UrlValidationError("HTTPS required, but HTTP URL provided")
        elif scheme != "https":
            raise UrlValidationError(f"Unsupported URL scheme: {scheme}")

        if not hostname:
            raise UrlValidationError("URL must have a host")
        host = hostname.lower()

        if any(_matches(host, blocked) for blocked in self.blocked_hosts):
            raise UrlValidationError(f"Access to host '{host}' is blocked")

        if self.allowed_domains is not None and not any(
            _matches(host, domain) for domain in self.allowed_domains
        ):
            raise UrlValidationError(f"Host '{host}' is not in the allowed domains list")

        self._check_resolved(host)
        return parts

    def _check_resolved(self, host: str) -> None:
        for raw in _resolve(host):
            try:
                ip = ipaddress.ip_address(raw)
            except ValueError:
                continue
            if not self.allow_private_ips and is_private_ip(ip):
                raise UrlValidationError(f"Access to private IP address {ip} is blocked")
            if is_loopback(ip):
                raise UrlValidationError(f"Access to loopback address {ip} is blocked")
            if is_link_local(ip):
                raise UrlValidationError(f"Access to link-local address {ip} is blocked")