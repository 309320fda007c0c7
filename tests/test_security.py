import socket

import pytest

from agentsdk.security import (
    UrlValidationError,
    UrlValidator,
    is_link_local,
    is_loopback,
    is_private_ip,
)

ADDRESSES = {
    "example.com": "93.184.216.34",
    "sub.example.com": "93.184.216.34",
    "other.com": "93.184.216.35",
    "internal.example.com": "10.0.0.5",
    "loop.example.com": "127.0.0.2",
    "linklocal.example.com": "169.254.1.1",
}


@pytest.fixture(autouse=True)
def fake_dns(monkeypatch):
    def fake_getaddrinfo(host, port, *args, **kwargs):
        ip = ADDRESSES.get(host)
        if ip is None:
            raise socket.gaierror("unknown host")
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (ip, port))]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)


def test_valid_https_url():
    validator = UrlValidator()
    assert validator.validate("https://example.com").hostname == "example.com"
    assert validator.validate("https://example.com/path").path == "/path"
    assert validator.validate("https://sub.example.com").hostname == "sub.example.com"


def test_http_blocked_by_default():
    with pytest.raises(UrlValidationError, match="HTTPS required"):
        UrlValidator().validate("http://example.com")


def test_http_allowed_with_flag():
    validator = UrlValidator(require_https=False)
    assert validator.validate("http://example.com").scheme == "http"


@pytest.mark.parametrize("url", ["http://localhost", "http://127.0.0.1", "http://[::1]"])
def test_localhost_blocked(url):
    with pytest.raises(UrlValidationError, match="blocked"):
        UrlValidator(require_https=False).validate(url)


@pytest.mark.parametrize("url", ["http://169.254.169.254", "http://metadata.google.internal"])
def test_metadata_endpoints_blocked(url):
    with pytest.raises(UrlValidationError, match="blocked"):
        UrlValidator(require_https=False).validate(url)


def test_invalid_url():
    validator = UrlValidator()
    with pytest.raises(UrlValidationError, match="Invalid URL"):
        validator.validate("not-a-url")
    with pytest.raises(UrlValidationError, match="Invalid URL"):
        validator.validate("")
    with pytest.raises(UrlValidationError, match="Unsupported URL scheme: ftp"):
        validator.validate("ftp://example.com")


def test_allowed_domains():
    validator = UrlValidator(allowed_domains=["example.com"])
    assert validator.validate("https://example.com").hostname == "example.com"
    assert validator.validate("https://sub.example.com").hostname == "sub.example.com"
    with pytest.raises(UrlValidationError, match="not in the allowed domains"):
        validator.validate("https://other.com")


def test_blocked_hosts():
    validator = UrlValidator(extra_blocked_hosts=["blocked.com"])
    with pytest.raises(UrlValidationError, match="blocked"):
        validator.validate("https://blocked.com")
    with pytest.raises(UrlValidationError, match="blocked"):
        validator.validate("https://www.blocked.com")
    assert "localhost" in validator.blocked_hosts


def test_resolved_private_ip_blocked():
    with pytest.raises(UrlValidationError, match="private IP"):
        UrlValidator().validate("https://internal.example.com")


def test_resolved_private_ip_allowed_with_flag():
    validator = UrlValidator(allow_private_ips=True)
    assert validator.validate("https://internal.example.com").hostname == "internal.example.com"


def test_resolved_loopback_blocked_even_when_private_allowed():
    with pytest.raises(UrlValidationError, match="loopback"):
        UrlValidator(allow_private_ips=True).validate("https://loop.example.com")


def test_resolved_link_local_blocked():
    with pytest.raises(UrlValidationError, match="link-local"):
        UrlValidator().validate("https://linklocal.example.com")


def test_unresolvable_host_passes():
    parsed = UrlValidator().validate("https://nowhere.example.org")
    assert parsed.hostname == "nowhere.example.org"


@pytest.mark.parametrize(
    "ip",
    ["10.0.0.1", "10.255.255.255", "172.16.0.1", "172.31.255.255", "192.168.0.1", "192.168.255.255"],
)
def test_is_private_ipv4(ip):
    assert is_private_ip(ip) is True


@pytest.mark.parametrize("ip", ["8.8.8.8", "1.1.1.1", "172.15.0.1", "172.32.0.1"])
def test_is_not_private_ipv4(ip):
    assert is_private_ip(ip) is False


def test_private_cgnat_and_unique_local():
    assert is_private_ip("100.64.0.1") is True
    assert is_private_ip("100.128.0.1") is False
    assert is_private_ip("fd00::1") is True
    assert is_private_ip("2001:db8::1") is False


def test_loopback_and_link_local():
    assert is_loopback("127.0.0.1") is True
    assert is_loopback("::1") is True
    assert is_loopback("8.8.8.8") is False
    assert is_link_local("169.254.169.254") is True
    assert is_link_local("fe80::1") is True
    assert is_link_local("fec0::1") is False


def test_max_redirects():
    assert UrlValidator(max_redirects=5).max_redirects == 5


def test_default_validator():
    validator = UrlValidator()
    assert validator.allow_private_ips is False
    assert validator.require_https is True
    assert validator.max_redirects == 3
    assert validator.allowed_domains is None