"""Lexical SSRF filter for outbound fetches.

The check only looks at the URL text: no DNS lookups are made, so hostnames
that resolve to private addresses (or rebinding tricks) are not caught.
"""
from __future__ import annotations

import re
import socket
from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})
BLOCKED_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})  # noqa: S104
BLOCKED_SUFFIXES = (".local",)
PRIVATE_NET_RE = re.compile(r"^(10\.|192\.168\.|172\.(1[6-9]|2\d|3[0-1])\.)")
# All-numeric hosts (decimal, octal or hex parts): "2130706433", "127.1", "0x7f.0.0.1"
NUMERIC_HOST_RE = re.compile(r"^(0x[0-9a-f]*|[0-9]+)(\.(0x[0-9a-f]*|[0-9]+))*$")


@dataclass(frozen=True)
class GuardVerdict:
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


_OK = GuardVerdict(True)


def parse_candidate(url: str) -> SplitResult:
    """Split a user supplied URL; raises ValueError when it is not an absolute URL.

    Only http(s) URLs need a host here. Other schemes parse so that the guard
    can reject them by scheme.
    """
    parts = urlsplit(url.strip())
    # accessing .port validates it ("http://h:99999" is rejected here)
    parts.port  # noqa: B018
    if not parts.scheme:
        raise ValueError("not an absolute URL")
    if parts.scheme.lower() in ALLOWED_SCHEMES and not parts.hostname:
        raise ValueError("missing host")
    return parts


def normalize_host(host: str) -> str | None:
    """Lowercase ``host`` and rewrite numeric IPv4 shorthands to dotted-quad.

    Resolvers accept forms like ``2130706433`` or ``0x7f.1`` for loopback,
    so they are compared in canonical form. Returns None for a numeric host
    that is not a valid IPv4 address. No DNS lookup is made.
    """
    host = host.lower().rstrip(".")
    if not NUMERIC_HOST_RE.match(host):
        return host
    try:
        return socket.inet_ntoa(socket.inet_aton(host))
    except OSError:
        return None


def _check_parts(parts: SplitResult) -> GuardVerdict:
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return GuardVerdict(False, "scheme")
    if parts.username or parts.password:
        return GuardVerdict(False, "credentials")
    host = normalize_host(parts.hostname or "")
    if host is None:
        return GuardVerdict(False, "bad_address")
    if host in BLOCKED_HOSTS:
        return GuardVerdict(False, "blocked_host")
    if host.endswith(BLOCKED_SUFFIXES):
        return GuardVerdict(False, "local_suffix")
    if PRIVATE_NET_RE.match(host):
        return GuardVerdict(False, "private_network")
    return _OK


def check_url(url: str | SplitResult) -> GuardVerdict:
    """Classify ``url`` as allowed or blocked.

    Accepts a raw string or an already split URL. Raises ValueError for
    strings that cannot be parsed; callers decide whether that is fatal.
    """
    parts = parse_candidate(url) if isinstance(url, str) else url
    return _check_parts(parts)


def is_allowed(url: str) -> bool:
    try:
        return check_url(url).allowed
    except ValueError:
        return False
