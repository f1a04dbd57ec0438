"""HTTP implementations of the public IP source blueprint."""

from __future__ import annotations

import ipaddress
from typing import Any

import requests

from zonesync.base.ip_source import PublicIPSourceBlueprint
from zonesync.base.config import UpdaterConfig
from zonesync.base.exceptions import PublicIPError
from zonesync.base.retry import retry
from zonesync import __version__

DEFAULT_PLAIN_URL = "https://api.ipify.org"
DEFAULT_JSON_URL = "https://api.ipify.org?format=json"


def parse_ipv4(text: str) -> str:
    """Return *text* as a canonical dotted-quad IPv4 address.

    IPv4-mapped IPv6 addresses (``::ffff:a.b.c.d``) are unwrapped.

    Raises:
        PublicIPError: If *text* is not an IPv4 address.
    """
    try:
        addr = ipaddress.ip_address(text.strip())
    except ValueError as e:
        raise PublicIPError(f"Not an IP address: {text!r}") from e
    if isinstance(addr, ipaddress.IPv6Address):
        if addr.ipv4_mapped is None:
            raise PublicIPError(f"Not an IPv4 address: {addr}")
        addr = addr.ipv4_mapped
    return str(addr)


class _HTTPIPSource(PublicIPSourceBlueprint):
    """Shared plumbing: a ``requests`` session, timeout and retry policy.

    Attributes:
        session: HTTP session reused across lookups.
        url: Endpoint queried on every lookup.
    """

    default_url: str = DEFAULT_PLAIN_URL

    def __init__(self, config: UpdaterConfig) -> None:
        self.url = config.ip_url or self.default_url
        self.timeout = config.timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": f"zonesync/{__version__}"})
        self._lookup = retry(max_attempts=config.ip_attempts)(self._fetch)

    def _get(self) -> requests.Response:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise PublicIPError(f"Public IP lookup at {self.url} failed: {e}") from e
        return response

    def _fetch(self) -> str:
        raise NotImplementedError

    def current_ipv4(self) -> str:
        return self._lookup()


class PlainTextIPSource(_HTTPIPSource):
    """Endpoint answering with the bare address as the response body."""

    default_url = DEFAULT_PLAIN_URL

    def _fetch(self) -> str:
        return parse_ipv4(self._get().text)


class JSONIPSource(_HTTPIPSource):
    """Endpoint answering ``{"ip": "a.b.c.d"}`` (ipify format)."""

    default_url = DEFAULT_JSON_URL

    def _fetch(self) -> str:
        response = self._get()
        try:
            data: Any = response.json()
            ip = data["ip"]
        except (ValueError, KeyError, TypeError) as e:
            raise PublicIPError(f"Unexpected response from {self.url}") from e
        if not isinstance(ip, str):
            raise PublicIPError(f"Unexpected response from {self.url}")
        return parse_ipv4(ip)
