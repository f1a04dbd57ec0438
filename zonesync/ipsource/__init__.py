"""Public IPv4 discovery over HTTP."""

from .http import JSONIPSource, PlainTextIPSource, parse_ipv4

__all__ = [
    "JSONIPSource",
    "PlainTextIPSource",
    "parse_ipv4",
]
