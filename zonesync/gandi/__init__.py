"""Gandi hosting API (XML-RPC) zone provider."""

from .zone_api import ZoneAPI

__all__ = [
    "ZoneAPI",
]
