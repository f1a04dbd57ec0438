"""Zonesync — keep a DNS record pointed at this host's public IPv4 address.

Updates go through a versioned zone API: the active zone version is
cloned, the record is replaced inside the clone and the clone is
activated, with rollback when any step fails::

    from zonesync import zone_api_factory, ip_source_factory, bootstrap, PollLoop

    config = {"api_key": "...", "zone_id": 42, "record": "home"}
    api = zone_api_factory("gandi", config)
    state, record = bootstrap(api, 42, "home")
    PollLoop(api, ip_source_factory("plain", config), 42, record, 300).run(state)
"""

__version__ = "0.1.0"

from .base import (
    ZoneAPIBlueprint,
    PublicIPSourceBlueprint,
    RecordInfo,
    UpdateOutcome,
    LoopState,
)
from .core import RecordLocator, UpdateTransaction, PollLoop, bootstrap, should_update
from .factory import zone_api_factory, ip_source_factory

__all__ = [
    "ZoneAPIBlueprint",
    "PublicIPSourceBlueprint",
    "RecordInfo",
    "UpdateOutcome",
    "LoopState",
    "RecordLocator",
    "UpdateTransaction",
    "PollLoop",
    "bootstrap",
    "should_update",
    "zone_api_factory",
    "ip_source_factory",
]
