"""Abstract collaborator blueprints, data types and core utilities.

Every remote collaborator inherits from one of the blueprints defined
here. Import them to type-hint your own code or to plug in another
zone provider.
"""

from .zone_api import ZoneAPIBlueprint
from .ip_source import PublicIPSourceBlueprint
from .models import RecordInfo, UpdateOutcome, LoopState
from .supported_services import existing_zone_providers, existing_ip_sources


__all__ = [
    "ZoneAPIBlueprint",
    "PublicIPSourceBlueprint",
    "RecordInfo",
    "UpdateOutcome",
    "LoopState",
    "existing_zone_providers",
    "existing_ip_sources",
]
