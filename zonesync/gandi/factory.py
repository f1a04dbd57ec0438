"""Gandi zone provider factory.

``SERVICE_REGISTRY`` is consumed by :func:`zonesync.factory.zone_api_factory`.
"""

from zonesync.gandi.zone_api import ZoneAPI


# Service registry for Gandi
SERVICE_REGISTRY: dict[str, type] = {
    "zone_api": ZoneAPI,
}
