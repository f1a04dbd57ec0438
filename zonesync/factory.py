"""Collaborator factories.

Provides :func:`zone_api_factory` and :func:`ip_source_factory`, the
entry-points for creating the remote collaborators of the poll loop.
Both dispatch on a registry key and return a blueprint instance.
"""

from typing import Any

from zonesync.base import (
    ZoneAPIBlueprint,
    PublicIPSourceBlueprint,
    existing_zone_providers,
    existing_ip_sources,
)
from zonesync.base.config import UpdaterConfig, validate_config
from zonesync.gandi.factory import SERVICE_REGISTRY as GANDI_SERVICES
from zonesync.ipsource.factory import SERVICE_REGISTRY as IP_SOURCES


# Zone provider registry: provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "gandi": GANDI_SERVICES,
}


def _as_config(config: UpdaterConfig | dict[str, Any]) -> UpdaterConfig:
    if isinstance(config, UpdaterConfig):
        return config
    return validate_config(config)


def zone_api_factory(
    provider: existing_zone_providers,
    config: UpdaterConfig | dict[str, Any],
) -> ZoneAPIBlueprint:
    """
    Create the zone API client for a provider.
    Args:
        provider: The zone provider (e.g. 'gandi').
        config: Validated config, or a raw dict validated here.
    Returns:
        A :class:`ZoneAPIBlueprint` instance.
    Raises:
        ValueError: If the provider is not supported.
    """
    if provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported zone provider: {provider}")
    service_class = _FACTORY_REGISTRY[provider]["zone_api"]
    return service_class(_as_config(config))


def ip_source_factory(
    kind: existing_ip_sources,
    config: UpdaterConfig | dict[str, Any],
) -> PublicIPSourceBlueprint:
    """
    Create the public IP source for a response format.
    Args:
        kind: 'plain' (bare address body) or 'json' (``{"ip": ...}``).
        config: Validated config, or a raw dict validated here.
    Returns:
        A :class:`PublicIPSourceBlueprint` instance.
    Raises:
        ValueError: If the kind is not supported.
    """
    if kind not in IP_SOURCES:
        raise ValueError(f"Unsupported public IP source: {kind}")
    return IP_SOURCES[kind](_as_config(config))
