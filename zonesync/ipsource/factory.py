"""Public IP source factory.

``SERVICE_REGISTRY`` is consumed by :func:`zonesync.factory.ip_source_factory`.
"""

from zonesync.ipsource.http import PlainTextIPSource, JSONIPSource


# Service registry for public IP sources
SERVICE_REGISTRY: dict[str, type] = {
    "plain": PlainTextIPSource,
    "json": JSONIPSource,
}
