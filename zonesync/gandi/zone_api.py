"""Gandi XML-RPC implementation of the zone API blueprint."""

from __future__ import annotations

from http.client import HTTPException
from typing import Any, Callable, NoReturn
from xml.parsers.expat import ExpatError
from xmlrpc.client import Error as XMLRPCError
from xmlrpc.client import Fault, ProtocolError, SafeTransport, ServerProxy

from pydantic import ValidationError

from zonesync.base.zone_api import ZoneAPIBlueprint
from zonesync.base.models import RecordInfo
from zonesync.base.config import UpdaterConfig
from zonesync.base.exceptions import ZoneAPIError, TransientAPIError

PRODUCTION_URL = "https://rpc.gandi.net/xmlrpc/"
TEST_URL = "https://rpc.ote.gandi.net/xmlrpc/"


def _handle(e: Exception, msg: str) -> NoReturn:
    if isinstance(e, Fault):
        raise ZoneAPIError(f"{msg}: [{e.faultCode}] {e.faultString}") from e
    if isinstance(e, ProtocolError):
        raise TransientAPIError(f"{msg}: HTTP {e.errcode} {e.errmsg}") from e
    raise TransientAPIError(f"{msg}: {e}") from e


class _TimeoutTransport(SafeTransport):
    """HTTPS transport applying a socket timeout to every call."""

    def __init__(self, timeout: float) -> None:
        super().__init__()
        self.timeout = timeout

    def make_connection(self, host: Any) -> Any:
        conn = super().make_connection(host)
        conn.timeout = self.timeout
        return conn


class ZoneAPI(ZoneAPIBlueprint):
    """Gandi hosting API zone service.

    Attributes:
        client: XML-RPC server proxy.
        url: Endpoint in use (production or OT&E test platform).
    """

    def __init__(self, config: UpdaterConfig) -> None:
        """Initialize the XML-RPC proxy.

        Args:
            config: Updater configuration. Expected attributes:
                   - api_key: Gandi API key, sent with every call
                   - test_platform: use the OT&E endpoint
                   - timeout: per-call socket timeout in seconds
        """
        self.url = TEST_URL if config.test_platform else PRODUCTION_URL
        self._api_key = config.api_key
        self.client = ServerProxy(
            self.url,
            transport=_TimeoutTransport(config.timeout),
            allow_none=True,
        )

    def _call(self, msg: str, method: Callable[..., Any], *args: Any) -> Any:
        try:
            return method(self._api_key, *args)
        except (XMLRPCError, HTTPException, ExpatError, OSError) as e:
            _handle(e, msg)

    @staticmethod
    def _to_record(raw: Any, msg: str) -> RecordInfo:
        try:
            return RecordInfo(
                id=raw["id"],
                name=raw["name"],
                type=raw["type"],
                value=raw["value"],
                ttl=raw.get("ttl", 10800),
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise ZoneAPIError(f"{msg}: malformed record {raw!r}") from e

    @staticmethod
    def _to_id(raw: Any, msg: str) -> int:
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise ZoneAPIError(f"{msg}: malformed id {raw!r}") from e

    # --- Versions ---

    def current_active_version(self, zone_id: int) -> int:
        """Return the active version number from ``domain.zone.info``."""
        info = self._call(
            f"Failed to get info of zone {zone_id}",
            self.client.domain.zone.info,
            zone_id,
        )
        try:
            return int(info["version"])
        except (KeyError, TypeError, ValueError) as e:
            raise ZoneAPIError(f"Zone {zone_id} info has no active version") from e

    def clone_version(self, zone_id: int, version_id: int) -> int:
        """Create a new version from *version_id* with ``domain.zone.version.new``."""
        msg = f"Failed to create version from {version_id} in zone {zone_id}"
        return self._to_id(
            self._call(msg, self.client.domain.zone.version.new, zone_id, version_id),
            msg,
        )

    def delete_version(self, zone_id: int, version_id: int) -> None:
        """Delete an inactive version.

        Raises:
            ZoneAPIError: If the API reports the version was not deleted.
        """
        msg = f"Failed to delete version {version_id} of zone {zone_id}"
        if not self._call(msg, self.client.domain.zone.version.delete, zone_id, version_id):
            raise ZoneAPIError(msg)

    def activate_version(self, zone_id: int, version_id: int) -> None:
        """Activate *version_id* with ``domain.zone.version.set``."""
        msg = f"Failed to activate version {version_id} of zone {zone_id}"
        if not self._call(msg, self.client.domain.zone.version.set, zone_id, version_id):
            raise ZoneAPIError(msg)

    # --- Records ---

    def list_records(self, zone_id: int, version_id: int) -> list[RecordInfo]:
        """List the records of a version.

        Returns:
            One :class:`RecordInfo` per record, in API order.
        """
        msg = f"Failed to list records of version {version_id} in zone {zone_id}"
        raw = self._call(msg, self.client.domain.zone.record.list, zone_id, version_id)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ZoneAPIError(f"{msg}: malformed record list {raw!r}")
        return [self._to_record(r, msg) for r in raw]

    def add_record(
        self,
        zone_id: int,
        version_id: int,
        name: str,
        record_type: str,
        value: str,
        ttl: int,
    ) -> RecordInfo:
        """Add a record with ``domain.zone.record.add``."""
        msg = f"Failed to add record '{name}' to version {version_id} in zone {zone_id}"
        raw = self._call(
            msg,
            self.client.domain.zone.record.add,
            zone_id,
            version_id,
            {"name": name, "type": record_type, "value": value, "ttl": ttl},
        )
        return self._to_record(raw, msg)

    def delete_record(self, zone_id: int, version_id: int, record_id: int) -> None:
        """Delete one record by id.

        Raises:
            ZoneAPIError: If no record was deleted.
        """
        msg = f"Failed to delete record {record_id} from version {version_id} in zone {zone_id}"
        deleted = self._call(
            msg,
            self.client.domain.zone.record.delete,
            zone_id,
            version_id,
            {"id": record_id},
        )
        if not deleted:
            raise ZoneAPIError(msg)
