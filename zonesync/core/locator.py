"""Name-based record lookup inside one zone version."""

from __future__ import annotations

from zonesync.base.zone_api import ZoneAPIBlueprint
from zonesync.base.models import RecordInfo
from zonesync.base.exceptions import RecordNotFoundError, AmbiguousRecordError


class RecordLocator:
    """Find a record by name among the records of a zone version.

    Record ids are renumbered whenever a version is cloned, so the
    record matching a name is looked up again in every version it is
    needed in. Nothing is cached between calls.
    """

    def __init__(self, zone_api: ZoneAPIBlueprint) -> None:
        self.zone_api = zone_api

    def find(self, zone_id: int, version_id: int, name: str) -> RecordInfo:
        """Return the only record called *name* in *version_id*.

        Raises:
            RecordNotFoundError: If no record carries *name*.
            AmbiguousRecordError: If several records carry *name*.
            ZoneAPIError: If listing the version's records fails.
        """
        matches = [
            r for r in self.zone_api.list_records(zone_id, version_id) if r.name == name
        ]
        if not matches:
            raise RecordNotFoundError(
                f"Record '{name}' not found in version {version_id} of zone {zone_id}"
            )
        if len(matches) > 1:
            raise AmbiguousRecordError(
                f"{len(matches)} records named '{name}' in version {version_id} "
                f"of zone {zone_id}"
            )
        return matches[0]
