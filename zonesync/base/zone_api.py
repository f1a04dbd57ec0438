"""Zone API blueprint."""

from abc import ABC, abstractmethod

from .models import RecordInfo


class ZoneAPIBlueprint(ABC):
    """Abstract interface to a versioned DNS zone service.

    Every mutation happens on an inactive copy ("version") of a zone,
    which is then activated in one call. Each method is a single
    synchronous remote call and raises
    :class:`~zonesync.base.exceptions.ZoneAPIError` on failure.
    """

    # --- Versions ---

    @abstractmethod
    def current_active_version(self, zone_id: int) -> int:
        """Return the id of the version currently served to resolvers."""

    @abstractmethod
    def clone_version(self, zone_id: int, version_id: int) -> int:
        """Copy *version_id* into a new inactive version and return its id.

        Records in the new version get new ids.
        """

    @abstractmethod
    def delete_version(self, zone_id: int, version_id: int) -> None:
        """Delete an inactive version."""

    @abstractmethod
    def activate_version(self, zone_id: int, version_id: int) -> None:
        """Make *version_id* the active version of the zone."""

    # --- Records ---

    @abstractmethod
    def list_records(self, zone_id: int, version_id: int) -> list[RecordInfo]:
        """List every record of a version."""

    @abstractmethod
    def add_record(
        self,
        zone_id: int,
        version_id: int,
        name: str,
        record_type: str,
        value: str,
        ttl: int,
    ) -> RecordInfo:
        """Add a record to an inactive version.

        Args:
            zone_id: Zone identifier.
            version_id: Inactive version to modify.
            name: Record name relative to the zone.
            record_type: Record type (A, AAAA, CNAME, …).
            value: Record value.
            ttl: Time-to-live in seconds.

        Returns:
            The created record, including the id assigned by the service.
        """

    @abstractmethod
    def delete_record(self, zone_id: int, version_id: int, record_id: int) -> None:
        """Delete one record, by id, from an inactive version."""
