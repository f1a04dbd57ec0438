"""
Versioned zone update transaction.

Changing one record of a versioned zone takes five remote calls: clone
the active version, find the record in the clone, delete it, add its
replacement, activate the clone. Only the activation changes what
resolvers see. Any failure after the clone exists deletes the clone
again (rollback); once the clone is active the previous version is
deleted on a best-effort basis (retire).

The sequence is written as an explicit state machine so every failure
path, and the compensating action it triggers, is a visible transition.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from zonesync.base.zone_api import ZoneAPIBlueprint
from zonesync.base.models import RecordInfo, UpdateOutcome
from zonesync.base.exceptions import ZoneSyncError, RollbackError
from zonesync.base.logger import ZoneSyncLogger, zs_logger
from zonesync.core.locator import RecordLocator


class TxState(str, Enum):
    START = "start"
    VERSION_CREATED = "version_created"
    OLD_RECORD_FOUND = "old_record_found"
    RECORD_DELETED = "record_deleted"
    RECORD_ADDED = "record_added"
    VERSION_ACTIVE = "version_active"
    ROLLBACK = "rollback"
    DONE = "done"
    FAILED = "failed"


# state -> (operation, handler, next state on success, next state on failure)
_FORWARD: dict[TxState, tuple[str, str, TxState, TxState]] = {
    TxState.START: ("clone", "_clone", TxState.VERSION_CREATED, TxState.FAILED),
    TxState.VERSION_CREATED: ("locate", "_locate", TxState.OLD_RECORD_FOUND, TxState.ROLLBACK),
    TxState.OLD_RECORD_FOUND: (
        "delete_record", "_delete_old_record", TxState.RECORD_DELETED, TxState.ROLLBACK,
    ),
    TxState.RECORD_DELETED: ("add_record", "_add_record", TxState.RECORD_ADDED, TxState.ROLLBACK),
    TxState.RECORD_ADDED: ("activate", "_activate", TxState.VERSION_ACTIVE, TxState.ROLLBACK),
}

_TERMINAL = (TxState.DONE, TxState.FAILED)


@dataclass
class _Attempt:
    """Working data of one :meth:`UpdateTransaction.execute` call."""

    active_version: int
    desired: RecordInfo
    request_id: str
    new_version: int | None = None
    old_record: RecordInfo | None = None
    failed_step: str | None = None
    error: ZoneSyncError | None = None
    rollback_error: RollbackError | None = None


class UpdateTransaction:
    """Replace one record's value by cloning, editing and activating a zone version.

    The caller sees only :class:`UpdateOutcome`: success with the new
    active version id, or failure with the zone left as it was (apart
    from an orphaned clone when even the rollback failed).

    Attributes:
        zone_api: Zone service the calls are issued against.
        zone_id: Zone being updated.
        history: States visited by the last :meth:`execute` call.
    """

    def __init__(
        self,
        zone_api: ZoneAPIBlueprint,
        zone_id: int,
        locator: RecordLocator | None = None,
        logger: ZoneSyncLogger | None = None,
    ) -> None:
        self.zone_api = zone_api
        self.zone_id = zone_id
        self.locator = locator or RecordLocator(zone_api)
        self.log = logger or zs_logger
        self.history: list[TxState] = []

    def execute(self, active_version: int, desired: RecordInfo) -> UpdateOutcome:
        """Publish *desired* as the new content of the record with its name.

        Args:
            active_version: Version currently active in the zone.
            desired: Record carrying the name, type, ttl and new value.
                Its ``id`` is ignored; the record is looked up by name.

        Returns:
            ``UpdateOutcome.success(new_version)`` or ``UpdateOutcome.failure(reason)``.
        """
        tx = _Attempt(
            active_version=active_version,
            desired=desired,
            request_id=uuid.uuid4().hex[:12],
        )
        state = TxState.START
        self.history = [state]
        while state not in _TERMINAL:
            state = self._advance(state, tx)
            self.history.append(state)

        if state is TxState.DONE:
            assert tx.new_version is not None
            self._log_info(
                tx,
                f"Record '{desired.name}' set to {desired.value}",
                version=tx.new_version,
                operation="update",
            )
            return UpdateOutcome.success(tx.new_version)
        return UpdateOutcome.failure(
            str(tx.error),
            failed_step=tx.failed_step,
            rollback_error=str(tx.rollback_error) if tx.rollback_error else None,
        )

    def _advance(self, state: TxState, tx: _Attempt) -> TxState:
        if state is TxState.VERSION_ACTIVE:
            self._retire(tx)
            return TxState.DONE
        if state is TxState.ROLLBACK:
            self._rollback(tx)
            return TxState.FAILED

        operation, handler, on_success, on_failure = _FORWARD[state]
        try:
            getattr(self, handler)(tx)
        except ZoneSyncError as e:
            tx.failed_step = operation
            tx.error = e
            self.log.error(
                f"Update failed at {operation}: {e}",
                zone_id=self.zone_id,
                version=tx.new_version or tx.active_version,
                record=tx.desired.name,
                operation=operation,
                request_id=tx.request_id,
            )
            return on_failure
        return on_success

    # --- Forward steps, all but the last one touch only the clone ---

    def _clone(self, tx: _Attempt) -> None:
        tx.new_version = self.zone_api.clone_version(self.zone_id, tx.active_version)
        self._log_debug(tx, f"Cloned version {tx.active_version}", "clone")

    def _locate(self, tx: _Attempt) -> None:
        assert tx.new_version is not None
        tx.old_record = self.locator.find(self.zone_id, tx.new_version, tx.desired.name)
        self._log_debug(tx, f"Found record id {tx.old_record.id}", "locate")

    def _delete_old_record(self, tx: _Attempt) -> None:
        assert tx.new_version is not None and tx.old_record is not None
        assert tx.old_record.id is not None
        self.zone_api.delete_record(self.zone_id, tx.new_version, tx.old_record.id)
        self._log_debug(tx, f"Deleted record id {tx.old_record.id}", "delete_record")

    def _add_record(self, tx: _Attempt) -> None:
        assert tx.new_version is not None
        d = tx.desired
        added = self.zone_api.add_record(
            self.zone_id, tx.new_version, d.name, d.type, d.value, d.ttl
        )
        self._log_debug(tx, f"Added record id {added.id}", "add_record")

    def _activate(self, tx: _Attempt) -> None:
        assert tx.new_version is not None
        self.zone_api.activate_version(self.zone_id, tx.new_version)
        self._log_debug(tx, "Activated version", "activate")

    # --- Cleanup ---

    def _retire(self, tx: _Attempt) -> None:
        """Delete the previously active version; failure only costs a stale version."""
        try:
            self.zone_api.delete_version(self.zone_id, tx.active_version)
        except ZoneSyncError as e:
            self.log.warning(
                f"Failed to delete previous version {tx.active_version}: {e}",
                zone_id=self.zone_id,
                version=tx.active_version,
                record=tx.desired.name,
                operation="retire",
                request_id=tx.request_id,
            )

    def _rollback(self, tx: _Attempt) -> None:
        """Delete the never-activated clone."""
        assert tx.new_version is not None
        try:
            self.zone_api.delete_version(self.zone_id, tx.new_version)
        except ZoneSyncError as e:
            rollback_error = RollbackError(
                f"Failed to delete orphaned version {tx.new_version}: {e}"
            )
            rollback_error.__cause__ = e
            tx.rollback_error = rollback_error
            self.log.error(
                str(rollback_error),
                zone_id=self.zone_id,
                version=tx.new_version,
                record=tx.desired.name,
                operation="rollback",
                request_id=tx.request_id,
            )
            return
        self._log_debug(tx, "Deleted orphaned version", "rollback")

    def _log_debug(self, tx: _Attempt, message: str, operation: str) -> None:
        self.log.debug(
            message,
            zone_id=self.zone_id,
            version=tx.new_version,
            record=tx.desired.name,
            operation=operation,
            request_id=tx.request_id,
        )

    def _log_info(self, tx: _Attempt, message: str, *, version: int, operation: str) -> None:
        self.log.info(
            message,
            zone_id=self.zone_id,
            version=version,
            record=tx.desired.name,
            operation=operation,
            request_id=tx.request_id,
        )
