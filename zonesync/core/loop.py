"""
Poll loop: watch the public IP and publish it when it changes.

All state that survives an iteration lives in :class:`LoopState`, which
:meth:`PollLoop.tick` takes and returns.
"""

from __future__ import annotations

import time
from typing import Callable

from zonesync.base.zone_api import ZoneAPIBlueprint
from zonesync.base.ip_source import PublicIPSourceBlueprint
from zonesync.base.models import LoopState, RecordInfo
from zonesync.base.exceptions import EscalationError, PublicIPError
from zonesync.base.logger import ZoneSyncLogger, zs_logger
from zonesync.core.locator import RecordLocator
from zonesync.core.transaction import UpdateTransaction


def should_update(last_known: str, observed: str) -> bool:
    """Return True when the observed address differs from the registered one."""
    return last_known != observed


def bootstrap(
    zone_api: ZoneAPIBlueprint, zone_id: int, record_name: str
) -> tuple[LoopState, RecordInfo]:
    """Read the starting state from the zone's active version.

    Returns:
        The initial loop state and the record as currently published,
        used as the template for every later update.

    Raises:
        ZoneAPIError: If the active version or its records cannot be read.
        RecordNotFoundError: If the record is missing or ambiguous.
    """
    active = zone_api.current_active_version(zone_id)
    record = RecordLocator(zone_api).find(zone_id, active, record_name)
    return LoopState(active_version=active, registered_value=record.value), record


class PollLoop:
    """Periodically compare the public IP with the record and update on change.

    Attributes:
        record: Template of the tracked record (name, type, ttl).
        refresh: Seconds slept between iterations.
        max_failures: Consecutive failed iterations tolerated before
            :class:`EscalationError` is raised. ``0`` never escalates.
    """

    def __init__(
        self,
        zone_api: ZoneAPIBlueprint,
        ip_source: PublicIPSourceBlueprint,
        zone_id: int,
        record: RecordInfo,
        refresh: float,
        max_failures: int = 0,
        logger: ZoneSyncLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.zone_id = zone_id
        self.record = record
        self.refresh = refresh
        self.max_failures = max_failures
        self.ip_source = ip_source
        self.log = logger or zs_logger
        self.transaction = UpdateTransaction(zone_api, zone_id, logger=self.log)
        self._sleep = sleep

    def tick(self, state: LoopState) -> LoopState:
        """Run one iteration and return the state for the next one."""
        try:
            observed = self.ip_source.current_ipv4()
        except PublicIPError as e:
            self.log.error(
                f"Failed to get public IP: {e}",
                zone_id=self.zone_id,
                record=self.record.name,
                operation="public_ip",
            )
            return self._check_escalation(state.failed())

        if not should_update(state.registered_value, observed):
            return state.settled()

        outcome = self.transaction.execute(
            state.active_version, self.record.with_value(observed)
        )
        if not outcome.ok:
            return self._check_escalation(state.failed())

        assert outcome.version is not None
        self.log.info(
            f"Updated record with IP {observed}",
            zone_id=self.zone_id,
            version=outcome.version,
            record=self.record.name,
            operation="tick",
        )
        return state.advance(outcome.version, observed)

    def _check_escalation(self, state: LoopState) -> LoopState:
        if self.max_failures and state.failures >= self.max_failures:
            raise EscalationError(
                f"{state.failures} consecutive failed iterations for record "
                f"'{self.record.name}' in zone {self.zone_id}"
            )
        return state

    def run(self, state: LoopState, iterations: int | None = None) -> LoopState:
        """Tick, then sleep ``refresh`` seconds, forever or *iterations* times.

        Returns:
            The state after the last iteration (only reached when
            *iterations* is given).
        """
        done = 0
        while iterations is None or done < iterations:
            state = self.tick(state)
            done += 1
            self._sleep(self.refresh)
        return state
