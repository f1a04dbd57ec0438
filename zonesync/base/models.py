"""
Immutable data types shared by the zone API, the update transaction and
the poll loop.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RecordInfo(BaseModel):
    """A single DNS record inside one specific zone version.

    ``id`` is assigned by the zone API and is only unique within the
    version that holds the record: cloning a version renumbers records.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Record id within its version")
    name: str = Field(description="Record name relative to the zone (e.g. 'www')")
    type: str = Field(description="Record type (A, AAAA, CNAME, …)")
    value: str = Field(description="Record value")
    ttl: int = Field(default=10800, ge=0, description="Time-to-live in seconds")

    def with_value(self, value: str) -> RecordInfo:
        """Return a copy of this record carrying *value*."""
        return self.model_copy(update={"value": value})


class UpdateOutcome(BaseModel):
    """Result of one update transaction: success or failure, nothing in between.

    ``failed_step`` and ``rollback_error`` are diagnostics for logs and
    tests; callers decide only on :attr:`ok`.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    version: int | None = None
    reason: str | None = None
    failed_step: str | None = None
    rollback_error: str | None = None

    @classmethod
    def success(cls, version: int) -> UpdateOutcome:
        return cls(ok=True, version=version)

    @classmethod
    def failure(
        cls,
        reason: str,
        failed_step: str | None = None,
        rollback_error: str | None = None,
    ) -> UpdateOutcome:
        return cls(
            ok=False,
            reason=reason,
            failed_step=failed_step,
            rollback_error=rollback_error,
        )


class LoopState(BaseModel):
    """State carried from one poll iteration to the next.

    Each iteration receives a state and returns a (possibly) new one;
    nothing else survives between iterations.
    """

    model_config = ConfigDict(frozen=True)

    active_version: int
    registered_value: str
    failures: int = Field(default=0, ge=0, description="Consecutive failed iterations")

    def advance(self, version: int, value: str) -> LoopState:
        return LoopState(active_version=version, registered_value=value)

    def failed(self) -> LoopState:
        return self.model_copy(update={"failures": self.failures + 1})

    def settled(self) -> LoopState:
        if self.failures == 0:
            return self
        return self.model_copy(update={"failures": 0})


__all__ = ["RecordInfo", "UpdateOutcome", "LoopState"]
