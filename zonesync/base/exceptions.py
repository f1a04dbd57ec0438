"""
Zonesync exception hierarchy.

Every concern has a top-level error that inherits from
:class:`ZoneSyncError` and specific sub-exceptions for the failure
modes the update transaction and the poll loop distinguish.
"""


# ── Base ──────────────────────────────────────────────────────────────
class ZoneSyncError(Exception):
    """Root exception for all Zonesync errors."""


# ── Zone API ──────────────────────────────────────────────────────────
class ZoneAPIError(ZoneSyncError):
    """Base exception for zone API operations."""


class TransientAPIError(ZoneAPIError):
    """Network or remote failure while talking to the zone API."""


# ── Records ───────────────────────────────────────────────────────────
class RecordNotFoundError(ZoneSyncError):
    """No record with the requested name exists in the zone version."""


class AmbiguousRecordError(RecordNotFoundError):
    """More than one record carries the requested name."""


# ── Transaction ───────────────────────────────────────────────────────
class RollbackError(ZoneSyncError):
    """Deleting the orphaned clone of a failed update failed."""


# ── Public IP ─────────────────────────────────────────────────────────
class PublicIPError(ZoneSyncError):
    """Public IPv4 address could not be fetched or parsed."""


# ── Poll loop ─────────────────────────────────────────────────────────
class EscalationError(ZoneSyncError):
    """Too many consecutive failed poll iterations."""
