"""Record lookup, the versioned update transaction and the poll loop."""

from .locator import RecordLocator
from .transaction import TxState, UpdateTransaction
from .loop import PollLoop, bootstrap, should_update

__all__ = [
    "RecordLocator",
    "TxState",
    "UpdateTransaction",
    "PollLoop",
    "bootstrap",
    "should_update",
]
