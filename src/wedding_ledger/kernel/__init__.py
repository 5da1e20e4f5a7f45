"""
Kernel - Shared infrastructure for the planning engine

Errors, ids, time, money formatting, policy, logging, metrics and the
SQLite row store. Domain packages build on these.
"""

from wedding_ledger.kernel.errors import (
    EventNotFound,
    GuestNotFound,
    LedgerError,
    StoreError,
)
from wedding_ledger.kernel.ids import generate_id
from wedding_ledger.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Errors
    "LedgerError",
    "StoreError",
    "EventNotFound",
    "GuestNotFound",
]
