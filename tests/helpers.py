"""
Test Helper Functions - Builders for ledger rows

Short-argument builders so each test states only the numbers it cares about.
"""

from datetime import datetime
from typing import Any

from wedding_ledger.budget.models import BudgetEntry
from wedding_ledger.guests.models import Guest, RsvpStatus


def make_entry(
    category: str | None = "venue",
    planned: int = 0,
    committed: int = 0,
    paid: int = 0,
    **fields: Any,
) -> BudgetEntry:
    """Builder for budget entries"""
    return BudgetEntry(
        category=category,
        planned_amount=planned,
        committed_amount=committed,
        paid_amount=paid,
        **fields,
    )


def make_guest(
    first_name: str = "Guest",
    status: RsvpStatus | str = RsvpStatus.PENDING,
    updated_at: datetime | None = None,
    **fields: Any,
) -> Guest:
    """Builder for guests"""
    return Guest(
        first_name=first_name,
        rsvp_status=status,
        rsvp_updated_at=updated_at,
        **fields,
    )


def make_guests(count: int, status: RsvpStatus | str = RsvpStatus.PENDING, **fields: Any) -> list[Guest]:
    """Builder for a batch of identical guests"""
    return [make_guest(f"Guest {i}", status=status, **fields) for i in range(count)]
