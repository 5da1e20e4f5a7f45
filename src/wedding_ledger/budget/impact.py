"""
Change Impact - Previews of how a proposed change moves the budget

Used by "what if" prompts before the organizer commits to a change. Like
the aggregator these are pure functions over rows the caller already has.
"""

from collections.abc import Iterable, Mapping

from wedding_ledger.budget.models import (
    GUEST_DRIVEN_CATEGORIES,
    BudgetEntry,
    CategoryBudget,
    ChangeImpact,
)
from wedding_ledger.kernel.money import format_full_inr
from wedding_ledger.kernel.planning_policy import default_planning_policy


def estimate_guest_change_impact(
    guest_delta: int, cost_per_guest: int | None = None
) -> ChangeImpact:
    """
    Estimate the cost of adding (or removing) guests

    Args:
        guest_delta: Guests added; negative for removals
        cost_per_guest: Per-guest estimate (defaults to the policy value)

    Returns:
        ChangeImpact over the guest-driven categories
    """
    if cost_per_guest is None:
        cost_per_guest = default_planning_policy.default_cost_per_guest
    cost_per_guest = max(0, cost_per_guest)

    total = guest_delta * cost_per_guest
    verb = "Adding" if guest_delta >= 0 else "Removing"
    direction = "increases" if total >= 0 else "decreases"

    return ChangeImpact(
        change_type="add_guests",
        total_impact=total,
        affected_categories=list(GUEST_DRIVEN_CATEGORIES),
        description=(
            f"{verb} {abs(guest_delta)} guests {direction} budget by "
            f"{format_full_inr(abs(total))}"
        ),
    )


def estimate_vendor_change_impact(
    entries: Iterable[BudgetEntry],
    price_changes: Mapping[str, int],
) -> ChangeImpact:
    """
    Estimate the effect of new committed prices for existing entries

    Args:
        entries: Current budget entries
        price_changes: entry_id -> proposed committed amount

    Returns:
        ChangeImpact; unknown entry ids are ignored
    """
    total = 0
    affected = []

    for entry in entries:
        if entry.entry_id not in price_changes:
            continue
        new_amount = max(0, price_changes[entry.entry_id])
        total += new_amount - entry.committed_amount
        if entry.category not in affected:
            affected.append(entry.category)

    sign = "+" if total >= 0 else "-"
    return ChangeImpact(
        change_type="add_vendor",
        total_impact=total,
        affected_categories=affected,
        description=f"Vendor changes move committed spend by {sign}{format_full_inr(abs(total))}",
    )


def guest_driven_cost_per_ten(
    categories: Iterable[CategoryBudget], total_guests: int
) -> int:
    """
    Committed cost of guest-driven categories for every 10 guests

    Returns 0 when there are no guests.
    """
    if total_guests <= 0:
        return 0

    guest_driven = sum(
        cat.committed for cat in categories if cat.category in GUEST_DRIVEN_CATEGORIES
    )
    # integer half-up rounding of guest_driven * 10 / total_guests
    return (guest_driven * 20 + total_guests) // (2 * total_guests)
