"""
Budget Aggregator - Rollups from ledger rows to decision-ready views

Pure functions only: no I/O, no shared state. Every ratio guards its
denominator and every "owed" figure is clamped at zero, so empty events and
unset ceilings produce zeroed structures instead of errors.
"""

from collections.abc import Iterable

from wedding_ledger.budget.models import (
    BudgetCategory,
    BudgetEntry,
    BudgetHealth,
    BudgetSummary,
    CategoryBudget,
    CostDriver,
)
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy


def summarize_by_category(entries: Iterable[BudgetEntry]) -> list[CategoryBudget]:
    """
    Roll budget entries up into one row per category

    Categories without entries are omitted. Output follows the order in
    which categories first appear; callers re-sort for display.

    Args:
        entries: Budget entries for one event (any order)

    Returns:
        One CategoryBudget per category present in the input
    """
    totals: dict[BudgetCategory, list[int]] = {}

    for entry in entries:
        planned, committed, paid = totals.setdefault(entry.category, [0, 0, 0])
        totals[entry.category] = [
            planned + entry.planned_amount,
            committed + entry.committed_amount,
            paid + entry.paid_amount,
        ]

    categories: list[CategoryBudget] = []
    for category, (planned, committed, paid) in totals.items():
        delta = committed - planned
        categories.append(
            CategoryBudget(
                category=category,
                planned=planned,
                committed=committed,
                paid=paid,
                pending=max(0, committed - paid),
                delta=delta,
                delta_percentage=(delta / planned * 100) if planned > 0 else 0.0,
                is_over_budget=committed > planned,
            )
        )

    return categories


def evaluate_budget_health(
    committed: int,
    total_budget: int,
    any_category_over: bool,
    policy: PlanningPolicy,
) -> BudgetHealth:
    """
    Classify whole-event budget health

    With no ceiling set (total_budget == 0) any commitment counts as over
    budget and an empty ledger is on track.
    """
    if committed > total_budget:
        return BudgetHealth.OVER_BUDGET

    if any_category_over:
        return BudgetHealth.AT_RISK

    if total_budget > 0 and committed / total_budget >= policy.at_risk_utilization:
        return BudgetHealth.AT_RISK

    return BudgetHealth.ON_TRACK


def summarize_event(
    categories: Iterable[CategoryBudget],
    total_budget: int,
    policy: PlanningPolicy | None = None,
) -> BudgetSummary:
    """
    Roll category budgets up into the whole-event summary

    Args:
        categories: Output of summarize_by_category
        total_budget: User-set ceiling in paise (0 = no ceiling)
        policy: Thresholds (defaults to default_planning_policy)

    Returns:
        BudgetSummary with overrun and health
    """
    policy = policy or default_planning_policy
    total_budget = max(0, total_budget)
    categories = list(categories)

    planned = sum(cat.planned for cat in categories)
    committed = sum(cat.committed for cat in categories)
    paid = sum(cat.paid for cat in categories)
    pending = sum(cat.pending for cat in categories)
    any_over = any(cat.is_over_budget for cat in categories)

    return BudgetSummary(
        total_budget=total_budget,
        planned=planned,
        committed=committed,
        paid=paid,
        pending=pending,
        overrun=max(0, committed - total_budget),
        utilization=(committed / total_budget) if total_budget > 0 else 0.0,
        health=evaluate_budget_health(committed, total_budget, any_over, policy),
    )


def compute_cost_drivers(
    categories: Iterable[CategoryBudget], top_n: int = 4
) -> list[CostDriver]:
    """
    Rank categories by committed spend, largest first

    sorted() is stable, so ties keep their input order.
    """
    if top_n <= 0:
        return []

    ranked = sorted(categories, key=lambda cat: cat.committed, reverse=True)
    return [
        CostDriver(
            name=cat.category,
            planned=cat.planned,
            current=cat.committed,
            delta=cat.delta,
        )
        for cat in ranked[:top_n]
    ]


def summarize_pending_payments(entries: Iterable[BudgetEntry]) -> tuple[int, int]:
    """
    Count vendors with an unpaid balance and the total owed

    Several open entries for one vendor_id count once. An entry with no
    vendor_id is owed to whoever supplies its category.

    Returns:
        (unpaid_vendor_count, unpaid_amount)
    """
    payees: set[str] = set()
    owed = 0
    for entry in entries:
        amount = entry.pending_amount()
        if amount <= 0:
            continue
        payees.add(entry.vendor_id or f"category:{entry.category.value}")
        owed += amount
    return len(payees), owed
