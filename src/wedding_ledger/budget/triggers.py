"""
Budget Triggers - Alerts raised from a budget rollup

Triggers read a summary and its categories and emit organizer-facing
alerts. Red alerts come first; amber category alerts follow cost-driver
rank so the most expensive overrun is read first.
"""

from collections.abc import Sequence

from wedding_ledger.budget.aggregator import compute_cost_drivers
from wedding_ledger.budget.models import BudgetHealth, BudgetSummary, CategoryBudget
from wedding_ledger.feedback.models import Alert, AlertSeverity
from wedding_ledger.kernel.money import format_full_inr
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy


def evaluate_overall_overrun_trigger(summary: BudgetSummary) -> list[Alert]:
    """Red alert when committed spend exceeds the total budget"""
    if summary.health != BudgetHealth.OVER_BUDGET:
        return []

    overrun = format_full_inr(summary.overrun)
    return [
        Alert(
            alert_id="overall-overbudget",
            severity=AlertSeverity.RED,
            message=f"Total committed exceeds budget by {overrun}",
            link="/budget",
            impact=f"+{overrun}",
        )
    ]


def evaluate_unpaid_vendor_trigger(
    unpaid_vendor_count: int,
    unpaid_amount: int,
    days_to_event: int | None,
    policy: PlanningPolicy,
) -> list[Alert]:
    """Red alert when vendors still have balances close to the event"""
    if unpaid_vendor_count <= 0 or days_to_event is None:
        return []
    if days_to_event > policy.unpaid_vendor_alert_days:
        return []

    return [
        Alert(
            alert_id="unpaid-vendors",
            severity=AlertSeverity.RED,
            message=(
                f"{unpaid_vendor_count} vendors unpaid within "
                f"{max(0, days_to_event)} days of event"
            ),
            link="/budget?view=pending-payments",
            impact=f"{format_full_inr(unpaid_amount)} pending",
        )
    ]


def evaluate_late_rsvp_cost_trigger(late_rsvp_count: int, late_rsvp_cost: int) -> list[Alert]:
    """Red alert when confirmations after the cutoff pushed catering up"""
    if late_rsvp_count <= 0 or late_rsvp_cost <= 0:
        return []

    cost = format_full_inr(late_rsvp_cost)
    return [
        Alert(
            alert_id="late-rsvp-cost",
            severity=AlertSeverity.RED,
            message=f"{late_rsvp_count} late RSVPs increased catering cost by {cost}",
            link="/guests?filter=late",
            impact=f"+{cost}",
        )
    ]


def evaluate_category_overrun_trigger(
    categories: Sequence[CategoryBudget],
    policy: PlanningPolicy,
) -> list[Alert]:
    """
    Amber alert per category whose overrun clears the noise threshold

    Ordered by committed spend, largest first.
    """
    by_category = {cat.category: cat for cat in categories}
    alerts: list[Alert] = []

    for driver in compute_cost_drivers(categories, top_n=len(categories)):
        cat = by_category[driver.name]
        if not cat.is_over_budget or cat.delta <= policy.category_overrun_noise_threshold:
            continue

        overrun = format_full_inr(cat.delta)
        alerts.append(
            Alert(
                alert_id=f"category-overbudget-{cat.category.value}",
                severity=AlertSeverity.AMBER,
                message=f"{cat.category.label()} exceeds budget by {overrun}",
                link=f"/budget?category={cat.category.value}",
                impact=f"+{overrun}",
            )
        )

    return alerts


def generate_budget_alerts(
    summary: BudgetSummary,
    categories: Sequence[CategoryBudget],
    *,
    late_rsvp_count: int = 0,
    late_rsvp_cost: int = 0,
    unpaid_vendor_count: int = 0,
    unpaid_amount: int = 0,
    days_to_event: int | None = None,
    policy: PlanningPolicy | None = None,
    limit: int | None = None,
) -> list[Alert]:
    """
    Build the budget alert list for one event

    Args:
        summary: Whole-event summary
        categories: Category rollups the summary was built from
        late_rsvp_count: Guests who confirmed after the RSVP cutoff
        late_rsvp_cost: Catering cost those late confirmations added
        unpaid_vendor_count: Vendors with a pending balance
        unpaid_amount: Total pending balance
        days_to_event: Days until the event (None if undated)
        policy: Thresholds (defaults to default_planning_policy)
        limit: Keep only the first N alerts

    Returns:
        Red alerts, then amber alerts
    """
    policy = policy or default_planning_policy
    categories = list(categories)

    alerts = (
        evaluate_overall_overrun_trigger(summary)
        + evaluate_unpaid_vendor_trigger(
            unpaid_vendor_count, unpaid_amount, days_to_event, policy
        )
        + evaluate_late_rsvp_cost_trigger(late_rsvp_count, late_rsvp_cost)
        + evaluate_category_overrun_trigger(categories, policy)
    )

    if limit is not None:
        alerts = alerts[: max(0, limit)]
    return alerts
