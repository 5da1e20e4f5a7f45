"""
Planning Dashboard - Budget and guest views combined

Composes the budget aggregator, the guest projector and both trigger sets
into the reports the organizer reads. Still pure: callers pass in rows and
"now".
"""

from collections.abc import Sequence
from datetime import datetime

from wedding_ledger.budget.aggregator import (
    compute_cost_drivers,
    summarize_by_category,
    summarize_event,
    summarize_pending_payments,
)
from wedding_ledger.budget.models import BudgetEntry
from wedding_ledger.budget.triggers import generate_budget_alerts
from wedding_ledger.feedback.models import (
    Alert,
    AlertSeverity,
    BudgetReport,
    DashboardSnapshot,
    GuestReport,
    RiskLevel,
)
from wedding_ledger.guests.models import Guest, RateConfig
from wedding_ledger.guests.projector import calculate_confirmation_rate, project_cost_impact
from wedding_ledger.guests.stats import (
    compute_guest_stats,
    compute_household_completeness,
    compute_outstation_stats,
    compute_vip_stats,
    count_late_confirmations,
)
from wedding_ledger.guests.triggers import generate_guest_alerts
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy


def build_budget_report(
    event_id: str,
    entries: Sequence[BudgetEntry],
    total_budget: int,
    *,
    guests: Sequence[Guest] = (),
    rates: RateConfig | None = None,
    rsvp_cutoff: datetime | None = None,
    days_until_event: int | None = None,
    policy: PlanningPolicy | None = None,
) -> BudgetReport:
    """Category rollup, summary, cost drivers and budget alerts for one event"""
    policy = policy or default_planning_policy
    rates = rates or RateConfig()

    categories = summarize_by_category(entries)
    summary = summarize_event(categories, total_budget, policy)
    unpaid_count, unpaid_amount = summarize_pending_payments(entries)
    late = count_late_confirmations(guests, rsvp_cutoff)

    return BudgetReport(
        event_id=event_id,
        categories=categories,
        summary=summary,
        cost_drivers=compute_cost_drivers(categories, policy.cost_driver_limit),
        alerts=generate_budget_alerts(
            summary,
            categories,
            late_rsvp_count=late,
            late_rsvp_cost=late * rates.catering_per_head,
            unpaid_vendor_count=unpaid_count,
            unpaid_amount=unpaid_amount,
            days_to_event=days_until_event,
            policy=policy,
        ),
    )


def build_guest_report(
    event_id: str,
    guests: Sequence[Guest],
    rates: RateConfig,
    *,
    rsvp_cutoff: datetime | None = None,
    days_until_event: int | None = None,
    policy: PlanningPolicy | None = None,
) -> GuestReport:
    """Counts, logistics, projected cost and guest alerts for one event"""
    policy = policy or default_planning_policy

    stats = compute_guest_stats(guests, policy)
    outstation = compute_outstation_stats(guests)
    vip = compute_vip_stats(guests)

    return GuestReport(
        event_id=event_id,
        stats=stats,
        outstation=outstation,
        vip=vip,
        confirmation=calculate_confirmation_rate(stats.confirmed, stats.total, policy),
        cost_impact=project_cost_impact(guests, rates),
        household=compute_household_completeness(guests),
        alerts=generate_guest_alerts(
            stats,
            outstation,
            vip,
            days_until_event=days_until_event,
            late_confirmations=count_late_confirmations(guests, rsvp_cutoff),
            catering_per_head=rates.catering_per_head,
            policy=policy,
        ),
    )


def merge_alerts(*alert_lists: Sequence[Alert]) -> list[Alert]:
    """
    Concatenate alert lists, red before amber

    Within a severity the input order is kept. An alert id seen twice keeps
    its first occurrence.
    """
    seen: set[str] = set()
    merged: list[Alert] = []
    for alerts in alert_lists:
        for alert in alerts:
            if alert.alert_id not in seen:
                seen.add(alert.alert_id)
                merged.append(alert)

    return sorted(merged, key=lambda alert: alert.severity != AlertSeverity.RED)


def compute_risk_level(alerts: Sequence[Alert]) -> RiskLevel:
    if any(alert.severity == AlertSeverity.RED for alert in alerts):
        return RiskLevel.RED
    if alerts:
        return RiskLevel.AMBER
    return RiskLevel.GREEN


def build_dashboard(
    event_id: str,
    event_name: str,
    budget: BudgetReport,
    guests: GuestReport,
    now: datetime,
    days_until_event: int | None = None,
) -> DashboardSnapshot:
    """One snapshot with merged, severity-ordered alerts and a risk level"""
    alerts = merge_alerts(budget.alerts, guests.alerts)

    return DashboardSnapshot(
        event_id=event_id,
        event_name=event_name,
        days_until_event=days_until_event,
        risk_level=compute_risk_level(alerts),
        budget=budget,
        guests=guests,
        alerts=alerts,
        computed_at=now,
    )
