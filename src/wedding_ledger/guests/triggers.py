"""
Guest Triggers - Alerts raised from guest statistics

Each evaluate_* function checks one condition and returns zero or one
alert. generate_guest_alerts runs them all and puts red alerts first.
"""

from wedding_ledger.feedback.models import Alert, AlertSeverity
from wedding_ledger.guests.models import GuestStats, OutstationStats, RateColor, VIPStats
from wedding_ledger.guests.projector import calculate_confirmation_rate
from wedding_ledger.kernel.money import format_full_inr
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy


def evaluate_late_confirmation_trigger(
    late_confirmations: int, catering_per_head: int
) -> list[Alert]:
    """Red alert for guests who confirmed after the RSVP cutoff"""
    if late_confirmations <= 0:
        return []

    cost = late_confirmations * max(0, catering_per_head)
    return [
        Alert(
            alert_id="late-confirmations",
            severity=AlertSeverity.RED,
            message=f"{late_confirmations} guests confirmed after RSVP cutoff",
            link="/guests?filter=late-confirmations",
            impact=f"+{format_full_inr(cost)}",
        )
    ]


def evaluate_low_confirmation_trigger(
    stats: GuestStats,
    days_until_event: int | None,
    policy: PlanningPolicy,
) -> list[Alert]:
    """
    Red alert when the confirmation rate is in the red band close to the event

    Undated and past events never raise it.
    """
    if stats.total <= 0 or days_until_event is None:
        return []
    if not 0 <= days_until_event <= policy.confirmation_alert_window_days:
        return []

    confirmation = calculate_confirmation_rate(stats.confirmed, stats.total, policy)
    if confirmation.color != RateColor.RED:
        return []

    return [
        Alert(
            alert_id="low-confirmation",
            severity=AlertSeverity.RED,
            message=(
                f"Only {confirmation.rate}% of guests confirmed with "
                f"{days_until_event} days to go"
            ),
            link="/guests?filter=pending",
            impact=f"{stats.pending} guests pending",
        )
    ]


def evaluate_room_assignment_trigger(outstation: OutstationStats) -> list[Alert]:
    """Amber alert when outstation guests still need a hotel room"""
    unassigned = outstation.rooms_unassigned
    if unassigned <= 0:
        return []

    return [
        Alert(
            alert_id="no-hotel",
            severity=AlertSeverity.AMBER,
            message=f"{unassigned} outstation guests have no hotel assigned",
            link="/guests?view=logistics&filter=no-hotel",
            impact=f"{unassigned} guests without rooms",
        )
    ]


def evaluate_pickup_assignment_trigger(outstation: OutstationStats) -> list[Alert]:
    """Amber alert when guests needing a pickup have no transport assigned"""
    unassigned = outstation.pickup_unassigned
    if unassigned <= 0:
        return []

    return [
        Alert(
            alert_id="no-pickup",
            severity=AlertSeverity.AMBER,
            message=f"{unassigned} guests need pickup assignment",
            link="/guests?view=logistics&filter=no-pickup",
            impact=f"{unassigned} guests without transport",
        )
    ]


def generate_guest_alerts(
    stats: GuestStats,
    outstation: OutstationStats,
    vip: VIPStats,
    *,
    days_until_event: int | None = None,
    late_confirmations: int = 0,
    catering_per_head: int = 0,
    policy: PlanningPolicy | None = None,
    limit: int | None = None,
) -> list[Alert]:
    """
    Build the guest alert list for one event

    Args:
        stats: RSVP counts
        outstation: Room and pickup logistics
        vip: VIP counts
        days_until_event: Days until the event (None if undated)
        late_confirmations: Guests who confirmed after the RSVP cutoff
        catering_per_head: Rate used to price late confirmations
        policy: Thresholds (defaults to default_planning_policy)
        limit: Keep only the first N alerts

    Returns:
        Red alerts, then amber alerts
    """
    policy = policy or default_planning_policy

    # TODO: warn about elderly VIPs booked into late-night sub-events once
    # sub-event timings are stored with the event.

    red = evaluate_late_confirmation_trigger(
        late_confirmations, catering_per_head
    ) + evaluate_low_confirmation_trigger(stats, days_until_event, policy)
    amber = evaluate_room_assignment_trigger(outstation) + evaluate_pickup_assignment_trigger(
        outstation
    )

    alerts = red + amber
    if limit is not None:
        alerts = alerts[: max(0, limit)]
    return alerts
