"""
Tests for guest alert triggers
"""

from wedding_ledger.feedback.models import AlertSeverity
from wedding_ledger.guests.models import GuestStats, OutstationStats, VIPStats
from wedding_ledger.guests.triggers import (
    evaluate_late_confirmation_trigger,
    evaluate_low_confirmation_trigger,
    evaluate_pickup_assignment_trigger,
    evaluate_room_assignment_trigger,
    generate_guest_alerts,
)
from wedding_ledger.kernel.planning_policy import PlanningPolicy


def _stats(confirmed: int, total: int) -> GuestStats:
    return GuestStats(total=total, confirmed=confirmed, pending=total - confirmed)


def test_room_alert_counts_guests_without_rooms():
    outstation = OutstationStats(total=12, rooms_required=10, rooms_assigned=6)

    alerts = evaluate_room_assignment_trigger(outstation)

    assert len(alerts) == 1
    assert alerts[0].alert_id == "no-hotel"
    assert alerts[0].severity == AlertSeverity.AMBER
    assert alerts[0].message == "4 outstation guests have no hotel assigned"
    assert alerts[0].impact == "4 guests without rooms"


def test_room_alert_silent_when_all_assigned():
    outstation = OutstationStats(total=4, rooms_required=4, rooms_assigned=4)

    assert evaluate_room_assignment_trigger(outstation) == []


def test_pickup_alert():
    outstation = OutstationStats(total=5, pickup_needed=5, pickup_assigned=2)

    alerts = evaluate_pickup_assignment_trigger(outstation)

    assert len(alerts) == 1
    assert alerts[0].alert_id == "no-pickup"
    assert alerts[0].severity == AlertSeverity.AMBER
    assert alerts[0].message == "3 guests need pickup assignment"
    assert alerts[0].impact == "3 guests without transport"


def test_low_confirmation_inside_window():
    alerts = evaluate_low_confirmation_trigger(_stats(3, 10), 10, PlanningPolicy())

    assert len(alerts) == 1
    assert alerts[0].alert_id == "low-confirmation"
    assert alerts[0].severity == AlertSeverity.RED
    assert alerts[0].message == "Only 30% of guests confirmed with 10 days to go"
    assert alerts[0].impact == "7 guests pending"


def test_low_confirmation_outside_window_is_silent():
    policy = PlanningPolicy(confirmation_alert_window_days=14)

    assert evaluate_low_confirmation_trigger(_stats(3, 10), 15, policy) == []
    assert len(evaluate_low_confirmation_trigger(_stats(3, 10), 14, policy)) == 1


def test_low_confirmation_needs_a_date_a_future_event_and_guests():
    policy = PlanningPolicy()

    assert evaluate_low_confirmation_trigger(_stats(3, 10), None, policy) == []
    assert evaluate_low_confirmation_trigger(_stats(3, 10), -1, policy) == []
    assert evaluate_low_confirmation_trigger(_stats(0, 0), 3, policy) == []


def test_amber_confirmation_rate_raises_no_alert():
    assert evaluate_low_confirmation_trigger(_stats(5, 10), 3, PlanningPolicy()) == []


def test_late_confirmation_alert_prices_catering():
    alerts = evaluate_late_confirmation_trigger(3, 150_000)

    assert len(alerts) == 1
    assert alerts[0].alert_id == "late-confirmations"
    assert alerts[0].severity == AlertSeverity.RED
    assert alerts[0].impact == "+₹4,500"


def test_no_late_confirmations_no_alert():
    assert evaluate_late_confirmation_trigger(0, 150_000) == []


def test_generate_guest_alerts_red_first():
    outstation = OutstationStats(total=4, rooms_required=4, rooms_assigned=1, pickup_needed=2)

    alerts = generate_guest_alerts(
        _stats(1, 10),
        outstation,
        VIPStats(),
        days_until_event=5,
        late_confirmations=2,
        catering_per_head=100,
    )

    assert [a.alert_id for a in alerts] == [
        "late-confirmations",
        "low-confirmation",
        "no-hotel",
        "no-pickup",
    ]


def test_generate_guest_alerts_empty_event():
    assert generate_guest_alerts(GuestStats(), OutstationStats(), VIPStats(), days_until_event=1) == []


def test_generate_guest_alerts_limit():
    outstation = OutstationStats(total=4, rooms_required=4, pickup_needed=2)

    alerts = generate_guest_alerts(_stats(10, 10), outstation, VIPStats(), limit=1)

    assert [a.alert_id for a in alerts] == ["no-hotel"]
