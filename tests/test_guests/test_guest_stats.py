"""
Tests for guest statistics
"""

from datetime import datetime, timedelta, timezone

from tests.helpers import make_guest, make_guests
from wedding_ledger.guests.models import RsvpStatus
from wedding_ledger.guests.stats import (
    calculate_household_completeness,
    compute_guest_stats,
    compute_household_completeness,
    compute_outstation_stats,
    compute_vip_stats,
    count_late_confirmations,
)

CUTOFF = datetime(2026, 11, 15, 0, 0, tzinfo=timezone.utc)


def test_guest_stats_counts_each_status():
    guests = (
        make_guests(6, RsvpStatus.ACCEPTED)
        + make_guests(2, RsvpStatus.PENDING)
        + make_guests(1, RsvpStatus.DECLINED)
        + make_guests(1, RsvpStatus.MAYBE)
    )

    stats = compute_guest_stats(guests)

    assert stats.total == 10
    assert stats.confirmed == 6
    assert stats.pending == 2
    assert stats.declined == 1
    assert stats.maybe == 1
    assert stats.confirmation_rate == 60


def test_guest_stats_empty():
    stats = compute_guest_stats([])

    assert stats.total == 0
    assert stats.confirmation_rate == 0


def test_status_aliases_and_missing_status():
    guests = [
        make_guest(status="attending"),
        make_guest(status="not_attending"),
        make_guest(status=None),
        make_guest(status=" Accepted "),
    ]

    stats = compute_guest_stats(guests)

    assert stats.confirmed == 2
    assert stats.declined == 1
    assert stats.pending == 1


def test_outstation_stats_skips_declined_guests():
    guests = [
        make_guest(is_outstation=True, needs_room=True, room_assigned=True, needs_pickup=True),
        make_guest(is_outstation=True, needs_room=True, needs_pickup=True, pickup_assigned=True),
        make_guest(is_outstation=True, needs_room=True),
        make_guest(status=RsvpStatus.DECLINED, is_outstation=True, needs_room=True),
        make_guest(needs_room=True),
    ]

    outstation = compute_outstation_stats(guests)

    assert outstation.total == 3
    assert outstation.rooms_required == 3
    assert outstation.rooms_assigned == 1
    assert outstation.rooms_unassigned == 2
    assert outstation.pickup_needed == 2
    assert outstation.pickup_assigned == 1
    assert outstation.pickup_unassigned == 1


def test_assignment_without_need_is_not_counted():
    guests = [make_guest(is_outstation=True, room_assigned=True, pickup_assigned=True)]

    outstation = compute_outstation_stats(guests)

    assert outstation.rooms_assigned == 0
    assert outstation.pickup_assigned == 0


def test_vip_stats():
    guests = [
        make_guest(is_vip=True, is_elderly=True),
        make_guest(is_vip=True, is_child=True),
        make_guest(is_vip=True),
        make_guest(is_elderly=True),
    ]

    vip = compute_vip_stats(guests)

    assert vip.total == 3
    assert vip.elderly == 1
    assert vip.children == 1


def test_household_completeness_arithmetic():
    household = calculate_household_completeness(8, 3, 2)

    # 3/8 = 37.5%
    assert household.percentage == 38
    assert household.fully_responded == 3
    assert household.partial_responses == 2
    assert household.pending == 3


def test_household_completeness_no_families():
    household = calculate_household_completeness(0, 0, 0)

    assert household.percentage == 0
    assert household.pending == 0


def test_household_pending_never_negative():
    assert calculate_household_completeness(2, 2, 1).pending == 0


def test_household_completeness_from_guests():
    guests = [
        make_guest(status=RsvpStatus.ACCEPTED, family_group="Sharma"),
        make_guest(status=RsvpStatus.DECLINED, family_group="sharma "),
        make_guest(status=RsvpStatus.ACCEPTED, family_group="Iyer"),
        make_guest(status=RsvpStatus.PENDING, family_group="Iyer"),
        make_guest(status=RsvpStatus.PENDING, family_group="Khan"),
        make_guest(status=RsvpStatus.MAYBE, family_group="Das"),
        make_guest(status=RsvpStatus.ACCEPTED),
    ]

    household = compute_household_completeness(guests)

    assert household.fully_responded == 2
    assert household.partial_responses == 1
    assert household.pending == 1
    assert household.percentage == 50


def test_late_confirmations_after_cutoff():
    guests = [
        make_guest(status=RsvpStatus.ACCEPTED, updated_at=CUTOFF + timedelta(hours=1)),
        make_guest(status=RsvpStatus.ACCEPTED, updated_at=CUTOFF - timedelta(days=1)),
        make_guest(status=RsvpStatus.ACCEPTED, updated_at=CUTOFF),
        make_guest(status=RsvpStatus.DECLINED, updated_at=CUTOFF + timedelta(days=1)),
        make_guest(status=RsvpStatus.ACCEPTED),
    ]

    assert count_late_confirmations(guests, CUTOFF) == 1


def test_late_confirmations_naive_timestamps_read_as_utc():
    guests = [make_guest(status=RsvpStatus.ACCEPTED, updated_at=datetime(2026, 11, 16, 8, 0))]

    assert count_late_confirmations(guests, CUTOFF) == 1


def test_no_cutoff_means_no_late_confirmations():
    guests = [make_guest(status=RsvpStatus.ACCEPTED, updated_at=CUTOFF)]

    assert count_late_confirmations(guests, None) == 0
