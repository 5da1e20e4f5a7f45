"""
Guest Cost Projector - Cost exposure from headcount

Turns guest counts into money: what confirmed guests cost now, and what
the bill becomes if every pending guest shows up. Rates always come from
the caller; nothing here knows a default price.
"""

from collections.abc import Iterable

from wedding_ledger.guests.models import (
    ConfirmationRate,
    CostImpact,
    Guest,
    RateColor,
    RateConfig,
    RsvpStatus,
)
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy


def derive_rooms_needed(guest_count: int, guests_per_room: int = 2) -> int:
    """Rooms for a headcount at the given occupancy, rounded up"""
    if guest_count <= 0:
        return 0
    guests_per_room = max(1, guests_per_room)
    return -(-guest_count // guests_per_room)


def calculate_guest_costs(
    confirmed_count: int,
    rates: RateConfig,
    rooms_needed: int = 0,
    transport_seats: int = 0,
) -> CostImpact:
    """
    Cost of a headcount at the given rates

    Negative counts are treated as zero.

    Args:
        confirmed_count: Guests to feed
        rates: Per-event unit costs
        rooms_needed: Rooms to book (callers derive this from occupancy)
        transport_seats: Seats to arrange

    Returns:
        CostImpact with pending_impact left at 0
    """
    confirmed_count = max(0, confirmed_count)
    rooms_needed = max(0, rooms_needed)
    transport_seats = max(0, transport_seats)

    catering = confirmed_count * rates.catering_per_head
    rooms = rooms_needed * rates.room_cost_per_night
    transport = transport_seats * rates.transport_cost_per_seat

    return CostImpact(
        catering=catering,
        rooms=rooms,
        transport=transport,
        total=catering + rooms + transport,
    )


def calculate_confirmation_rate(
    confirmed: int, total: int, policy: PlanningPolicy | None = None
) -> ConfirmationRate:
    """
    Percentage of invited guests who confirmed, with a color band

    The rate is rounded half-up and clamped to 0..100. An event with no
    guests reads as 0% and green: nothing is outstanding.
    """
    policy = policy or default_planning_policy

    if total <= 0:
        return ConfirmationRate(rate=0, color=RateColor.GREEN)

    confirmed = max(0, confirmed)
    rate = (200 * confirmed + total) // (2 * total)
    rate = max(0, min(100, rate))

    if rate >= policy.confirmation_green_threshold:
        color = RateColor.GREEN
    elif rate >= policy.confirmation_amber_threshold:
        color = RateColor.AMBER
    else:
        color = RateColor.RED

    return ConfirmationRate(rate=rate, color=color)


def project_pending_impact(
    pending_count: int,
    rates: RateConfig,
    rooms_needed: int = 0,
    transport_seats: int = 0,
) -> int:
    """
    Extra cost if every pending guest attends

    rooms_needed and transport_seats are the pending guests' share only,
    so the result is the delta on top of the confirmed cost.
    """
    return calculate_guest_costs(
        pending_count, rates, rooms_needed=rooms_needed, transport_seats=transport_seats
    ).total


def project_cost_impact(guests: Iterable[Guest], rates: RateConfig) -> CostImpact:
    """
    Confirmed cost plus the pending-guest projection for one event

    Rooms are derived from outstation guests needing a room, using the
    occupancy in rates.guests_per_room; transport seats are guests needing
    a pickup. Pending guests fill spare beds in confirmed rooms first, so
    the pending share of rooms is rooms(all) - rooms(confirmed).
    """
    confirmed: list[Guest] = []
    pending: list[Guest] = []
    for guest in guests:
        if guest.is_confirmed():
            confirmed.append(guest)
        elif guest.rsvp_status == RsvpStatus.PENDING:
            pending.append(guest)

    def logistics(group: list[Guest]) -> tuple[int, int]:
        room_guests = sum(1 for g in group if g.is_outstation and g.needs_room)
        seats = sum(1 for g in group if g.needs_pickup)
        return room_guests, seats

    room_guests, seats = logistics(confirmed)
    rooms = derive_rooms_needed(room_guests, rates.guests_per_room)
    impact = calculate_guest_costs(
        len(confirmed), rates, rooms_needed=rooms, transport_seats=seats
    )

    pending_room_guests, pending_seats = logistics(pending)
    pending_rooms = (
        derive_rooms_needed(room_guests + pending_room_guests, rates.guests_per_room) - rooms
    )
    impact.pending_impact = project_pending_impact(
        len(pending), rates, rooms_needed=pending_rooms, transport_seats=pending_seats
    )
    return impact
