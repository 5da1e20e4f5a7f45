"""
Guest Statistics - Counting rows into the shapes the projector reads

This is the layer between stored guest rows and the projector: it decides
what counts as confirmed, outstation or late, and how many rooms a group
of guests needs.
"""

from collections.abc import Iterable
from datetime import datetime

from wedding_ledger.guests.models import (
    Guest,
    GuestStats,
    HouseholdCompleteness,
    OutstationStats,
    RsvpStatus,
    VIPStats,
)
from wedding_ledger.guests.projector import (  # noqa: F401 - derive_rooms_needed re-exported
    calculate_confirmation_rate,
    derive_rooms_needed,
)
from wedding_ledger.kernel.planning_policy import PlanningPolicy
from wedding_ledger.kernel.time import as_utc


def compute_guest_stats(
    guests: Iterable[Guest], policy: PlanningPolicy | None = None
) -> GuestStats:
    """RSVP counts and confirmation rate for one event's guests"""
    counts = {status: 0 for status in RsvpStatus}
    for guest in guests:
        counts[guest.rsvp_status] += 1

    total = sum(counts.values())
    confirmed = counts[RsvpStatus.ACCEPTED]

    return GuestStats(
        total=total,
        confirmed=confirmed,
        pending=counts[RsvpStatus.PENDING],
        declined=counts[RsvpStatus.DECLINED],
        maybe=counts[RsvpStatus.MAYBE],
        confirmation_rate=calculate_confirmation_rate(confirmed, total, policy).rate,
    )


def compute_outstation_stats(guests: Iterable[Guest]) -> OutstationStats:
    """
    Room and pickup logistics

    Declined guests are left out; they will not need a room or a ride.
    """
    travelling = [
        g for g in guests if g.is_outstation and g.rsvp_status != RsvpStatus.DECLINED
    ]

    return OutstationStats(
        total=len(travelling),
        rooms_required=sum(1 for g in travelling if g.needs_room),
        rooms_assigned=sum(1 for g in travelling if g.needs_room and g.room_assigned),
        pickup_needed=sum(1 for g in travelling if g.needs_pickup),
        pickup_assigned=sum(1 for g in travelling if g.needs_pickup and g.pickup_assigned),
    )


def compute_vip_stats(guests: Iterable[Guest]) -> VIPStats:
    vips = [g for g in guests if g.is_vip]
    return VIPStats(
        total=len(vips),
        elderly=sum(1 for g in vips if g.is_elderly),
        children=sum(1 for g in vips if g.is_child),
    )


def calculate_household_completeness(
    total_families: int, fully_responded: int, partial_responses: int
) -> HouseholdCompleteness:
    """
    Share of families where every member has answered

    The percentage is rounded half-up; no families reads as 0%.
    """
    total_families = max(0, total_families)
    fully_responded = max(0, fully_responded)
    partial_responses = max(0, partial_responses)

    percentage = 0
    if total_families > 0:
        percentage = (200 * fully_responded + total_families) // (2 * total_families)
        percentage = min(100, percentage)

    return HouseholdCompleteness(
        percentage=percentage,
        fully_responded=fully_responded,
        partial_responses=partial_responses,
        pending=max(0, total_families - fully_responded - partial_responses),
    )


def compute_household_completeness(guests: Iterable[Guest]) -> HouseholdCompleteness:
    """
    Household completeness from guest rows

    Guests are grouped by family_group; guests without one are not part
    of any household. A MAYBE counts as a response.
    """
    households: dict[str, list[bool]] = {}
    for guest in guests:
        if not guest.family_group:
            continue
        households.setdefault(guest.family_group.strip().lower(), []).append(
            guest.rsvp_status != RsvpStatus.PENDING
        )

    fully = sum(1 for answered in households.values() if all(answered))
    partial = sum(
        1 for answered in households.values() if any(answered) and not all(answered)
    )
    return calculate_household_completeness(len(households), fully, partial)


def count_late_confirmations(guests: Iterable[Guest], cutoff: datetime | None) -> int:
    """Accepted guests whose RSVP was recorded after the cutoff"""
    if cutoff is None:
        return 0

    cutoff = as_utc(cutoff)
    return sum(
        1
        for g in guests
        if g.is_confirmed()
        and g.rsvp_updated_at is not None
        and as_utc(g.rsvp_updated_at) > cutoff
    )
