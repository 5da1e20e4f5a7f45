"""
Wedding Planning Examples - Budget and guest features end to end

This example demonstrates:
- Setting up an event with a budget ceiling and per-event rates
- Recording vendor commitments and payments
- Category rollups, overruns and cost drivers
- Guest RSVPs, outstation logistics and projected cost
- The combined dashboard with severity-ordered alerts
- What-if previews and reminder rendering
"""

import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from wedding_ledger import WeddingLedger
from wedding_ledger.guests.models import RateConfig
from wedding_ledger.kernel.money import format_inr
from wedding_ledger.kernel.time import TestTimeProvider

RUPEE = 100


def example_1_budget_rollup():
    """
    Example 1: Budget Rollup

    Demonstrates:
    - Planned vs committed vs paid per category
    - Overrun against the total budget
    - Cost drivers
    """
    print("\n=== Example 1: Budget Rollup ===\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        ledger = WeddingLedger(Path(tmpdir) / "example1.db")
        event = ledger.create_event("Asha & Rohan", total_budget=30_00_000 * RUPEE)

        ledger.add_budget_entry(
            event.event_id, "venue",
            planned_amount=10_00_000 * RUPEE,
            committed_amount=12_00_000 * RUPEE,
            paid_amount=5_00_000 * RUPEE,
            vendor_id="palace-grounds",
        )
        ledger.add_budget_entry(
            event.event_id, "catering",
            planned_amount=12_00_000 * RUPEE,
            committed_amount=11_50_000 * RUPEE,
            vendor_id="annapoorna-caterers",
        )
        ledger.add_budget_entry(
            event.event_id, "fireworks",  # not a known category
            planned_amount=50_000 * RUPEE,
            committed_amount=80_000 * RUPEE,
        )

        report = ledger.budget_report(event.event_id)
        summary = report.summary
        print(f"Health: {summary.health.value}")
        print(f"  Committed {format_inr(summary.committed)} of {format_inr(summary.total_budget)}")
        print(f"  Pending payments: {format_inr(summary.pending)}")

        print("\nCategories:")
        for cat in report.categories:
            marker = "  (over plan)" if cat.is_over_budget else ""
            print(f"  {cat.category.label():<15} {format_inr(cat.committed):>10}{marker}")

        print("\nTop cost drivers:")
        for driver in report.cost_drivers:
            print(f"  {driver.name.label()}: {format_inr(driver.current)}")

        for alert in report.alerts:
            print(f"  [{alert.severity.value.upper()}] {alert.message}")


def example_2_guest_projection():
    """
    Example 2: Guest Projection

    Demonstrates:
    - Confirmation rate bands
    - Room and pickup logistics for outstation guests
    - Cost if every pending guest attends
    """
    print("\n=== Example 2: Guest Projection ===\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        ledger = WeddingLedger(Path(tmpdir) / "example2.db")
        event = ledger.create_event(
            "Asha & Rohan",
            rates=RateConfig(
                catering_per_head=1_500 * RUPEE,
                room_cost_per_night=4_000 * RUPEE,
                transport_cost_per_seat=500 * RUPEE,
            ),
        )

        guests = [
            ledger.add_guest(event.event_id, f"Guest {i}", is_outstation=i < 4,
                             needs_room=i < 4, needs_pickup=i < 2)
            for i in range(10)
        ]
        for guest in guests[:7]:
            ledger.update_rsvp(guest.guest_id, "accepted")
        ledger.assign_room(guests[0].guest_id)

        report = ledger.guest_report(event.event_id)
        print(f"Confirmed {report.stats.confirmed}/{report.stats.total}: "
              f"{report.confirmation.rate}% ({report.confirmation.color.value})")
        print(f"Rooms assigned: {report.outstation.rooms_assigned}/{report.outstation.rooms_required}")
        print(f"Projected cost: {format_inr(report.cost_impact.total)}")
        print(f"If all pending attend: +{format_inr(report.cost_impact.pending_impact)}")

        for alert in report.alerts:
            print(f"  [{alert.severity.value.upper()}] {alert.message}")


def example_3_dashboard_near_the_day():
    """
    Example 3: Dashboard Near the Day

    Demonstrates:
    - Late confirmations after the RSVP cutoff
    - Unpaid vendors inside the final week
    - Red alerts ahead of amber ones
    """
    print("\n=== Example 3: Dashboard Near the Day ===\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        clock = TestTimeProvider(datetime(2026, 11, 15, 9, 0, tzinfo=timezone.utc))
        ledger = WeddingLedger(Path(tmpdir) / "example3.db", time_provider=clock)
        event = ledger.create_event(
            "Asha & Rohan",
            event_date=date(2026, 12, 12),
            rsvp_cutoff=datetime(2026, 11, 20, tzinfo=timezone.utc),
            total_budget=25_00_000 * RUPEE,
        )
        ledger.add_budget_entry(
            event.event_id, "photography",
            planned_amount=2_00_000 * RUPEE,
            committed_amount=2_40_000 * RUPEE,
            paid_amount=1_00_000 * RUPEE,
            vendor_id="lens-studio",
        )
        guests = [ledger.add_guest(event.event_id, f"Guest {i}") for i in range(20)]

        for guest in guests[:5]:
            ledger.update_rsvp(guest.guest_id, "accepted")

        # Three weeks later, five days to go
        clock.advance_days(22)
        late = ledger.bulk_update_rsvp([g.guest_id for g in guests[5:7]], "accepted")
        print(f"Late confirmations recorded: {late}")

        snapshot = ledger.dashboard(event.event_id)
        print(f"Risk: {snapshot.risk_level.value.upper()}, {snapshot.days_until_event} days to go")
        for alert in snapshot.alerts:
            impact = f" ({alert.impact})" if alert.impact else ""
            print(f"  [{alert.severity.value.upper()}] {alert.message}{impact}")

        ledger.mark_vendor_paid(event.event_id, "lens-studio")
        print("\nAfter settling lens-studio:")
        print(f"  Pending: {format_inr(ledger.budget_report(event.event_id).summary.pending)}")


def example_4_previews_and_reminders():
    """
    Example 4: What-if Previews and Reminders

    Demonstrates:
    - Cost of adding guests before committing
    - Rendering an RSVP reminder scheduled against the cutoff
    """
    print("\n=== Example 4: What-if Previews and Reminders ===\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        ledger = WeddingLedger(Path(tmpdir) / "example4.db")
        cutoff = datetime.now(timezone.utc) + timedelta(days=30)
        event = ledger.create_event("Asha & Rohan", rsvp_cutoff=cutoff)

        impact = ledger.preview_guest_change(25)
        print(impact.description)

        reminder = ledger.render_reminder(
            "rsvp-1",
            {"guest_name": "Meera", "deadline": cutoff.strftime("%d %B")},
            event_id=event.event_id,
        )
        print(f"\n{reminder.title}")
        print(reminder.message)
        print(f"Send on: {reminder.scheduled_for:%d %B %Y}")


if __name__ == "__main__":
    print("=" * 70)
    print("Wedding Ledger - Planning Examples")
    print("=" * 70)

    example_1_budget_rollup()
    example_2_guest_projection()
    example_3_dashboard_near_the_day()
    example_4_previews_and_reminders()

    print("\n" + "=" * 70)
    print("✓ All examples completed successfully!")
    print("=" * 70)
