"""
Wedding Ledger CLI

Command-line interface for budget and guest planning.
Amounts are typed in rupees and stored in paise.

Usage:
    wledger init --db wedding.db
    wledger event create --name "Asha & Rohan" --date 2026-12-12 --budget 4200000
    wledger budget add --event <id> --category venue --planned 1000000
    wledger guest import --event <id> --file guests.csv
    wledger dashboard --event <id>
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from wedding_ledger.budget.models import BudgetCategory
from wedding_ledger.feedback.models import Alert
from wedding_ledger.guests.models import RateConfig, RsvpStatus
from wedding_ledger.kernel.errors import LedgerError
from wedding_ledger.kernel.logging import configure_logging
from wedding_ledger.kernel.money import format_full_inr, format_inr, rupees_to_paise
from wedding_ledger.ledger import WeddingLedger

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(json_output=False, log_level="INFO")

app = typer.Typer(
    name="wledger",
    help="Wedding Ledger - Budget and guest planning",
    add_completion=False,
)

# Sub-apps
event_app = typer.Typer(help="Event setup commands")
budget_app = typer.Typer(help="Budget entry and payment commands")
guest_app = typer.Typer(help="Guest list, RSVP and logistics commands")
reminders_app = typer.Typer(help="Reminder template commands")

app.add_typer(event_app, name="event")
app.add_typer(budget_app, name="budget")
app.add_typer(guest_app, name="guest")
app.add_typer(reminders_app, name="reminders")

# Global state
DEFAULT_DB = Path(".wledger.db")

DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", envvar="WLEDGER_DB", help="Database path"),
]
EventOption = Annotated[str, typer.Option("--event", help="Event ID")]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def get_ledger(db_path: Optional[Path] = None) -> WeddingLedger:
    """Get WeddingLedger instance"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'wledger init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return WeddingLedger(db)


@contextmanager
def ledger_errors() -> Iterator[None]:
    """Turn ledger errors and bad amounts into a message and exit code 1"""
    try:
        yield
    except (LedgerError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def to_paise(rupees: Optional[str]) -> int:
    return rupees_to_paise(rupees) if rupees else 0


def utc(dt: Optional[datetime]) -> Optional[datetime]:
    return dt.replace(tzinfo=timezone.utc) if dt is not None else None


# Initialization command


@app.command()
def init(
    db: Annotated[Path, typer.Option(help="Database path")] = DEFAULT_DB,
) -> None:
    """Initialize a new planning database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    WeddingLedger(db)
    typer.echo(f"✓ Initialized planning database: {db}")


# Event commands


@event_app.command("create")
def event_create(
    name: Annotated[str, typer.Option("--name", help="Event name")],
    date: Annotated[
        Optional[datetime],
        typer.Option("--date", formats=["%Y-%m-%d"], help="Event date (YYYY-MM-DD)"),
    ] = None,
    rsvp_cutoff: Annotated[
        Optional[datetime],
        typer.Option("--rsvp-cutoff", formats=["%Y-%m-%d"], help="RSVP cutoff (YYYY-MM-DD)"),
    ] = None,
    budget: Annotated[
        Optional[str], typer.Option("--budget", help="Total budget in rupees")
    ] = None,
    catering_per_head: Annotated[
        Optional[str], typer.Option("--catering-per-head", help="Rupees per plate")
    ] = None,
    room_cost: Annotated[
        Optional[str], typer.Option("--room-cost", help="Rupees per room per night")
    ] = None,
    transport_cost: Annotated[
        Optional[str], typer.Option("--transport-cost", help="Rupees per pickup seat")
    ] = None,
    guests_per_room: Annotated[
        int, typer.Option("--guests-per-room", min=1, help="Room occupancy")
    ] = 2,
    db: DbOption = None,
) -> None:
    """Create a new event"""
    ledger = get_ledger(db)

    with ledger_errors():
        rates = None
        if catering_per_head or room_cost or transport_cost:
            rates = RateConfig(
                catering_per_head=to_paise(catering_per_head),
                room_cost_per_night=to_paise(room_cost),
                transport_cost_per_seat=to_paise(transport_cost),
                guests_per_room=guests_per_room,
            )
        event = ledger.create_event(
            name=name,
            event_date=date.date() if date else None,
            rsvp_cutoff=utc(rsvp_cutoff),
            total_budget=to_paise(budget),
            rates=rates,
        )

    typer.echo(f"✓ Created event: {event.event_id}")
    typer.echo(f"  Name: {event.name}")
    if event.event_date:
        typer.echo(f"  Date: {event.event_date.isoformat()}")
    typer.echo(f"  Budget: {format_full_inr(event.total_budget)}")


@event_app.command("list")
def event_list(json_output: JsonOption = False, db: DbOption = None) -> None:
    """List all events"""
    ledger = get_ledger(db)
    events = ledger.list_events()

    if json_output:
        typer.echo("[" + ",".join(e.model_dump_json() for e in events) + "]")
        return

    if not events:
        typer.echo("No events")
        return

    typer.echo(f"Events ({len(events)}):")
    for event in events:
        typer.echo(
            f"  {event.event_id}: {event.name} "
            f"({event.guest_count} guests, {event.budget_entry_count} budget entries)"
        )


@event_app.command("set-budget")
def event_set_budget(
    event_id: EventOption,
    amount: Annotated[str, typer.Option("--amount", help="Total budget in rupees")],
    db: DbOption = None,
) -> None:
    """Set the total budget ceiling"""
    ledger = get_ledger(db)
    with ledger_errors():
        event = ledger.set_total_budget(event_id, rupees_to_paise(amount))
    typer.echo(f"✓ Budget set: {format_full_inr(event.total_budget)}")


# Budget commands


@budget_app.command("add")
def budget_add(
    event_id: EventOption,
    category: Annotated[str, typer.Option("--category", help="Budget category")],
    planned: Annotated[Optional[str], typer.Option("--planned", help="Rupees")] = None,
    committed: Annotated[Optional[str], typer.Option("--committed", help="Rupees")] = None,
    paid: Annotated[Optional[str], typer.Option("--paid", help="Rupees")] = None,
    vendor: Annotated[Optional[str], typer.Option("--vendor", help="Vendor ID")] = None,
    description: Annotated[Optional[str], typer.Option("--description")] = None,
    db: DbOption = None,
) -> None:
    """Add a budget entry"""
    ledger = get_ledger(db)
    with ledger_errors():
        entry = ledger.add_budget_entry(
            event_id,
            category,
            planned_amount=to_paise(planned),
            committed_amount=to_paise(committed),
            paid_amount=to_paise(paid),
            vendor_id=vendor,
            description=description,
        )

    typer.echo(f"✓ Added budget entry: {entry.entry_id}")
    typer.echo(f"  Category: {entry.category.label()}")
    if entry.category == BudgetCategory.MISCELLANEOUS and category.lower() != "miscellaneous":
        typer.echo(f"  Note: unknown category '{category}' filed under Miscellaneous")


@budget_app.command("pay")
def budget_pay(
    entry_id: Annotated[str, typer.Option("--entry", help="Budget entry ID")],
    amount: Annotated[str, typer.Option("--amount", help="Payment in rupees")],
    db: DbOption = None,
) -> None:
    """Record a payment against a budget entry"""
    ledger = get_ledger(db)
    with ledger_errors():
        entry = ledger.record_payment(entry_id, rupees_to_paise(amount))

    typer.echo(f"✓ Payment recorded: {entry_id}")
    typer.echo(f"  Paid: {format_full_inr(entry.paid_amount)}")
    typer.echo(f"  Pending: {format_full_inr(entry.pending_amount())}")


@budget_app.command("mark-paid")
def budget_mark_paid(
    event_id: EventOption,
    vendor: Annotated[str, typer.Option("--vendor", help="Vendor ID")],
    db: DbOption = None,
) -> None:
    """Settle every open balance for a vendor"""
    ledger = get_ledger(db)
    with ledger_errors():
        settled = ledger.mark_vendor_paid(event_id, vendor)
    typer.echo(f"✓ Settled {len(settled)} entries for vendor {vendor}")


@budget_app.command("show")
def budget_show(event_id: EventOption, json_output: JsonOption = False, db: DbOption = None) -> None:
    """Show the budget rollup and alerts"""
    ledger = get_ledger(db)
    with ledger_errors():
        report = ledger.budget_report(event_id)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
        return

    summary = report.summary
    typer.echo(f"Budget for {event_id}: {summary.health.value}")
    typer.echo(f"  Total budget: {format_inr(summary.total_budget)}")
    typer.echo(f"  Committed: {format_inr(summary.committed)}")
    typer.echo(f"  Paid: {format_inr(summary.paid)}")
    typer.echo(f"  Pending: {format_inr(summary.pending)}")
    if summary.overrun:
        typer.echo(f"  Overrun: {format_inr(summary.overrun)}")

    if report.categories:
        typer.echo("\n  Categories:")
        for cat in report.categories:
            marker = " (over)" if cat.is_over_budget else ""
            typer.echo(
                f"    {cat.category.label()}: planned {format_inr(cat.planned)}, "
                f"committed {format_inr(cat.committed)}{marker}"
            )

    _echo_alerts(report.alerts)


# Guest commands


@guest_app.command("add")
def guest_add(
    event_id: EventOption,
    first_name: Annotated[str, typer.Option("--first-name")],
    last_name: Annotated[Optional[str], typer.Option("--last-name")] = None,
    email: Annotated[Optional[str], typer.Option("--email")] = None,
    phone: Annotated[Optional[str], typer.Option("--phone")] = None,
    outstation: Annotated[bool, typer.Option("--outstation")] = False,
    needs_room: Annotated[bool, typer.Option("--needs-room")] = False,
    needs_pickup: Annotated[bool, typer.Option("--needs-pickup")] = False,
    vip: Annotated[bool, typer.Option("--vip")] = False,
    elderly: Annotated[bool, typer.Option("--elderly")] = False,
    child: Annotated[bool, typer.Option("--child")] = False,
    family: Annotated[Optional[str], typer.Option("--family", help="Family group")] = None,
    db: DbOption = None,
) -> None:
    """Add a guest"""
    ledger = get_ledger(db)
    with ledger_errors():
        guest = ledger.add_guest(
            event_id,
            first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            is_outstation=outstation,
            needs_room=needs_room,
            needs_pickup=needs_pickup,
            is_vip=vip,
            is_elderly=elderly,
            is_child=child,
            family_group=family,
        )
    typer.echo(f"✓ Added guest: {guest.guest_id}")


@guest_app.command("rsvp")
def guest_rsvp(
    guest_id: Annotated[str, typer.Option("--guest", help="Guest ID")],
    status: Annotated[RsvpStatus, typer.Option("--status", help="RSVP status")],
    db: DbOption = None,
) -> None:
    """Record a guest's RSVP"""
    ledger = get_ledger(db)
    with ledger_errors():
        is_late = ledger.update_rsvp(guest_id, status)

    typer.echo(f"✓ RSVP recorded: {status.value}")
    if is_late:
        typer.echo("  Warning: confirmed after the RSVP cutoff")


@guest_app.command("assign-room")
def guest_assign_room(
    guest_id: Annotated[str, typer.Option("--guest", help="Guest ID")],
    unassign: Annotated[bool, typer.Option("--unassign")] = False,
    db: DbOption = None,
) -> None:
    """Mark a guest's hotel room as assigned"""
    ledger = get_ledger(db)
    with ledger_errors():
        ledger.assign_room(guest_id, assigned=not unassign)
    typer.echo(f"✓ Room {'unassigned' if unassign else 'assigned'}: {guest_id}")


@guest_app.command("assign-pickup")
def guest_assign_pickup(
    guest_id: Annotated[str, typer.Option("--guest", help="Guest ID")],
    unassign: Annotated[bool, typer.Option("--unassign")] = False,
    db: DbOption = None,
) -> None:
    """Mark a guest's pickup as assigned"""
    ledger = get_ledger(db)
    with ledger_errors():
        ledger.assign_pickup(guest_id, assigned=not unassign)
    typer.echo(f"✓ Pickup {'unassigned' if unassign else 'assigned'}: {guest_id}")


@guest_app.command("import")
def guest_import(
    event_id: EventOption,
    file: Annotated[Path, typer.Option("--file", help="Guest list CSV")],
    db: DbOption = None,
) -> None:
    """Import guests from a CSV file"""
    ledger = get_ledger(db)
    with ledger_errors():
        result = ledger.import_guests_csv(event_id, file)
    typer.echo(f"✓ Imported {result.imported} guests ({result.skipped} skipped)")


@guest_app.command("import-families")
def guest_import_families(
    event_id: EventOption,
    file: Annotated[Path, typer.Option("--file", help="Family CSV")],
    db: DbOption = None,
) -> None:
    """Import families and their members from a CSV file"""
    ledger = get_ledger(db)
    with ledger_errors():
        result = ledger.import_families_csv(event_id, file)
    typer.echo(
        f"✓ Imported {result.families_created} families, {result.imported} members "
        f"({result.skipped} skipped)"
    )


@guest_app.command("show")
def guest_show(event_id: EventOption, json_output: JsonOption = False, db: DbOption = None) -> None:
    """Show guest counts, logistics and projected cost"""
    ledger = get_ledger(db)
    with ledger_errors():
        report = ledger.guest_report(event_id)

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
        return

    stats = report.stats
    typer.echo(f"Guests for {event_id}: {stats.total}")
    typer.echo(
        f"  Confirmed: {stats.confirmed}  Pending: {stats.pending}  "
        f"Declined: {stats.declined}  Maybe: {stats.maybe}"
    )
    typer.echo(f"  Confirmation rate: {report.confirmation.rate}% ({report.confirmation.color.value})")
    typer.echo(
        f"  Rooms: {report.outstation.rooms_assigned}/{report.outstation.rooms_required} assigned"
    )
    typer.echo(
        f"  Pickups: {report.outstation.pickup_assigned}/{report.outstation.pickup_needed} assigned"
    )
    typer.echo(f"  Projected cost: {format_inr(report.cost_impact.total)}")
    typer.echo(f"  If all pending attend: +{format_inr(report.cost_impact.pending_impact)}")

    _echo_alerts(report.alerts)


# Dashboard


@app.command()
def dashboard(event_id: EventOption, json_output: JsonOption = False, db: DbOption = None) -> None:
    """Show the combined planning dashboard"""
    ledger = get_ledger(db)
    with ledger_errors():
        snapshot = ledger.dashboard(event_id)

    if json_output:
        typer.echo(snapshot.model_dump_json(indent=2))
        return

    typer.echo(f"{snapshot.event_name}: risk {snapshot.risk_level.value.upper()}")
    if snapshot.days_until_event is not None:
        typer.echo(f"  Days to go: {snapshot.days_until_event}")
    typer.echo(f"  Budget: {snapshot.budget.summary.health.value}")
    typer.echo(f"  Confirmation rate: {snapshot.guests.confirmation.rate}%")
    _echo_alerts(snapshot.alerts)


# Reminder commands


@reminders_app.command("list")
def reminders_list(db: DbOption = None) -> None:
    """List built-in reminder templates"""
    ledger = get_ledger(db)
    for template in ledger.templates.reminders:
        typer.echo(
            f"  {template.template_id}: {template.name} "
            f"({template.default_days_before} days before)"
        )


@reminders_app.command("render")
def reminders_render(
    template_id: Annotated[str, typer.Option("--template", help="Template ID")],
    event_id: Annotated[Optional[str], typer.Option("--event", help="Event ID")] = None,
    values: Annotated[
        Optional[list[str]],
        typer.Option("--set", help="Placeholder value as key=value (repeatable)"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Render a reminder template"""
    ledger = get_ledger(db)

    context = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep:
            typer.echo(f"Error: Expected key=value, got '{item}'", err=True)
            raise typer.Exit(1)
        context[key.strip()] = value

    with ledger_errors():
        rendered = ledger.render_reminder(template_id, context, event_id=event_id)

    typer.echo(rendered.title)
    typer.echo(rendered.message)
    if rendered.scheduled_for:
        typer.echo(f"Scheduled for: {rendered.scheduled_for.isoformat()}")


def _echo_alerts(alerts: list[Alert]) -> None:
    if not alerts:
        return
    typer.echo(f"\n  Alerts ({len(alerts)}):")
    for alert in alerts:
        impact = f" [{alert.impact}]" if alert.impact else ""
        typer.echo(f"    [{alert.severity.value.upper()}] {alert.message}{impact}")


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
