"""
WeddingLedger - Main façade class

The primary interface for the planning engine. It owns the row store,
the planning policy, the clock and the template catalog, and hands rows
to the pure aggregation functions.

Example:
    >>> from wedding_ledger import WeddingLedger
    >>> ledger = WeddingLedger("wedding.db")
    >>> event = ledger.create_event("Asha & Rohan", total_budget=420000000)
    >>> ledger.add_budget_entry(event.event_id, "venue", planned_amount=100000000)
    >>> ledger.add_guest(event.event_id, "Meera", is_outstation=True, needs_room=True)
    >>> snapshot = ledger.dashboard(event.event_id)
"""

from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

from wedding_ledger.budget.aggregator import summarize_by_category
from wedding_ledger.budget.impact import (
    estimate_guest_change_impact,
    estimate_vendor_change_impact,
    guest_driven_cost_per_ten,
)
from wedding_ledger.budget.models import BudgetCategory, BudgetEntry, ChangeImpact
from wedding_ledger.events.models import EventListing, WeddingEvent
from wedding_ledger.feedback.dashboard import (
    build_budget_report,
    build_dashboard,
    build_guest_report,
)
from wedding_ledger.feedback.models import BudgetReport, DashboardSnapshot, GuestReport
from wedding_ledger.guests.importer import import_families, import_guests, read_import_file
from wedding_ledger.guests.models import Guest, ImportResult, RateConfig, RsvpStatus
from wedding_ledger.kernel.errors import (
    BudgetEntryNotFound,
    EventNotFound,
    GuestNotFound,
    InvalidAmount,
)
from wedding_ledger.kernel.ids import generate_id
from wedding_ledger.kernel.logging import LogOperation, get_logger
from wedding_ledger.kernel.metrics import (
    track_operation_duration,
    update_budget_metrics,
    update_guest_metrics,
)
from wedding_ledger.kernel.planning_policy import PlanningPolicy
from wedding_ledger.kernel.row_store import SQLiteRowStore
from wedding_ledger.kernel.time import RealTimeProvider, TimeProvider, as_utc, days_until
from wedding_ledger.reminders.templates import (
    RenderedReminder,
    ReminderType,
    TemplateCatalog,
    load_template_catalog,
    render_reminder,
)

logger = get_logger(__name__)


class WeddingLedger:
    """
    Wedding Ledger main façade

    Provides a unified API for:
    - Event setup (date, RSVP cutoff, budget ceiling, rates)
    - Budget entries and payments
    - Guests, RSVPs and logistics
    - CSV imports
    - Budget, guest and dashboard reports
    - Reminder rendering
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        policy: PlanningPolicy | None = None,
        time_provider: TimeProvider | None = None,
        templates: TemplateCatalog | None = None,
    ) -> None:
        """
        Initialize the ledger

        Args:
            sqlite_path: Path to SQLite database
            policy: Planning policy (uses defaults if None)
            time_provider: Time provider (uses real time if None)
            templates: Template catalog (uses the built-in catalog if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.policy = policy or PlanningPolicy()
        self.time_provider = time_provider or RealTimeProvider()
        self.templates = templates or load_template_catalog()
        self.store = SQLiteRowStore(self.sqlite_path)

    # Event operations

    def create_event(
        self,
        name: str,
        event_date: date | None = None,
        rsvp_cutoff: datetime | None = None,
        total_budget: int = 0,
        rates: RateConfig | None = None,
    ) -> WeddingEvent:
        """
        Create a new event

        Args:
            name: Display name
            event_date: Day of the main ceremony
            rsvp_cutoff: Confirmations after this moment count as late
            total_budget: Budget ceiling in paise (0 = not set)
            rates: Per-event rates (policy default rates if None)

        Returns:
            The stored event
        """
        if total_budget < 0:
            raise InvalidAmount(total_budget, "total budget cannot be negative")

        event = WeddingEvent(
            event_id=generate_id("evt"),
            name=name,
            event_date=event_date,
            rsvp_cutoff=rsvp_cutoff,
            total_budget=total_budget,
            rates=rates or self.policy.default_rates,
            created_at=self.time_provider.now(),
        )
        self.store.add_event(event)
        logger.info("Event created", event_id=event.event_id)
        return event

    def get_event(self, event_id: str) -> WeddingEvent:
        event = self.store.get_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    def list_events(self) -> list[EventListing]:
        return self.store.list_events()

    def set_total_budget(self, event_id: str, total_budget: int) -> WeddingEvent:
        """Set the budget ceiling; 0 clears it"""
        if total_budget < 0:
            raise InvalidAmount(total_budget, "total budget cannot be negative")
        event = self.get_event(event_id).model_copy(update={"total_budget": total_budget})
        return self.store.update_event(event)

    def set_rates(self, event_id: str, rates: RateConfig) -> WeddingEvent:
        event = self.get_event(event_id).model_copy(update={"rates": rates})
        return self.store.update_event(event)

    def set_schedule(
        self,
        event_id: str,
        event_date: date | None = None,
        rsvp_cutoff: datetime | None = None,
    ) -> WeddingEvent:
        """Update the event date and/or RSVP cutoff; None leaves a value unchanged"""
        update: dict[str, Any] = {}
        if event_date is not None:
            update["event_date"] = event_date
        if rsvp_cutoff is not None:
            update["rsvp_cutoff"] = rsvp_cutoff
        event = self.get_event(event_id).model_copy(update=update)
        return self.store.update_event(event)

    # Budget operations

    def add_budget_entry(
        self,
        event_id: str,
        category: BudgetCategory | str | None,
        planned_amount: int = 0,
        committed_amount: int = 0,
        paid_amount: int = 0,
        vendor_id: str | None = None,
        description: str | None = None,
    ) -> BudgetEntry:
        """
        Add a budget line, usually one vendor

        Unknown categories are filed under miscellaneous.

        Raises:
            EventNotFound: Unknown event
            InvalidAmount: A negative amount
        """
        self.get_event(event_id)
        for amount in (planned_amount, committed_amount, paid_amount):
            if amount < 0:
                raise InvalidAmount(amount, "budget amounts cannot be negative")

        entry = BudgetEntry(
            event_id=event_id,
            category=category,
            planned_amount=planned_amount,
            committed_amount=committed_amount,
            paid_amount=paid_amount,
            vendor_id=vendor_id,
            description=description,
        )
        return self.store.add_budget_entry(entry, created_at=self.time_provider.now())

    def get_budget_entry(self, entry_id: str) -> BudgetEntry:
        entry = self.store.get_budget_entry(entry_id)
        if entry is None:
            raise BudgetEntryNotFound(entry_id)
        return entry

    def commit_budget_entry(self, entry_id: str, committed_amount: int) -> BudgetEntry:
        """Record the contracted amount for a budget line"""
        if committed_amount < 0:
            raise InvalidAmount(committed_amount, "committed amount cannot be negative")
        entry = self.get_budget_entry(entry_id).model_copy(
            update={"committed_amount": committed_amount}
        )
        return self.store.update_budget_entry(entry)

    def record_payment(self, entry_id: str, amount: int) -> BudgetEntry:
        """
        Add a payment to a budget line

        Overpayment is allowed; pending then reads as zero.

        Raises:
            InvalidAmount: amount is zero or negative
            BudgetEntryNotFound: Unknown entry
        """
        if amount <= 0:
            raise InvalidAmount(amount, "payment must be positive")

        entry = self.get_budget_entry(entry_id)
        entry = entry.model_copy(update={"paid_amount": entry.paid_amount + amount})
        self.store.update_budget_entry(entry)
        logger.info("Payment recorded", entry_id=entry_id, amount=amount)
        return entry

    def mark_vendor_paid(self, event_id: str, vendor_id: str) -> list[BudgetEntry]:
        """Settle every open balance for a vendor; returns the entries changed"""
        self.get_event(event_id)
        settled = []
        for entry in self.store.list_vendor_entries(event_id, vendor_id):
            if entry.pending_amount() > 0:
                entry = entry.model_copy(update={"paid_amount": entry.committed_amount})
                settled.append(self.store.update_budget_entry(entry))
        return settled

    def list_budget_entries(self, event_id: str) -> list[BudgetEntry]:
        self.get_event(event_id)
        return self.store.list_budget_entries(event_id)

    # Guest operations

    def add_guest(self, event_id: str, first_name: str, **fields: Any) -> Guest:
        """
        Add one guest by hand

        Args:
            event_id: Event the guest is invited to
            first_name: Required
            **fields: Any other Guest field (last_name, email, is_outstation, ...)
        """
        self.get_event(event_id)
        guest = Guest(event_id=event_id, first_name=first_name, **fields)
        return self.store.add_guest(guest, created_at=self.time_provider.now())

    def get_guest(self, guest_id: str) -> Guest:
        guest = self.store.get_guest(guest_id)
        if guest is None:
            raise GuestNotFound(guest_id)
        return guest

    def list_guests(self, event_id: str) -> list[Guest]:
        self.get_event(event_id)
        return self.store.list_guests(event_id)

    def update_rsvp(self, guest_id: str, status: RsvpStatus | str) -> bool:
        """
        Record a guest's response

        Returns:
            True when this is an acceptance recorded after the event's RSVP
            cutoff (a late confirmation)
        """
        status = RsvpStatus(status)
        guest = self.get_guest(guest_id)
        event = self.get_event(guest.event_id or "")
        now = self.time_provider.now()

        self.store.update_guest(
            guest.model_copy(update={"rsvp_status": status, "rsvp_updated_at": now})
        )

        is_late = (
            status == RsvpStatus.ACCEPTED
            and event.rsvp_cutoff is not None
            and as_utc(now) > as_utc(event.rsvp_cutoff)
        )
        if is_late:
            logger.warning(
                "Late confirmation after RSVP cutoff",
                event_id=event.event_id,
                guest_id=guest_id,
            )
        return is_late

    def bulk_update_rsvp(self, guest_ids: list[str], status: RsvpStatus | str) -> int:
        """Apply one response to many guests; returns how many were late"""
        with LogOperation(logger, "bulk_update_rsvp", guest_count=len(guest_ids)) as op:
            late = sum(1 for guest_id in guest_ids if self.update_rsvp(guest_id, status))
            op.record(late_confirmations=late)
        return late

    def assign_room(self, guest_id: str, assigned: bool = True) -> Guest:
        guest = self.get_guest(guest_id).model_copy(update={"room_assigned": assigned})
        return self.store.update_guest(guest)

    def assign_pickup(self, guest_id: str, assigned: bool = True) -> Guest:
        guest = self.get_guest(guest_id).model_copy(update={"pickup_assigned": assigned})
        return self.store.update_guest(guest)

    # Import operations

    @track_operation_duration("import_guests")
    def import_guests_csv(self, event_id: str, path: str | Path) -> ImportResult:
        """Import a guest list CSV file (see guests.importer.import_guests)"""
        self.get_event(event_id)
        with LogOperation(logger, "import_guests", event_id=event_id) as op:
            text = read_import_file(path, self.policy)
            result = import_guests(
                self.store, event_id, text, self.time_provider.now(), self.policy
            )
            op.record(imported=result.imported, skipped=result.skipped)
        return result

    @track_operation_duration("import_families")
    def import_families_csv(self, event_id: str, path: str | Path) -> ImportResult:
        """Import a family CSV file (see guests.importer.import_families)"""
        self.get_event(event_id)
        with LogOperation(logger, "import_families", event_id=event_id) as op:
            text = read_import_file(path, self.policy)
            result = import_families(
                self.store, event_id, text, self.time_provider.now(), self.policy
            )
            op.record(
                imported=result.imported,
                skipped=result.skipped,
                families_created=result.families_created,
            )
        return result

    # Reports

    def days_until_event(self, event: WeddingEvent) -> int | None:
        return days_until(event.event_date, self.time_provider.now())

    @track_operation_duration("budget_report")
    def budget_report(self, event_id: str) -> BudgetReport:
        event = self.get_event(event_id)
        report = build_budget_report(
            event_id,
            self.store.list_budget_entries(event_id),
            event.total_budget,
            guests=self.store.list_guests(event_id),
            rates=event.rates,
            rsvp_cutoff=event.rsvp_cutoff,
            days_until_event=self.days_until_event(event),
            policy=self.policy,
        )
        update_budget_metrics(
            event_id, report.summary.utilization, report.summary.health.value
        )
        return report

    @track_operation_duration("guest_report")
    def guest_report(self, event_id: str) -> GuestReport:
        event = self.get_event(event_id)
        report = build_guest_report(
            event_id,
            self.store.list_guests(event_id),
            event.rates,
            rsvp_cutoff=event.rsvp_cutoff,
            days_until_event=self.days_until_event(event),
            policy=self.policy,
        )
        update_guest_metrics(event_id, report.confirmation.rate)
        return report

    @track_operation_duration("dashboard")
    def dashboard(self, event_id: str) -> DashboardSnapshot:
        """Budget and guest reports for one event, with merged alerts"""
        event = self.get_event(event_id)
        with LogOperation(logger, "dashboard", event_id=event_id):
            return build_dashboard(
                event_id,
                event.name,
                self.budget_report(event_id),
                self.guest_report(event_id),
                now=self.time_provider.now(),
                days_until_event=self.days_until_event(event),
            )

    # What-if previews

    def preview_guest_change(self, guest_delta: int) -> ChangeImpact:
        return estimate_guest_change_impact(guest_delta, self.policy.default_cost_per_guest)

    def preview_vendor_change(
        self, event_id: str, price_changes: Mapping[str, int]
    ) -> ChangeImpact:
        return estimate_vendor_change_impact(self.list_budget_entries(event_id), price_changes)

    def cost_per_ten_guests(self, event_id: str) -> int:
        """Committed guest-driven spend per 10 guests"""
        categories = summarize_by_category(self.list_budget_entries(event_id))
        return guest_driven_cost_per_ten(categories, len(self.store.list_guests(event_id)))

    # Reminders

    def render_reminder(
        self,
        template_id: str,
        context: Mapping[str, Any],
        event_id: str | None = None,
    ) -> RenderedReminder:
        """
        Render a reminder template

        With an event_id, event_name is filled in from the event unless the
        context supplies it, and the reminder is scheduled against the RSVP
        cutoff (RSVP reminders) or the event date (everything else).
        """
        template = self.templates.get_reminder(template_id)
        context = dict(context)
        anchor: date | datetime | None = None

        if event_id is not None:
            event = self.get_event(event_id)
            context.setdefault("event_name", event.name)
            if template.reminder_type == ReminderType.RSVP_DEADLINE:
                anchor = event.rsvp_cutoff
            else:
                anchor = event.event_date

        return render_reminder(template, context, anchor)
