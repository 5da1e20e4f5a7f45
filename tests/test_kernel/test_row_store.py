"""
Tests for the SQLite row store
"""

from datetime import date, datetime, timezone

import pytest

from tests.helpers import make_entry, make_guest
from wedding_ledger.budget.models import BudgetCategory
from wedding_ledger.events.models import EventListing, WeddingEvent
from wedding_ledger.guests.models import Family, FamilySide, GuestGroup, RateConfig, RsvpStatus
from wedding_ledger.kernel.errors import StoreError
from wedding_ledger.kernel.row_store import SQLiteRowStore

NOW = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)


def _event(event_id: str = "evt-1", name: str = "Asha & Rohan", **fields) -> WeddingEvent:
    return WeddingEvent(event_id=event_id, name=name, created_at=NOW, **fields)


def test_event_round_trip(row_store: SQLiteRowStore) -> None:
    event = _event(
        event_date=date(2026, 12, 12),
        rsvp_cutoff=datetime(2026, 11, 20, tzinfo=timezone.utc),
        total_budget=420_000_000,
        rates=RateConfig(catering_per_head=150_000, guests_per_room=3),
    )
    row_store.add_event(event)

    loaded = row_store.get_event("evt-1")

    assert loaded == event


def test_get_missing_event_returns_none(row_store: SQLiteRowStore) -> None:
    assert row_store.get_event("evt-missing") is None


def test_duplicate_event_id_is_a_store_error(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event())

    with pytest.raises(StoreError):
        row_store.add_event(_event())


def test_update_event(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event())

    row_store.update_event(_event(total_budget=5000, name="Renamed"))

    loaded = row_store.get_event("evt-1")
    assert loaded.total_budget == 5000
    assert loaded.name == "Renamed"


def test_list_events_carries_row_counts(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event("evt-1"))
    row_store.add_event(_event("evt-2"))
    row_store.add_guest(make_guest(event_id="evt-1"), created_at=NOW)
    row_store.add_guest(make_guest(event_id="evt-1"), created_at=NOW)
    row_store.add_budget_entry(make_entry(event_id="evt-2"), created_at=NOW)

    listings = row_store.list_events()

    assert all(isinstance(listing, EventListing) for listing in listings)
    counts = {l.event_id: (l.guest_count, l.budget_entry_count) for l in listings}
    assert counts == {"evt-1": (2, 0), "evt-2": (0, 1)}


def test_budget_entry_gets_an_id_and_round_trips(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event())

    entry = row_store.add_budget_entry(
        make_entry("photography", 100, 120, 50, event_id="evt-1", vendor_id="v-1"),
        created_at=NOW,
    )

    assert entry.entry_id.startswith("bud-")
    assert row_store.get_budget_entry(entry.entry_id) == entry


def test_budget_entries_in_creation_order(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event())
    first = row_store.add_budget_entry(
        make_entry("venue", event_id="evt-1"), created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)
    )
    second = row_store.add_budget_entry(
        make_entry("catering", event_id="evt-1"), created_at=datetime(2026, 2, 1, tzinfo=timezone.utc)
    )

    entries = row_store.list_budget_entries("evt-1")

    assert [e.entry_id for e in entries] == [first.entry_id, second.entry_id]


def test_null_amounts_and_unknown_category_are_defaulted_on_read(
    row_store: SQLiteRowStore,
) -> None:
    """Rows written by other tools may carry NULLs and free-text categories"""
    with row_store._connect() as conn:
        conn.execute(
            """
            INSERT INTO budget_entries (entry_id, event_id, category, planned_amount,
                committed_amount, paid_amount, created_at)
            VALUES ('bud-legacy', 'evt-1', 'Fireworks', NULL, 500, NULL, ?)
            """,
            (NOW.isoformat(),),
        )
        conn.commit()

    entry = row_store.get_budget_entry("bud-legacy")

    assert entry.category == BudgetCategory.MISCELLANEOUS
    assert entry.planned_amount == 0
    assert entry.paid_amount == 0
    assert entry.committed_amount == 500


def test_vendor_entries(row_store: SQLiteRowStore) -> None:
    row_store.add_budget_entry(make_entry(event_id="evt-1", vendor_id="v-1"), created_at=NOW)
    row_store.add_budget_entry(make_entry(event_id="evt-1", vendor_id="v-2"), created_at=NOW)

    assert len(row_store.list_vendor_entries("evt-1", "v-1")) == 1


def test_guest_round_trip_and_update(row_store: SQLiteRowStore) -> None:
    guest = row_store.add_guest(
        make_guest(
            "Asha",
            event_id="evt-1",
            email="asha@example.com",
            is_outstation=True,
            needs_room=True,
            family_side=FamilySide.BRIDE,
        ),
        created_at=NOW,
    )

    assert guest.guest_id.startswith("gst-")
    assert row_store.get_guest(guest.guest_id) == guest

    updated = guest.model_copy(update={"rsvp_status": RsvpStatus.ACCEPTED, "rsvp_updated_at": NOW})
    row_store.update_guest(updated)

    assert row_store.get_guest(guest.guest_id) == updated


def test_guest_email_exists_is_scoped_to_event(row_store: SQLiteRowStore) -> None:
    row_store.add_guest(make_guest(event_id="evt-1", email="asha@example.com"), created_at=NOW)

    assert row_store.guest_email_exists("evt-1", "asha@example.com")
    assert not row_store.guest_email_exists("evt-2", "asha@example.com")
    assert not row_store.guest_email_exists("evt-1", "ravi@example.com")


def test_groups_and_families(row_store: SQLiteRowStore) -> None:
    group = row_store.add_group(GuestGroup(event_id="evt-1", name="Office"))
    family = row_store.add_family(
        Family(
            event_id="evt-1",
            family_name="Sharma",
            family_side=FamilySide.GROOM,
            is_outstation=True,
            rooms_required=2,
        )
    )

    assert group.group_id.startswith("grp-")
    assert family.family_id.startswith("fam-")
    assert row_store.list_groups("evt-1") == [group]
    assert row_store.list_families("evt-1") == [family]
    assert row_store.list_families("evt-2") == []


def test_count_rows_and_ping(row_store: SQLiteRowStore) -> None:
    row_store.add_event(_event())
    row_store.add_guest(make_guest(event_id="evt-1"), created_at=NOW)

    assert row_store.ping() is True
    counts = row_store.count_rows()
    assert counts["events"] == 1
    assert counts["guests"] == 1
    assert counts["budget_entries"] == 0


def test_schema_creation_is_idempotent(temp_db) -> None:
    SQLiteRowStore(temp_db).add_event(_event())

    reopened = SQLiteRowStore(temp_db)

    assert reopened.get_event("evt-1") is not None
