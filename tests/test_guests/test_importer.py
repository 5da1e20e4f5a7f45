"""
Tests for guest and family CSV import
"""

from datetime import datetime, timezone

import pytest

from wedding_ledger.events.models import WeddingEvent
from wedding_ledger.guests.importer import (
    import_families,
    import_guests,
    parse_csv,
    read_import_file,
)
from wedding_ledger.guests.models import FamilySide, GuestSource, RsvpStatus
from wedding_ledger.kernel.errors import InvalidImportFile, MissingImportColumn
from wedding_ledger.kernel.planning_policy import PlanningPolicy

NOW = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)
EVENT_ID = "evt-import"


@pytest.fixture
def store(row_store):
    row_store.add_event(WeddingEvent(event_id=EVENT_ID, name="Asha & Rohan", created_at=NOW))
    return row_store


class SnapshotEmailStore:
    """
    Row store whose duplicate check answers from a snapshot taken up front

    Models two imports that both read before either writes.
    """

    def __init__(self, store, event_id):
        self._store = store
        self._emails = {g.email for g in store.list_guests(event_id) if g.email}

    def guest_email_exists(self, event_id, email):
        return email in self._emails

    def __getattr__(self, name):
        return getattr(self._store, name)


# CSV parsing


def test_parse_csv_lowercases_headers_and_blanks_to_none():
    rows = parse_csv("First_Name,Last_Name,Email\nAsha,,asha@example.com\n")

    assert rows == [{"first_name": "Asha", "last_name": None, "email": "asha@example.com"}]


def test_parse_csv_handles_quotes_and_embedded_commas():
    rows = parse_csv('first_name,last_name\n"Rao, Jr.","He said ""hi"""\n')

    assert rows[0]["first_name"] == "Rao, Jr."
    assert rows[0]["last_name"] == 'He said "hi"'


def test_parse_csv_skips_blank_lines_and_byte_order_mark():
    rows = parse_csv("\ufefffirst_name\n\nAsha\n\n  \nRavi\n")

    assert [r["first_name"] for r in rows] == ["Asha", "Ravi"]


def test_parse_csv_short_rows_fill_with_none():
    rows = parse_csv("first_name,last_name,email\nAsha\n")

    assert rows[0] == {"first_name": "Asha", "last_name": None, "email": None}


def test_parse_csv_header_only_is_invalid():
    with pytest.raises(InvalidImportFile, match="empty or invalid"):
        parse_csv("first_name,last_name\n")


def test_parse_csv_empty_text_is_invalid():
    with pytest.raises(InvalidImportFile):
        parse_csv("")


def test_parse_csv_missing_required_column():
    with pytest.raises(MissingImportColumn) as exc_info:
        parse_csv("name,email\nAsha,a@example.com\n", required_columns=("first_name",))

    assert exc_info.value.column == "first_name"


def test_parse_csv_rejects_oversized_text():
    policy = PlanningPolicy(max_import_bytes=16)

    with pytest.raises(InvalidImportFile, match="too large"):
        parse_csv("first_name\n" + "Asha\n" * 10, policy=policy)


# File checks


def test_read_import_file_rejects_non_csv(tmp_path):
    path = tmp_path / "guests.xlsx"
    path.write_text("first_name\nAsha\n")

    with pytest.raises(InvalidImportFile, match="Please upload a CSV file"):
        read_import_file(path)


def test_read_import_file_rejects_large_file(tmp_path):
    path = tmp_path / "guests.csv"
    path.write_text("first_name\n" + "Asha\n" * 100)

    with pytest.raises(InvalidImportFile, match="File too large"):
        read_import_file(path, PlanningPolicy(max_import_bytes=50))


def test_read_import_file_strips_utf8_bom(tmp_path):
    path = tmp_path / "Guests.CSV"
    path.write_bytes("first_name\nAsha\n".encode("utf-8-sig"))

    assert read_import_file(path) == "first_name\nAsha\n"


# Guest import


def test_import_guests_creates_rows_and_groups(store):
    text = (
        "first_name,last_name,email,phone,group_name,plus_one_allowed\n"
        "Asha,Rao,asha@example.com,98450,College Friends,yes\n"
        "Ravi,Iyer,,,college friends,0\n"
        "Meera,,meera@example.com,,Office,TRUE\n"
    )

    result = import_guests(store, EVENT_ID, text, NOW)

    assert result.imported == 3
    assert result.skipped == 0

    groups = store.list_groups(EVENT_ID)
    assert sorted(g.name for g in groups) == ["College Friends", "Office"]

    guests = {g.first_name: g for g in store.list_guests(EVENT_ID)}
    assert guests["Asha"].group_id == guests["Ravi"].group_id
    assert guests["Asha"].plus_one_allowed is True
    assert guests["Ravi"].plus_one_allowed is False
    assert guests["Meera"].plus_one_allowed is True
    assert all(g.source == GuestSource.IMPORTED for g in guests.values())
    assert all(g.rsvp_status == RsvpStatus.PENDING for g in guests.values())


def test_import_guests_reuses_existing_group_ignoring_case(store):
    import_guests(store, EVENT_ID, "first_name,group_name\nAsha,Cousins\n", NOW)
    import_guests(store, EVENT_ID, "first_name,group_name\nRavi,COUSINS\n", NOW)

    assert len(store.list_groups(EVENT_ID)) == 1


def test_import_guests_skips_rows_without_first_name(store):
    result = import_guests(store, EVENT_ID, "first_name,last_name\n,Rao\nRavi,Iyer\n", NOW)

    assert result.imported == 1
    assert result.skipped == 1


def test_import_guests_skips_duplicate_emails(store):
    text = "first_name,email\nAsha,asha@example.com\nAsha Again,asha@example.com\n"

    result = import_guests(store, EVENT_ID, text, NOW)

    assert result.imported == 1
    assert result.skipped == 1


def test_reimporting_the_same_file_skips_every_emailed_row(store):
    text = "first_name,email\nAsha,asha@example.com\nRavi,ravi@example.com\nNoEmail,\n"

    import_guests(store, EVENT_ID, text, NOW)
    result = import_guests(store, EVENT_ID, text, NOW)

    assert result.imported == 1
    assert result.skipped == 2
    assert len(store.list_guests(EVENT_ID)) == 4


def test_concurrent_imports_can_admit_the_same_email(store):
    """Both imports read before either writes, so neither sees the other's row"""
    first = SnapshotEmailStore(store, EVENT_ID)
    second = SnapshotEmailStore(store, EVENT_ID)

    import_guests(first, EVENT_ID, "first_name,email\nAsha,asha@example.com\n", NOW)
    import_guests(second, EVENT_ID, "first_name,email\nAsha,asha@example.com\n", NOW)

    emails = [g.email for g in store.list_guests(EVENT_ID)]
    assert emails == ["asha@example.com", "asha@example.com"]


def test_import_guests_missing_column_writes_nothing(store):
    with pytest.raises(MissingImportColumn):
        import_guests(store, EVENT_ID, "name\nAsha\n", NOW)

    assert store.list_guests(EVENT_ID) == []


# Family import

FAMILY_CSV = (
    "family_name,family_side,member_name,primary_contact_name,primary_contact_phone,"
    "is_outstation,rooms_required,pickup_required,is_elderly,is_child\n"
    "Sharma,Bride,Rajesh Sharma,Rajesh Sharma,98450,true,2,yes,true,\n"
    "Sharma,bride,Anya Sharma,,,,,,,1\n"
    "Khan,groom,Imran,,,no,,no,,\n"
)


def test_import_families_creates_families_and_members(store):
    result = import_families(store, EVENT_ID, FAMILY_CSV, NOW)

    assert result.families_created == 2
    assert result.imported == 3
    assert result.skipped == 0

    families = {f.family_name: f for f in store.list_families(EVENT_ID)}
    sharma = families["Sharma"]
    assert sharma.family_side == FamilySide.BRIDE
    assert sharma.is_outstation is True
    assert sharma.rooms_required == 2
    assert sharma.pickup_required is True
    assert sharma.primary_contact_phone == "98450"


def test_family_members_inherit_household_logistics(store):
    import_families(store, EVENT_ID, FAMILY_CSV, NOW)

    guests = {g.first_name: g for g in store.list_guests(EVENT_ID)}
    rajesh, anya, imran = guests["Rajesh"], guests["Anya"], guests["Imran"]

    assert rajesh.last_name == "Sharma"
    assert rajesh.is_outstation and rajesh.needs_room and rajesh.needs_pickup
    assert rajesh.is_elderly is True
    assert anya.is_outstation and anya.needs_room
    assert anya.is_child is True
    assert anya.family_group == "Sharma"
    assert imran.last_name is None
    assert not imran.is_outstation
    assert not imran.needs_room
    assert all(g.source == GuestSource.FAMILY for g in guests.values())


def test_import_families_skips_incomplete_and_invalid_rows(store):
    text = (
        "family_name,family_side,member_name\n"
        "Sharma,bride,\n"
        "Sharma,cousin,Rajesh Sharma\n"
        ",groom,Imran\n"
        "Khan,groom,Imran Khan\n"
    )

    result = import_families(store, EVENT_ID, text, NOW)

    assert result.imported == 1
    assert result.skipped == 3
    assert result.families_created == 1


def test_import_families_adds_members_to_existing_family(store):
    import_families(store, EVENT_ID, "family_name,family_side,member_name\nSharma,bride,Rajesh\n", NOW)
    result = import_families(
        store, EVENT_ID, "family_name,family_side,member_name\nSHARMA,bride,Anya\n", NOW
    )

    assert result.families_created == 0
    assert result.imported == 1
    assert len(store.list_families(EVENT_ID)) == 1


def test_non_numeric_rooms_required_reads_as_zero(store):
    text = "family_name,family_side,member_name,is_outstation,rooms_required\nRao,groom,Vik,yes,two\n"

    import_families(store, EVENT_ID, text, NOW)

    family = store.list_families(EVENT_ID)[0]
    assert family.rooms_required == 0
    assert store.list_guests(EVENT_ID)[0].needs_room is False
