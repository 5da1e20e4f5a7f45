"""
Guest CSV Import - Bulk guest and family creation from spreadsheets

File-level problems (wrong type, too large, empty, missing header) raise a
GuestImportError and nothing is written. Row-level problems never raise:
the row is skipped and counted.

Duplicate emails are detected with a read before each insert, outside any
transaction. Two imports running at once for the same event can therefore
both admit the same email; the store has no unique constraint to stop it.
"""

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Protocol

from wedding_ledger.guests.models import (
    Family,
    FamilySide,
    Guest,
    GuestGroup,
    GuestSource,
    ImportResult,
    RsvpStatus,
)
from wedding_ledger.kernel.errors import InvalidImportFile, MissingImportColumn
from wedding_ledger.kernel.logging import get_logger
from wedding_ledger.kernel.metrics import guests_imported_total, import_rows_skipped_total
from wedding_ledger.kernel.planning_policy import PlanningPolicy, default_planning_policy

logger = get_logger(__name__)

GUEST_REQUIRED_COLUMNS = ("first_name",)
FAMILY_REQUIRED_COLUMNS = ("family_name", "family_side", "member_name")

TRUTHY_VALUES = {"true", "1", "yes"}


class ImportStore(Protocol):
    """The slice of the row store the importers need"""

    def add_guest(self, guest: Guest, created_at: datetime) -> Guest: ...

    def guest_email_exists(self, event_id: str, email: str) -> bool: ...

    def list_groups(self, event_id: str) -> list[GuestGroup]: ...

    def add_group(self, group: GuestGroup) -> GuestGroup: ...

    def list_families(self, event_id: str) -> list[Family]: ...

    def add_family(self, family: Family) -> Family: ...


def _is_truthy(value: str | None) -> bool:
    return value is not None and value.strip().lower() in TRUTHY_VALUES


def read_import_file(path: str | Path, policy: PlanningPolicy | None = None) -> str:
    """
    Read an uploaded CSV file after checking its type and size

    Raises:
        InvalidImportFile: Not a .csv file, or larger than the import cap
    """
    policy = policy or default_planning_policy
    path = Path(path)

    if path.suffix.lower() != ".csv":
        raise InvalidImportFile("Invalid file type. Please upload a CSV file.")
    if path.stat().st_size > policy.max_import_bytes:
        raise InvalidImportFile(
            f"File too large. Maximum size is {policy.max_import_bytes // (1024 * 1024)}MB."
        )

    return path.read_text(encoding="utf-8-sig")


def parse_csv(
    text: str,
    required_columns: tuple[str, ...] = (),
    policy: PlanningPolicy | None = None,
) -> list[dict[str, str | None]]:
    """
    Parse CSV text into rows keyed by lower-cased header

    Quoted fields may contain commas and doubled quotes. Values are
    stripped; empty values and missing trailing columns read as None.
    Blank lines are ignored.

    Raises:
        InvalidImportFile: Text over the import cap, or no data rows
        MissingImportColumn: A required header is absent
    """
    policy = policy or default_planning_policy

    if len(text.encode("utf-8")) > policy.max_import_bytes:
        raise InvalidImportFile(
            f"File too large. Maximum size is {policy.max_import_bytes // (1024 * 1024)}MB."
        )

    records = [
        [value.strip() for value in record]
        for record in csv.reader(io.StringIO(text.lstrip("\ufeff")))
        if any(value.strip() for value in record)
    ]
    if len(records) < 2:
        raise InvalidImportFile("CSV file is empty or invalid")

    headers = [header.lower() for header in records[0]]
    for column in required_columns:
        if column not in headers:
            raise MissingImportColumn(column)

    rows = []
    for record in records[1:]:
        rows.append(
            {
                header: (record[index] or None) if index < len(record) else None
                for index, header in enumerate(headers)
            }
        )
    return rows


def _skip(result: ImportResult, reason: str) -> None:
    result.skipped += 1
    import_rows_skipped_total.labels(reason=reason).inc()


def import_guests(
    store: ImportStore,
    event_id: str,
    text: str,
    now: datetime,
    policy: PlanningPolicy | None = None,
) -> ImportResult:
    """
    Create guests from a guest-list CSV

    Columns: first_name (required), last_name, email, phone, group_name,
    plus_one_allowed. Missing groups are created on first use, matched by
    name ignoring case. Rows whose email already exists for the event are
    skipped.

    Args:
        store: Row store
        event_id: Event receiving the guests
        text: CSV content
        now: Creation timestamp for new rows
        policy: Import cap (defaults to default_planning_policy)

    Returns:
        ImportResult with imported and skipped counts
    """
    rows = parse_csv(text, GUEST_REQUIRED_COLUMNS, policy)
    groups = {group.name.lower(): group.group_id for group in store.list_groups(event_id)}
    result = ImportResult()

    for row in rows:
        if not row.get("first_name"):
            _skip(result, "missing_first_name")
            continue

        group_id = None
        group_name = row.get("group_name")
        if group_name:
            group_id = groups.get(group_name.lower())
            if group_id is None:
                group = store.add_group(GuestGroup(event_id=event_id, name=group_name))
                group_id = groups[group_name.lower()] = group.group_id

        email = row.get("email")
        if email and store.guest_email_exists(event_id, email):
            _skip(result, "duplicate_email")
            continue

        store.add_guest(
            Guest(
                event_id=event_id,
                first_name=row["first_name"],
                last_name=row.get("last_name"),
                email=email,
                phone=row.get("phone"),
                group_id=group_id,
                plus_one_allowed=_is_truthy(row.get("plus_one_allowed")),
                source=GuestSource.IMPORTED,
            ),
            created_at=now,
        )
        result.imported += 1

    guests_imported_total.labels(source="guests_csv").inc(result.imported)
    logger.info(
        "Guest CSV imported",
        event_id=event_id,
        imported=result.imported,
        skipped=result.skipped,
    )
    return result


def import_families(
    store: ImportStore,
    event_id: str,
    text: str,
    now: datetime,
    policy: PlanningPolicy | None = None,
) -> ImportResult:
    """
    Create families and their members from a family CSV

    One row per member. Columns: family_name, family_side (bride or groom)
    and member_name are required; primary_contact_name,
    primary_contact_phone, is_outstation, rooms_required, pickup_required
    are read from the first row of each family; is_elderly and is_child
    per member. member_name splits on the first space into first and last
    name.

    Returns:
        ImportResult with members imported, rows skipped and families created
    """
    rows = parse_csv(text, FAMILY_REQUIRED_COLUMNS, policy)
    families = {
        family.family_name.strip().lower(): family for family in store.list_families(event_id)
    }
    result = ImportResult()

    for row in rows:
        family_name = row.get("family_name")
        side = row.get("family_side")
        member_name = row.get("member_name")
        if not family_name or not side or not member_name:
            _skip(result, "missing_family_field")
            continue

        side = side.lower()
        if side not in (FamilySide.BRIDE.value, FamilySide.GROOM.value):
            _skip(result, "invalid_family_side")
            continue

        family = families.get(family_name.lower())
        if family is None:
            rooms = row.get("rooms_required")
            family = store.add_family(
                Family(
                    event_id=event_id,
                    family_name=family_name,
                    family_side=FamilySide(side),
                    primary_contact_name=row.get("primary_contact_name"),
                    primary_contact_phone=row.get("primary_contact_phone"),
                    is_outstation=_is_truthy(row.get("is_outstation")),
                    rooms_required=int(rooms) if rooms and rooms.isdigit() else 0,
                    pickup_required=_is_truthy(row.get("pickup_required")),
                )
            )
            families[family_name.lower()] = family
            result.families_created += 1

        first_name, _, last_name = member_name.partition(" ")
        store.add_guest(
            Guest(
                event_id=event_id,
                first_name=first_name,
                last_name=last_name.strip() or None,
                rsvp_status=RsvpStatus.PENDING,
                is_outstation=family.is_outstation,
                needs_room=family.is_outstation and family.rooms_required > 0,
                needs_pickup=family.pickup_required,
                is_elderly=_is_truthy(row.get("is_elderly")),
                is_child=_is_truthy(row.get("is_child")),
                family_group=family.family_name,
                family_side=family.family_side,
                source=GuestSource.FAMILY,
            ),
            created_at=now,
        )
        result.imported += 1

    guests_imported_total.labels(source="families_csv").inc(result.imported)
    logger.info(
        "Family CSV imported",
        event_id=event_id,
        imported=result.imported,
        skipped=result.skipped,
        families_created=result.families_created,
    )
    return result
