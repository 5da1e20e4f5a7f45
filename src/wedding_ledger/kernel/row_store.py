"""
SQLite Row Store - Persistence for events, budget entries and guests

The store is the data-access boundary: rows go in as typed models and come
back out validated, so NULL amounts and flags are already defaulted before
any aggregation code sees them.

Schema:
- events: one row per planned event, with its budget ceiling and rates
- budget_entries: planned/committed/paid amounts per vendor
- guests: invitees with RSVP state and logistics flags
- guest_groups: named guest buckets, unique per event ignoring case
- families: household rows created by family imports
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any

from wedding_ledger.budget.models import BudgetEntry
from wedding_ledger.events.models import EventListing, WeddingEvent
from wedding_ledger.guests.models import Family, Guest, GuestGroup, RateConfig
from wedding_ledger.kernel.errors import StoreError
from wedding_ledger.kernel.ids import generate_id
from wedding_ledger.kernel.retry import retry_on_sqlite_lock

GUEST_COLUMNS = (
    "guest_id",
    "event_id",
    "first_name",
    "last_name",
    "email",
    "phone",
    "rsvp_status",
    "rsvp_updated_at",
    "is_outstation",
    "needs_room",
    "needs_pickup",
    "room_assigned",
    "pickup_assigned",
    "is_vip",
    "is_elderly",
    "is_child",
    "family_group",
    "family_side",
    "group_id",
    "plus_one_allowed",
    "source",
)

BUDGET_COLUMNS = (
    "entry_id",
    "event_id",
    "category",
    "planned_amount",
    "committed_amount",
    "paid_amount",
    "vendor_id",
    "description",
)


def _to_text(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class SQLiteRowStore:
    """
    SQLite-based row store

    Uses WAL mode so dashboard reads do not block importers. Every write is
    its own short transaction and is retried on lock contention.
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize row store with SQLite database

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._initialize_schema()

    def _initialize_schema(self) -> None:
        """Create tables and indices if they don't exist"""
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    event_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    event_date TEXT,
                    rsvp_cutoff TEXT,
                    total_budget INTEGER NOT NULL DEFAULT 0,
                    catering_per_head INTEGER NOT NULL DEFAULT 0,
                    room_cost_per_night INTEGER NOT NULL DEFAULT 0,
                    transport_cost_per_seat INTEGER NOT NULL DEFAULT 0,
                    guests_per_room INTEGER NOT NULL DEFAULT 2,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS budget_entries (
                    entry_id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    category TEXT,
                    planned_amount INTEGER,
                    committed_amount INTEGER,
                    paid_amount INTEGER,
                    vendor_id TEXT,
                    description TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS guests (
                    guest_id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    first_name TEXT NOT NULL,
                    last_name TEXT,
                    email TEXT,
                    phone TEXT,
                    rsvp_status TEXT,
                    rsvp_updated_at TEXT,
                    is_outstation INTEGER,
                    needs_room INTEGER,
                    needs_pickup INTEGER,
                    room_assigned INTEGER,
                    pickup_assigned INTEGER,
                    is_vip INTEGER,
                    is_elderly INTEGER,
                    is_child INTEGER,
                    family_group TEXT,
                    family_side TEXT,
                    group_id TEXT,
                    plus_one_allowed INTEGER,
                    source TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS guest_groups (
                    group_id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    group_type TEXT NOT NULL DEFAULT 'other'
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS families (
                    family_id TEXT PRIMARY KEY,
                    event_id TEXT NOT NULL,
                    family_name TEXT NOT NULL,
                    family_side TEXT NOT NULL,
                    primary_contact_name TEXT,
                    primary_contact_phone TEXT,
                    is_outstation INTEGER,
                    rooms_required INTEGER,
                    pickup_required INTEGER
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_budget_event ON budget_entries(event_id)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_guests_event ON guests(event_id)")
            # No unique constraint on email: imports dedup with a read-then-insert
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_guests_email ON guests(event_id, email)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_groups_event ON guest_groups(event_id)"
            )

            conn.commit()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _write(self, sql: str, params: tuple[Any, ...]) -> int:
        """Run one write statement in its own transaction, returning rowcount"""
        with self._connect() as conn:
            try:
                cursor = conn.execute(sql, params)
                conn.commit()
                return cursor.rowcount
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise StoreError(f"Write rejected: {e}") from e

    def ping(self) -> bool:
        """Check the database answers a trivial query"""
        try:
            with self._connect() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error:
            return False

    def count_rows(self) -> dict[str, int]:
        """Row counts per table (for health checks)"""
        with self._connect() as conn:
            return {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
                for table in ("events", "budget_entries", "guests", "guest_groups", "families")
            }

    # Events

    @retry_on_sqlite_lock()
    def add_event(self, event: WeddingEvent) -> WeddingEvent:
        self._write(
            """
            INSERT INTO events (
                event_id, name, event_date, rsvp_cutoff, total_budget,
                catering_per_head, room_cost_per_night, transport_cost_per_seat,
                guests_per_room, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.event_id,
                event.name,
                _to_text(event.event_date),
                _to_text(event.rsvp_cutoff),
                event.total_budget,
                event.rates.catering_per_head,
                event.rates.room_cost_per_night,
                event.rates.transport_cost_per_seat,
                event.rates.guests_per_room,
                _to_text(event.created_at),
            ),
        )
        return event

    @retry_on_sqlite_lock()
    def update_event(self, event: WeddingEvent) -> WeddingEvent:
        self._write(
            """
            UPDATE events SET
                name = ?, event_date = ?, rsvp_cutoff = ?, total_budget = ?,
                catering_per_head = ?, room_cost_per_night = ?,
                transport_cost_per_seat = ?, guests_per_room = ?
            WHERE event_id = ?
            """,
            (
                event.name,
                _to_text(event.event_date),
                _to_text(event.rsvp_cutoff),
                event.total_budget,
                event.rates.catering_per_head,
                event.rates.room_cost_per_night,
                event.rates.transport_cost_per_seat,
                event.rates.guests_per_room,
                event.event_id,
            ),
        )
        return event

    def get_event(self, event_id: str) -> WeddingEvent | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM events WHERE event_id = ?", (event_id,)
            ).fetchone()
        return self._row_to_event(row) if row else None

    def list_events(self) -> list[EventListing]:
        """All events with guest and budget entry counts, oldest first"""
        with self._connect() as conn:
            rows = conn.execute("""
                SELECT e.event_id, e.name, e.event_date, e.total_budget, e.created_at,
                    (SELECT COUNT(*) FROM guests g WHERE g.event_id = e.event_id)
                        AS guest_count,
                    (SELECT COUNT(*) FROM budget_entries b WHERE b.event_id = e.event_id)
                        AS budget_entry_count
                FROM events e
                ORDER BY e.created_at, e.event_id
            """).fetchall()
        return [EventListing.model_validate(dict(row)) for row in rows]

    def _row_to_event(self, row: sqlite3.Row) -> WeddingEvent:
        return WeddingEvent(
            event_id=row["event_id"],
            name=row["name"],
            event_date=row["event_date"],
            rsvp_cutoff=row["rsvp_cutoff"],
            total_budget=row["total_budget"] or 0,
            rates=RateConfig(
                catering_per_head=row["catering_per_head"] or 0,
                room_cost_per_night=row["room_cost_per_night"] or 0,
                transport_cost_per_seat=row["transport_cost_per_seat"] or 0,
                guests_per_room=row["guests_per_room"] or 2,
            ),
            created_at=row["created_at"],
        )

    # Budget entries

    @retry_on_sqlite_lock()
    def add_budget_entry(self, entry: BudgetEntry, created_at: datetime) -> BudgetEntry:
        if entry.entry_id is None:
            entry = entry.model_copy(update={"entry_id": generate_id("bud")})
        self._write(
            f"""
            INSERT INTO budget_entries ({", ".join(BUDGET_COLUMNS)}, created_at)
            VALUES ({", ".join("?" * len(BUDGET_COLUMNS))}, ?)
            """,
            self._budget_params(entry) + (_to_text(created_at),),
        )
        return entry

    @retry_on_sqlite_lock()
    def update_budget_entry(self, entry: BudgetEntry) -> BudgetEntry:
        assignments = ", ".join(f"{col} = ?" for col in BUDGET_COLUMNS[1:])
        self._write(
            f"UPDATE budget_entries SET {assignments} WHERE entry_id = ?",
            self._budget_params(entry)[1:] + (entry.entry_id,),
        )
        return entry

    def get_budget_entry(self, entry_id: str) -> BudgetEntry | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM budget_entries WHERE entry_id = ?", (entry_id,)
            ).fetchone()
        return BudgetEntry.model_validate(dict(row)) if row else None

    def list_budget_entries(self, event_id: str) -> list[BudgetEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM budget_entries WHERE event_id = ? ORDER BY created_at, entry_id",
                (event_id,),
            ).fetchall()
        return [BudgetEntry.model_validate(dict(row)) for row in rows]

    def list_vendor_entries(self, event_id: str, vendor_id: str) -> list[BudgetEntry]:
        return [e for e in self.list_budget_entries(event_id) if e.vendor_id == vendor_id]

    @staticmethod
    def _budget_params(entry: BudgetEntry) -> tuple[Any, ...]:
        return (
            entry.entry_id,
            entry.event_id,
            entry.category.value,
            entry.planned_amount,
            entry.committed_amount,
            entry.paid_amount,
            entry.vendor_id,
            entry.description,
        )

    # Guests

    @retry_on_sqlite_lock()
    def add_guest(self, guest: Guest, created_at: datetime) -> Guest:
        if guest.guest_id is None:
            guest = guest.model_copy(update={"guest_id": generate_id("gst")})
        self._write(
            f"""
            INSERT INTO guests ({", ".join(GUEST_COLUMNS)}, created_at)
            VALUES ({", ".join("?" * len(GUEST_COLUMNS))}, ?)
            """,
            self._guest_params(guest) + (_to_text(created_at),),
        )
        return guest

    @retry_on_sqlite_lock()
    def update_guest(self, guest: Guest) -> Guest:
        assignments = ", ".join(f"{col} = ?" for col in GUEST_COLUMNS[1:])
        self._write(
            f"UPDATE guests SET {assignments} WHERE guest_id = ?",
            self._guest_params(guest)[1:] + (guest.guest_id,),
        )
        return guest

    def get_guest(self, guest_id: str) -> Guest | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM guests WHERE guest_id = ?", (guest_id,)).fetchone()
        return Guest.model_validate(dict(row)) if row else None

    def list_guests(self, event_id: str) -> list[Guest]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM guests WHERE event_id = ? ORDER BY created_at, guest_id",
                (event_id,),
            ).fetchall()
        return [Guest.model_validate(dict(row)) for row in rows]

    def guest_email_exists(self, event_id: str, email: str) -> bool:
        """Case-sensitive match, as stored"""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM guests WHERE event_id = ? AND email = ? LIMIT 1",
                (event_id, email),
            ).fetchone()
        return row is not None

    @staticmethod
    def _guest_params(guest: Guest) -> tuple[Any, ...]:
        return (
            guest.guest_id,
            guest.event_id,
            guest.first_name,
            guest.last_name,
            guest.email,
            guest.phone,
            guest.rsvp_status.value,
            _to_text(guest.rsvp_updated_at),
            guest.is_outstation,
            guest.needs_room,
            guest.needs_pickup,
            guest.room_assigned,
            guest.pickup_assigned,
            guest.is_vip,
            guest.is_elderly,
            guest.is_child,
            guest.family_group,
            guest.family_side.value if guest.family_side else None,
            guest.group_id,
            guest.plus_one_allowed,
            guest.source.value,
        )

    # Groups and families

    def list_groups(self, event_id: str) -> list[GuestGroup]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM guest_groups WHERE event_id = ? ORDER BY name", (event_id,)
            ).fetchall()
        return [GuestGroup.model_validate(dict(row)) for row in rows]

    @retry_on_sqlite_lock()
    def add_group(self, group: GuestGroup) -> GuestGroup:
        if group.group_id is None:
            group = group.model_copy(update={"group_id": generate_id("grp")})
        self._write(
            "INSERT INTO guest_groups (group_id, event_id, name, group_type) VALUES (?, ?, ?, ?)",
            (group.group_id, group.event_id, group.name, group.group_type),
        )
        return group

    def list_families(self, event_id: str) -> list[Family]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM families WHERE event_id = ? ORDER BY family_name", (event_id,)
            ).fetchall()
        return [Family.model_validate(dict(row)) for row in rows]

    @retry_on_sqlite_lock()
    def add_family(self, family: Family) -> Family:
        if family.family_id is None:
            family = family.model_copy(update={"family_id": generate_id("fam")})
        self._write(
            """
            INSERT INTO families (
                family_id, event_id, family_name, family_side, primary_contact_name,
                primary_contact_phone, is_outstation, rooms_required, pickup_required
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                family.family_id,
                family.event_id,
                family.family_name,
                family.family_side.value,
                family.primary_contact_name,
                family.primary_contact_phone,
                family.is_outstation,
                family.rooms_required,
                family.pickup_required,
            ),
        )
        return family
