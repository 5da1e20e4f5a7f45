"""
Pytest configuration and shared fixtures
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from wedding_ledger.guests.models import RateConfig
from wedding_ledger.kernel.planning_policy import PlanningPolicy
from wedding_ledger.kernel.row_store import SQLiteRowStore
from wedding_ledger.kernel.time import TestTimeProvider
from wedding_ledger.ledger import WeddingLedger


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    for suffix in ("", "-wal", "-shm"):
        path = Path(f"{db_path}{suffix}")
        if path.exists():
            path.unlink()


@pytest.fixture
def row_store(temp_db: Path) -> SQLiteRowStore:
    """Provide a fresh row store for each test"""
    return SQLiteRowStore(temp_db)


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2026-11-01 09:00 UTC, six weeks before the sample wedding.
    """
    return TestTimeProvider(datetime(2026, 11, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def planning_policy() -> PlanningPolicy:
    """Provide the default planning policy"""
    return PlanningPolicy()


@pytest.fixture
def rates() -> RateConfig:
    """Round-number rates in paise: 1500 / 4000 / 500 rupees"""
    return RateConfig(
        catering_per_head=150_000,
        room_cost_per_night=400_000,
        transport_cost_per_seat=50_000,
        guests_per_room=2,
    )


@pytest.fixture
def ledger(temp_db: Path, test_time: TestTimeProvider, planning_policy: PlanningPolicy) -> WeddingLedger:
    """Provide a ledger on a fresh database with a frozen clock"""
    return WeddingLedger(temp_db, policy=planning_policy, time_provider=test_time)

