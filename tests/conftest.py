"""Shared test fixtures for GumTaperBot tests.

- Database isolation with a temporary SQLite file
- Fake alarm facility and in-memory profile store
- Standard test profile

Usage:
    def test_something(fake_alarms, memory_store):
        ...
"""

import datetime as dt
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# Must be set before gum_taper_bot.dataproviders.db is imported anywhere.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="gum_taper_bot_"))
os.environ.setdefault("GT_DB_FILENAME", str(_TMP_DIR / "test.db"))

from gum_taper_bot.core.entities.profile import UserProfile  # noqa: E402
from tests.fakes import FakeAlarmFacility, MemoryProfileStore  # noqa: E402


@pytest.fixture
def now() -> dt.datetime:
    return dt.datetime(2024, 3, 15, 12, 0)


@pytest.fixture
def profile(now: dt.datetime) -> UserProfile:
    return UserProfile(
        wake_up_time="07:00",
        sleep_time="22:00",
        quit_start=(now - dt.timedelta(days=2)).isoformat(timespec="seconds"),
        cigarettes_per_day=20,
        cigarette_price=15.5,
    )


@pytest.fixture
def fake_alarms() -> FakeAlarmFacility:
    return FakeAlarmFacility()


@pytest.fixture
def memory_store(profile: UserProfile) -> MemoryProfileStore:
    return MemoryProfileStore(profile)


@pytest.fixture
def sql_store() -> Generator:
    """Profile store on fresh tables, dropped after the test."""
    from gum_taper_bot.dataproviders.db import Base, engine, init_db
    from gum_taper_bot.dataproviders.repositories.profile_store import SqlAlchemyProfileStore

    init_db()
    yield SqlAlchemyProfileStore()
    Base.metadata.drop_all(bind=engine)
