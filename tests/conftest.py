from datetime import datetime, timezone

import pytest

from worldtimez.config.settings import Settings
from worldtimez.data.database import create_db_engine
from worldtimez.data.persistence import EntryStore
from worldtimez.data.store import SqlKeyValueStore


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite:///:memory:",
        default_timezone="Asia/Dhaka",
        color_scheme="light",
    )


@pytest.fixture
def backend() -> SqlKeyValueStore:
    return SqlKeyValueStore(create_db_engine("sqlite:///:memory:"))


@pytest.fixture
def store(backend, settings) -> EntryStore:
    return EntryStore(backend, settings=settings)


@pytest.fixture
def reference() -> datetime:
    return datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
