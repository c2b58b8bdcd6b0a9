"""Shared fixtures for the stats pipeline tests."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from divbot.database.database import Database
from divbot.services.name_cache import NameCacheService

from helpers import NOW, FakeClock, make_ticket


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def valid_ticket():
    return make_ticket(NOW + timedelta(hours=2), "valid")


@pytest.fixture
def session_manager(valid_ticket):
    manager = MagicMock()
    manager.ensure_valid = AsyncMock(return_value=valid_ticket)
    return manager


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'names.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def name_cache(database):
    return NameCacheService(database.session_factory)
