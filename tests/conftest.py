"""Pytest configuration and fixtures.

Each test gets its own SQLite database file so that cascade deletes and
concurrent profile reads behave as they do against a real server.
"""

import os

os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import datetime

import pytest
import pytest_asyncio

from biodata.config import DatabaseSettings
from biodata.db import build_engine, build_sessionmaker
from biodata.handlers.experts import create_expert
from biodata.models import Base
from biodata.schemas import CreateExpertRequest


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Create a fresh database with all tables."""
    test_engine = build_engine(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'biodata.db'}"))
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def expert_data():
    """Valid expert input."""
    return {
        "full_name": "Alice Carter",
        "place_of_birth": "Boston",
        "date_of_birth": datetime(1985, 5, 15),
        "address": "12 Harbor Rd, Boston",
        "email": "alice.carter@example.com",
        "phone_number": "+1-555-0100",
    }


@pytest.fixture
def make_expert(session, expert_data):
    """Create an expert through the handler, overriding any input field."""

    async def _make(**overrides):
        return await create_expert(session, CreateExpertRequest(**{**expert_data, **overrides}))

    return _make
