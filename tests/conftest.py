"""
Pytest configuration and shared fixtures.

Tests run against a throwaway SQLite file per test (aiosqlite).
"""

import os

# Must be set before app.core.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid

import pytest
import pytest_asyncio

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import build_engine, build_session_maker


@pytest_asyncio.fixture
async def engine(tmp_path):
    db_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def workspace_id():
    return uuid.uuid4()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)
