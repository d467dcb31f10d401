"""
Pytest Configuration and Fixtures for GuildStay Tests
=====================================================

Purpose
-------
Centralized test fixtures for the GuildStay test suite. Provides a real
database per test, model factories, and mocks.

Responsibilities
----------------
- File-backed SQLite database through DatabaseService (aiosqlite driver)
- Model factory fixture (see tests/helpers.py)
- Mock fixtures for unit tests

Architecture Notes
------------------
- Unit tests use mocks (fast, isolated)
- Integration tests use a fresh SQLite file per test (clean slate)
- PostgreSQL-only behavior is covered by testcontainers in
  tests/integration/test_postgres_race.py
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncGenerator, Type

import pytest
import pytest_asyncio

from guildstay.core.config.config import Config
from guildstay.core.database.service import DatabaseService
from guildstay.core.logging.logger import get_logger
from tests.helpers import DataFactory

logger = get_logger(__name__)


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["ENVIRONMENT"] = "testing"
    Config.load()


# ============================================================================
# DATABASE FIXTURES (Integration Tests)
# ============================================================================


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Type[DatabaseService], None]:
    """
    Initialize DatabaseService against a fresh SQLite file.

    Scope: function (new database per test, clean slate)
    Uses: Integration tests that go through services and repositories
    """
    url = f"sqlite+aiosqlite:///{tmp_path / 'guildstay.db'}"
    logger.info("Creating test database: %s", url)

    await DatabaseService.shutdown()
    await DatabaseService.initialize(url)
    await DatabaseService.create_schema()

    yield DatabaseService

    await DatabaseService.shutdown()


@pytest_asyncio.fixture
async def db_session(database):
    """
    Read-only session on the test database.

    Scope: function
    Uses: Repository tests
    """
    async with database.get_session() as session:
        yield session


@pytest.fixture
def factory(database) -> DataFactory:
    """
    Model factory bound to the test database.

    Scope: function
    Uses: Integration tests that need seeded rows
    """
    return DataFactory(database)


# ============================================================================
# MOCK FIXTURES (Unit Tests)
# ============================================================================


@pytest.fixture
def mock_database_service(mocker):
    """
    Mock DatabaseService for unit tests.

    get_session() and get_transaction() yield the same MagicMock session;
    repositories are expected to be mocked as well.
    """
    session = mocker.MagicMock(name="session")

    context = mocker.MagicMock()
    context.__aenter__ = mocker.AsyncMock(return_value=session)
    context.__aexit__ = mocker.AsyncMock(return_value=False)

    mock_service = mocker.MagicMock()
    mock_service.get_session = mocker.MagicMock(return_value=context)
    mock_service.get_transaction = mocker.MagicMock(return_value=context)
    mock_service.session = session
    return mock_service
