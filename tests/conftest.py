"""
Shared test fixtures for the token manager.

This module provides database setup, token configuration, a controllable
clock and token stores for both backends.
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from token_manager_core.config import TokenManagerConfig, reset_config
from token_manager_core.db import (
    DatabaseConfig,
    DatabaseManager,
    import_all_models,
)
from token_manager_core.db.db_config import Base, initialize_db
from token_manager_core.repositories import InMemoryTokenRepository, SQLTokenRepository
from token_manager_core.services import TokenManager
from token_manager_core.utils.logger import reset_logging


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture(autouse=True)
def clean_globals():
    """Reset the global configuration and logger around each test."""
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(
        connection_string="sqlite:///:memory:",
        echo=False,
        development_mode=True,
    )


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with the token table."""
    import_all_models()
    return initialize_db(db_config)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after every test so that rows
    committed by the repository do not leak between tests.
    """
    session = db_manager.get_session()
    Base.metadata.create_all(db_manager.engine)

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(db_manager.engine)


@pytest.fixture
def token_config() -> TokenManagerConfig:
    """Token configuration with a few recognized types."""
    return TokenManagerConfig(
        types=["email_validation", "password_recovery", "pin"],
        default_code_length=8,
    )


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at a fixed UTC instant."""
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def memory_store() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture
def sql_store(db_session) -> SQLTokenRepository:
    return SQLTokenRepository(session=db_session)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each backend in turn."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sql_store")


@pytest.fixture
def token_manager(token_config, store, clock) -> TokenManager:
    """Token manager over each backend, driven by the frozen clock."""
    return TokenManager(token_config, store, clock=clock)
