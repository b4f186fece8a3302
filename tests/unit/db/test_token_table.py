"""Tests for the token table and database configuration."""

import os
from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import MetaData, delete, insert, inspect, select

from token_manager_core.db import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    get_token_table,
    set_db_manager,
    tokens_table,
)
from token_manager_core.exceptions import ServiceError


class TestTokenTable:
    """Test the token table definition."""

    def test_default_table(self):
        assert tokens_table.name == "tokens"
        assert get_token_table() is tokens_table
        assert Base.metadata.tables["tokens"] is tokens_table

    def test_columns(self):
        assert [c.name for c in tokens_table.columns] == [
            "id",
            "entity_name",
            "entity_id",
            "code",
            "type",
            "behavior",
            "remaining_uses",
            "expiration_at",
            "created_at",
        ]
        assert tokens_table.c.remaining_uses.nullable
        assert not tokens_table.c.code.nullable

    def test_custom_table_name(self):
        metadata = MetaData()
        table = get_token_table("verification_codes", metadata=metadata)

        assert table.name == "verification_codes"
        assert get_token_table("verification_codes", metadata=metadata) is table
        assert {index.name for index in table.indexes} == {
            "ix_verification_codes_owner",
            "ix_verification_codes_code",
            "ix_verification_codes_expiration_at",
        }

    def test_table_is_created(self, db_manager, db_session):
        assert "tokens" in inspect(db_manager.engine).get_table_names()

    def test_timestamps_round_trip_as_utc(self, db_session):
        local = timezone(timedelta(hours=-5))
        created = datetime(2024, 1, 1, 7, 0, tzinfo=local)
        db_session.execute(
            insert(tokens_table).values(
                entity_name="users",
                entity_id=1,
                code="ABCD",
                type="pin",
                behavior="add",
                remaining_uses=None,
                expiration_at=created + timedelta(hours=1),
                created_at=created,
            )
        )

        row = db_session.execute(select(tokens_table)).mappings().one()
        assert row["created_at"] == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert row["created_at"].tzinfo is not None

    def test_sqlite_uses_autoincrement(self):
        assert tokens_table.dialect_options["sqlite"]["autoincrement"] is True

    def test_deleted_ids_are_not_reused(self, db_session):
        values = dict(
            entity_name="users",
            entity_id=1,
            code="ABCD",
            type="pin",
            behavior="add",
            expiration_at=datetime(2024, 1, 1, 13, 0, tzinfo=UTC),
            created_at=datetime(2024, 1, 1, 12, 0, tzinfo=UTC),
        )
        first = db_session.execute(insert(tokens_table).values(**values)).inserted_primary_key[0]
        db_session.execute(delete(tokens_table).where(tokens_table.c.id == first))
        second = db_session.execute(insert(tokens_table).values(**values)).inserted_primary_key[0]

        assert second > first


class TestDatabaseConfig:
    """Test DatabaseConfig connection settings."""

    def test_connection_string_from_env(self):
        with patch.dict(os.environ, {"DATABASE_URL": "sqlite:///./tokens.db"}):
            config = DatabaseConfig()
        assert config.connection_string == "sqlite:///./tokens.db"
        assert config.is_sqlite

    def test_defaults_to_in_memory_sqlite(self):
        with patch.dict(os.environ, {}, clear=True):
            config = DatabaseConfig()
        assert config.connection_string == "sqlite:///:memory:"
        assert config.development_mode is False

    def test_postgres_password_is_masked(self):
        config = DatabaseConfig(connection_string="postgresql://app:secret@db:5432/tokens_db")
        assert not config.is_sqlite
        assert "secret" not in repr(config)
        assert "app:***@db:5432/tokens_db" in repr(config)

    def test_postgres_engine_uses_pool_settings(self):
        config = DatabaseConfig(
            connection_string="postgresql://app:secret@db:5432/tokens_db",
            pool_size=3,
            max_overflow=1,
        )
        with patch("token_manager_core.db.db_config.create_engine") as create_engine:
            DatabaseManager(config)

        create_engine.assert_called_once_with(
            "postgresql://app:secret@db:5432/tokens_db",
            echo=False,
            pool_size=3,
            max_overflow=1,
            pool_pre_ping=True,
        )


class TestDatabaseManager:
    """Test the global database manager."""

    def test_initialized_manager_is_global(self, db_manager):
        assert get_db_manager() is db_manager

    def test_drop_tables_requires_development_mode(self, db_manager):
        db_manager.config.development_mode = False
        try:
            with pytest.raises(ServiceError, match="not in development mode"):
                db_manager.drop_tables()
        finally:
            db_manager.config.development_mode = True

    def test_close_db_clears_the_global_manager(self, db_manager):
        other = DatabaseManager(DatabaseConfig(connection_string="sqlite://"))
        set_db_manager(other)
        try:
            close_db()
            with pytest.raises(ServiceError, match="not initialized"):
                get_db_manager()
        finally:
            set_db_manager(db_manager)
