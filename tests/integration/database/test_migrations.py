# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for database migrations.

Migrations are applied to an empty SQLite file through the programmatic
runner and the result is compared with the model metadata.
"""

import json
import logging

import pytest
import structlog
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from src.core.config.settings import Settings
from src.infrastructure.database.connection import build_engine
from src.infrastructure.database.migrations.runner import (
    MIGRATIONS,
    check_migrations_pending,
    get_migration_status,
    rollback_migrations,
    run_migrations,
)
from src.infrastructure.database.models import SCHEMA_TABLES, Base
from src.utils.logging import LOG_HANDLER_NAME, setup_logging

pytestmark = pytest.mark.integration


async def _inspect(db_url: str, fn):
    engine = build_engine(db_url)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(lambda sync_conn: fn(inspect(sync_conn)))
    finally:
        await engine.dispose()


class TestRunMigrations:
    """Test applying migrations."""

    @pytest.mark.asyncio
    async def test_applies_all_migrations(self, empty_db_url):
        applied = await run_migrations(empty_db_url)

        assert applied == MIGRATIONS

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, empty_db_url):
        await run_migrations(empty_db_url)

        assert await run_migrations(empty_db_url) == []

    @pytest.mark.asyncio
    async def test_creates_every_table(self, empty_db_url):
        await run_migrations(empty_db_url)

        tables = await _inspect(empty_db_url, lambda insp: set(insp.get_table_names()))

        assert set(SCHEMA_TABLES) <= tables
        assert set(Base.metadata.tables) <= tables

    @pytest.mark.asyncio
    async def test_columns_match_models(self, empty_db_url):
        await run_migrations(empty_db_url)

        def columns(insp):
            return {
                name: {col["name"] for col in insp.get_columns(name)} for name in SCHEMA_TABLES
            }

        migrated = await _inspect(empty_db_url, columns)

        for name, table in Base.metadata.tables.items():
            assert migrated[name] == {col.name for col in table.columns}, name

    @pytest.mark.asyncio
    async def test_indexes_match_models(self, empty_db_url):
        await run_migrations(empty_db_url)

        def indexes(insp):
            return {idx["name"] for name in SCHEMA_TABLES for idx in insp.get_indexes(name)}

        migrated = await _inspect(empty_db_url, indexes)
        declared = {idx.name for table in Base.metadata.tables.values() for idx in table.indexes}

        assert declared <= migrated

    @pytest.mark.asyncio
    async def test_foreign_keys_match_models(self, empty_db_url):
        await run_migrations(empty_db_url)

        def foreign_keys(insp):
            return {
                (
                    name,
                    tuple(fk["constrained_columns"]),
                    fk["referred_table"],
                    (fk["options"].get("ondelete") or "NO ACTION").upper(),
                )
                for name in SCHEMA_TABLES
                for fk in insp.get_foreign_keys(name)
            }

        migrated = await _inspect(empty_db_url, foreign_keys)
        declared = {
            (
                name,
                tuple(col.name for col in fk.columns),
                fk.referred_table.name,
                (fk.ondelete or "NO ACTION").upper(),
            )
            for name, table in Base.metadata.tables.items()
            for fk in table.foreign_key_constraints
        }

        assert migrated == declared
        assert ("courses", ("instructor_id",), "users", "SET NULL") in migrated
        assert ("comments", ("parent_id",), "comments", "CASCADE") in migrated

    @pytest.mark.asyncio
    async def test_unique_columns_match_models(self, empty_db_url):
        await run_migrations(empty_db_url)

        def unique_columns(insp):
            found = set()
            for name in SCHEMA_TABLES:
                for uc in insp.get_unique_constraints(name):
                    found.add((name, tuple(uc["column_names"])))
                for idx in insp.get_indexes(name):
                    if idx["unique"]:
                        found.add((name, tuple(idx["column_names"])))
            return found

        migrated = await _inspect(empty_db_url, unique_columns)
        declared = {
            (name, (col.name,))
            for name, table in Base.metadata.tables.items()
            for col in table.columns
            if col.unique
        } | {
            (name, tuple(col.name for col in idx.columns))
            for name, table in Base.metadata.tables.items()
            for idx in table.indexes
            if idx.unique
        }

        assert migrated == declared
        assert {
            ("users", ("username",)),
            ("users", ("email",)),
            ("certificates", ("certificate_id",)),
            ("categories", ("name",)),
        } <= migrated

    @pytest.mark.asyncio
    async def test_migrated_schema_delete_rules(self, empty_db_url):
        await run_migrations(empty_db_url)

        engine = build_engine(empty_db_url)
        try:
            async with engine.begin() as conn:
                for statement in (
                    "INSERT INTO users (id, username, email, password_hash) "
                    "VALUES (1, 'ada', 'ada@example.com', 'h')",
                    "INSERT INTO courses (id, title, description, instructor_id) "
                    "VALUES (1, 'T', 'D', 1)",
                    "INSERT INTO modules (id, course_id, title) VALUES (1, 1, 'M')",
                    "INSERT INTO lessons (id, module_id, title) VALUES (1, 1, 'L')",
                    "INSERT INTO users (id, username, email, password_hash) "
                    "VALUES (2, 'bob', 'bob@example.com', 'h')",
                    "INSERT INTO comments (id, lesson_id, user_id, content) "
                    "VALUES (1, 1, 2, 'Q')",
                    "INSERT INTO comments (id, lesson_id, user_id, content, parent_id) "
                    "VALUES (2, 1, 2, 'A', 1)",
                ):
                    await conn.execute(text(statement))

                await conn.execute(text("DELETE FROM users WHERE id = 1"))
                instructor = await conn.scalar(
                    text("SELECT instructor_id FROM courses WHERE id = 1")
                )
                await conn.execute(text("DELETE FROM comments WHERE id = 1"))
                replies = await conn.scalar(text("SELECT COUNT(*) FROM comments"))

            with pytest.raises(IntegrityError):
                async with engine.begin() as conn:
                    await conn.execute(
                        text(
                            "INSERT INTO users (username, email, password_hash) "
                            "VALUES ('bob', 'other@example.com', 'h')"
                        )
                    )
        finally:
            await engine.dispose()

        assert instructor is None
        assert replies == 0

    @pytest.mark.asyncio
    async def test_migrated_schema_enforces_domains(self, empty_db_url):
        await run_migrations(empty_db_url)

        engine = build_engine(empty_db_url)
        try:
            with pytest.raises(IntegrityError):
                async with engine.begin() as conn:
                    await conn.execute(
                        text(
                            "INSERT INTO users (username, email, password_hash, role) "
                            "VALUES ('x', 'x@example.com', 'h', 'superuser')"
                        )
                    )
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_migrated_schema_cascades(self, empty_db_url):
        await run_migrations(empty_db_url)

        engine = build_engine(empty_db_url)
        try:
            async with engine.begin() as conn:
                await conn.execute(
                    text("INSERT INTO courses (id, title, description) VALUES (1, 'T', 'D')")
                )
                await conn.execute(
                    text("INSERT INTO modules (id, course_id, title) VALUES (1, 1, 'M')")
                )
                await conn.execute(text("DELETE FROM courses WHERE id = 1"))
                remaining = await conn.scalar(text("SELECT COUNT(*) FROM modules"))
        finally:
            await engine.dispose()

        assert remaining == 0


class TestMigrationStatus:
    """Test status reporting and rollback."""

    @pytest.mark.asyncio
    async def test_pending_on_empty_database(self, empty_db_url):
        assert await check_migrations_pending(empty_db_url) is True

    @pytest.mark.asyncio
    async def test_status_after_upgrade(self, empty_db_url):
        await run_migrations(empty_db_url)

        status = await get_migration_status(empty_db_url)

        assert status["current_version"] == MIGRATIONS[-1]
        assert status["is_up_to_date"] is True
        assert status["pending_count"] == 0
        assert await check_migrations_pending(empty_db_url) is False

    @pytest.mark.asyncio
    async def test_rollback_drops_tables(self, empty_db_url):
        await run_migrations(empty_db_url)

        reverted = await rollback_migrations(empty_db_url)

        assert reverted == [MIGRATIONS[-1]]
        tables = await _inspect(empty_db_url, lambda insp: set(insp.get_table_names()))
        assert not set(SCHEMA_TABLES) & tables
        status = await get_migration_status(empty_db_url)
        assert status["current_version"] is None

    @pytest.mark.asyncio
    async def test_rollback_on_empty_database(self, empty_db_url):
        assert await rollback_migrations(empty_db_url) == []


class TestMigrationLogging:
    """Runner log lines carry the revision being applied."""

    @pytest.fixture
    def json_logging(self, capsys):
        setup_logging(
            Settings(  # type: ignore[call-arg]
                _env_file=None, environment="staging", debug=False, log_level="INFO"
            )
        )
        yield
        root = logging.getLogger()
        for handler in [h for h in root.handlers if h.get_name() == LOG_HANDLER_NAME]:
            root.removeHandler(handler)
        structlog.reset_defaults()

    @pytest.mark.asyncio
    async def test_applied_revision_is_bound(self, empty_db_url, json_logging, capsys):
        await run_migrations(empty_db_url)

        events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        applied = [e for e in events if e["event"].startswith("Applied migration")]

        assert len(applied) == len(MIGRATIONS)
        assert applied[0]["revision"] == MIGRATIONS[0]
        assert applied[0]["backend"] == "sqlite"
        assert all("revision" not in e for e in events if e["event"] == "No pending migrations")
