# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the connection lifecycle."""

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import select, text

from src.core.config.settings import DatabaseSettings, Settings
from src.infrastructure.database import connection
from src.infrastructure.database.connection import (
    build_engine,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.database.errors import DatabaseError, UniqueViolationError
from src.infrastructure.database.models import Category


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        database=DatabaseSettings(dsn=f"sqlite+aiosqlite:///{tmp_path / 'conn.db'}"),
    )


@pytest_asyncio.fixture
async def initialized(sqlite_settings):
    """Initialize the module-level engine and create the schema."""
    await init_database(sqlite_settings)
    await create_schema()
    yield
    await close_database()


class TestUninitialized:
    """Access before init_database."""

    def test_get_engine_raises(self) -> None:
        with pytest.raises(DatabaseError, match="not initialized"):
            get_engine()

    def test_get_sessionmaker_raises(self) -> None:
        with pytest.raises(DatabaseError, match="not initialized"):
            get_sessionmaker()

    @pytest.mark.asyncio
    async def test_check_connection_false(self) -> None:
        assert await check_database_connection() is False

    @pytest.mark.asyncio
    async def test_close_is_noop(self) -> None:
        await close_database()

        assert connection._engine is None


class TestBuildEngine:
    """Engine construction."""

    @pytest.mark.asyncio
    async def test_sqlite_enables_foreign_keys(self, tmp_path: Path) -> None:
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'fk.db'}")
        try:
            async with engine.connect() as conn:
                enabled = await conn.scalar(text("PRAGMA foreign_keys"))
        finally:
            await engine.dispose()

        assert enabled == 1

    def test_postgres_pool_options(self) -> None:
        engine = build_engine(
            "postgresql+asyncpg://u:p@localhost/db", pool_size=3, max_overflow=1
        )

        assert engine.pool.size() == 3
        assert engine.dialect.name == "postgresql"


class TestSessionLifecycle:
    """get_session commit / rollback behaviour."""

    @pytest.mark.asyncio
    async def test_check_connection_true(self, initialized) -> None:
        assert await check_database_connection() is True

    @pytest.mark.asyncio
    async def test_commits_on_success(self, initialized) -> None:
        async with get_session() as session:
            session.add(Category(name="Sales"))

        async with get_session() as session:
            names = (await session.execute(select(Category.name))).scalars().all()

        assert names == ["Sales"]

    @pytest.mark.asyncio
    async def test_translates_integrity_error_on_commit(self, initialized) -> None:
        async with get_session() as session:
            session.add(Category(name="Sales"))

        with pytest.raises(UniqueViolationError):
            async with get_session() as session:
                session.add(Category(name="Sales"))

    @pytest.mark.asyncio
    async def test_rolls_back_on_exception(self, initialized) -> None:
        with pytest.raises(RuntimeError):
            async with get_session() as session:
                session.add(Category(name="Leadership"))
                await session.flush()
                raise RuntimeError("boom")

        async with get_session() as session:
            count = len((await session.execute(select(Category))).scalars().all())

        assert count == 0
