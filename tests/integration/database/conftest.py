# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Tests run against a throwaway SQLite file per test (foreign keys enabled by
``build_engine``). Set ``TEST_DATABASE_URL`` to run them against PostgreSQL
instead; the schema is dropped and recreated around each test.
"""

import os
from pathlib import Path
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.infrastructure.database.client import LMSClient
from src.infrastructure.database.connection import build_engine, create_schema, drop_schema


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """Database URL for one test."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'coursebase_test.db'}",
    )


@pytest.fixture
def empty_db_url(tmp_path: Path) -> str:
    """URL of a database without any tables, for migration tests."""
    return f"sqlite+aiosqlite:///{tmp_path / 'coursebase_migrations.db'}"


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str):
    """Create async engine with a freshly created schema."""
    engine = build_engine(db_url)

    await drop_schema(engine)
    await create_schema(engine)

    yield engine

    await drop_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for database tests."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def client(db_session: AsyncSession) -> LMSClient:
    """Client bound to the test session."""
    return LMSClient(db_session)


@pytest_asyncio.fixture
async def user(client: LMSClient, sample_user_data: dict[str, Any]):
    """A committed user."""
    created = await client.users.create(**sample_user_data)
    await client.commit()
    return created


@pytest_asyncio.fixture
async def course_tree(client: LMSClient, user, sample_course_data: dict[str, Any]) -> dict:
    """A course with one module, one lesson, one assessment and one question.

    Committed, so a constraint failure later in the test does not roll the
    tree back.
    """
    course = await client.courses.create(instructor_id=user.id, **sample_course_data)
    module = await client.modules.create(course_id=course.id, title="Keys", position=0)
    lesson = await client.lessons.create(module_id=module.id, title="Primary keys", position=0)
    assessment = await client.assessments.create(module_id=module.id, title="Keys quiz")
    question = await client.questions.create(
        assessment_id=assessment.id,
        question_text="Can a primary key be NULL?",
        question_type="true_false",
        correct_answer="false",
    )
    await client.commit()
    return {
        "course": course,
        "module": module,
        "lesson": lesson,
        "assessment": assessment,
        "question": question,
    }
