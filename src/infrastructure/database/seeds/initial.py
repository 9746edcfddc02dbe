# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial seed data.

This module provides seed data for a fresh database:
- Course categories
- Bootstrap administrator account
- A small sample course (optional)

Every step checks for existing rows first, so seeding twice does not
duplicate anything.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import (
    Assessment,
    Category,
    Course,
    CourseDifficulty,
    CourseStatus,
    Lesson,
    Module,
    Question,
    QuestionType,
    User,
    UserRole,
)
from src.utils.logging import log_context
from src.utils.password import PasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    "Compliance",
    "Leadership",
    "Onboarding",
    "Sales",
    "Technology",
)

SAMPLE_COURSE_TITLE = "Getting Started"


async def seed_categories(
    session: AsyncSession,
    names: tuple[str, ...] = DEFAULT_CATEGORIES,
) -> list[Category]:
    """Seed course categories that do not exist yet.

    Args:
        session: Database session.
        names: Category names to ensure.

    Returns:
        List of newly created categories.
    """
    result = await session.execute(select(Category.name).where(Category.name.in_(names)))
    existing = set(result.scalars().all())

    categories = []
    for name in names:
        if name in existing:
            continue
        category = Category(name=name)
        session.add(category)
        categories.append(category)

    await session.flush()
    logger.info("Seeded %d categories", len(categories))
    return categories


async def seed_admin_user(
    session: AsyncSession,
    username: str,
    email: str,
    password: str,
    hasher: Optional[PasswordHasher] = None,
) -> User:
    """Seed the bootstrap administrator.

    An existing user with the same username is returned unchanged.

    Args:
        session: Database session.
        username: Administrator username.
        email: Administrator email.
        password: Plain password; only its bcrypt hash is stored.
        hasher: Password hasher, defaults to PasswordHasher().

    Returns:
        The administrator user.
    """
    result = await session.execute(select(User).where(User.username == username))
    admin = result.scalar_one_or_none()
    if admin is not None:
        logger.info("Admin user already present: %s", username)
        return admin

    hasher = hasher or PasswordHasher()
    admin = User(
        username=username,
        email=email,
        password_hash=hasher.hash(password),
        name="Administrator",
        role=UserRole.ADMIN,
    )
    session.add(admin)
    await session.flush()

    logger.info("Seeded admin user: %s", username)
    return admin


async def seed_sample_course(session: AsyncSession, instructor: Optional[User] = None) -> Course:
    """Seed a demo course with one module, two lessons and a short quiz.

    Args:
        session: Database session.
        instructor: Optional course author.

    Returns:
        The sample course (existing or new).
    """
    result = await session.execute(select(Course).where(Course.title == SAMPLE_COURSE_TITLE))
    course = result.scalars().first()
    if course is not None:
        return course

    course = Course(
        title=SAMPLE_COURSE_TITLE,
        description="A short tour of the learning platform.",
        category="Onboarding",
        duration=30,
        difficulty=CourseDifficulty.BEGINNER,
        status=CourseStatus.PUBLISHED,
        instructor_id=instructor.id if instructor is not None else None,
    )
    session.add(course)
    await session.flush()

    module = Module(course_id=course.id, title="Welcome", position=0)
    session.add(module)
    await session.flush()

    session.add_all(
        [
            Lesson(
                module_id=module.id,
                title="How courses are organised",
                content="Courses are split into modules, and modules into lessons.",
                duration=10,
                position=0,
            ),
            Lesson(
                module_id=module.id,
                title="Tracking your progress",
                content="Each lesson you finish is recorded against your enrollment.",
                duration=10,
                position=1,
            ),
        ]
    )

    assessment = Assessment(
        module_id=module.id,
        title="Welcome quiz",
        description="Check what you learned in this module.",
        time_limit=10,
        passing_score=50,
    )
    session.add(assessment)
    await session.flush()

    session.add_all(
        [
            Question(
                assessment_id=assessment.id,
                question_text="What are modules made of?",
                question_type=QuestionType.MULTIPLE_CHOICE,
                options=["Lessons", "Courses", "Groups"],
                correct_answer="Lessons",
                points=1,
                position=0,
            ),
            Question(
                assessment_id=assessment.id,
                question_text="Finished lessons are recorded.",
                question_type=QuestionType.TRUE_FALSE,
                correct_answer="true",
                points=1,
                position=1,
            ),
        ]
    )
    await session.flush()

    logger.info("Seeded sample course: id=%s", course.id)
    return course


async def seed_database(
    session: AsyncSession,
    admin_username: str,
    admin_email: str,
    admin_password: str,
    include_sample_course: bool = True,
    hasher: Optional[PasswordHasher] = None,
) -> dict:
    """Seed a database with initial data and commit.

    Args:
        session: Database session.
        admin_username: Bootstrap administrator username.
        admin_email: Bootstrap administrator email.
        admin_password: Bootstrap administrator password.
        include_sample_course: Whether to create the demo course.
        hasher: Password hasher override.

    Returns:
        Dictionary with seeded entities.
    """
    with log_context(seed="initial"):
        logger.info("Seeding database...")

        categories = await seed_categories(session)
        admin = await seed_admin_user(
            session,
            username=admin_username,
            email=admin_email,
            password=admin_password,
            hasher=hasher,
        )

        result: dict = {"categories": categories, "admin": admin}

        if include_sample_course:
            result["course"] = await seed_sample_course(session, instructor=admin)

        await session.commit()

        logger.info("Database seeding complete")
    return result


if __name__ == "__main__":
    from src.core.config.settings import get_settings
    from src.infrastructure.database.connection import (
        close_database,
        get_sessionmaker,
        init_database,
    )
    from src.utils.logging import setup_logging

    async def main() -> None:
        settings = get_settings()
        setup_logging(settings)
        await init_database(settings)
        try:
            async with get_sessionmaker()() as session:
                await seed_database(
                    session,
                    admin_username=settings.seed.admin_username,
                    admin_email=settings.seed.admin_email,
                    admin_password=settings.seed.admin_password.get_secret_value(),
                    include_sample_course=settings.seed.sample_course,
                )
        finally:
            await close_database()

    asyncio.run(main())
