# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed data-access client over the schema.

``LMSClient`` bundles one repository per entity on a shared session, so an
application layer can write::

    async with get_session() as session:
        client = LMSClient(session)
        course = await client.courses.create(title="SQL 101", description="...")
        module = await client.modules.create(course_id=course.id, title="Basics")
        lessons = await client.modules.related(module.id, "lessons")

Entities with lookups beyond the primary key get a dedicated repository
below; everything else uses ``Repository`` as is.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.errors import ImmutableRecordError
from src.infrastructure.database.models import (
    ActivityLog,
    Assessment,
    AssessmentAttempt,
    Category,
    Certificate,
    Comment,
    Course,
    CourseAccess,
    Enrollment,
    Group,
    GroupCourse,
    GroupMember,
    GroupUser,
    Lesson,
    LessonProgress,
    Module,
    Question,
    Session,
    User,
)
from src.infrastructure.database.repository import Repository
from src.utils.datetime import seconds_from_now, utc_now

logger = logging.getLogger(__name__)

# Default session lifetime, one day
DEFAULT_SESSION_TTL_SECONDS = 86400


class UserRepository(Repository[User]):
    """Users, looked up by their unique username or email."""

    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class CertificateRepository(Repository[Certificate]):
    """Certificates, looked up by their public identifier."""

    model = Certificate

    async def get_by_certificate_id(self, certificate_id: str) -> Optional[Certificate]:
        result = await self.session.execute(
            select(Certificate).where(Certificate.certificate_id == certificate_id)
        )
        return result.scalar_one_or_none()


class CommentRepository(Repository[Comment]):
    """Lesson comments and their reply threads."""

    model = Comment

    async def top_level_for_lesson(self, lesson_id: int) -> Sequence[Comment]:
        """Comments on a lesson that are not replies, oldest first."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.lesson_id == lesson_id, Comment.parent_id.is_(None))
            .order_by(Comment.created_at, Comment.id)
        )
        return result.scalars().all()

    async def replies_of(self, comment_id: int) -> Sequence[Comment]:
        """Direct replies to a comment, oldest first."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.parent_id == comment_id)
            .order_by(Comment.created_at, Comment.id)
        )
        return result.scalars().all()


class ActivityLogRepository(Repository[ActivityLog]):
    """Append-only activity trail.

    Rows can be added and read. Updates are refused; rows only disappear
    together with their user.
    """

    model = ActivityLog

    async def record(
        self,
        user_id: int,
        action: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[int] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> ActivityLog:
        """Append an entry for a user.

        Args:
            user_id: Acting user.
            action: Free-form action name, e.g. "lesson.completed".
            resource_type: Optional type of the affected row.
            resource_id: Optional id of the affected row.
            metadata: Optional JSON-serializable details.

        Returns:
            The stored entry.
        """
        return await self.create(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            metadata_=metadata,
        )

    async def update(self, record_id: Any, **values: Any) -> ActivityLog:
        raise ImmutableRecordError(f"ActivityLog {record_id} is append-only")

    async def for_user(self, user_id: int, limit: int = 50) -> Sequence[ActivityLog]:
        """Most recent entries of a user, newest first."""
        result = await self.session.execute(
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
        )
        return result.scalars().all()


class SessionStoreRepository(Repository[Session]):
    """Server-side web session store keyed by session id.

    Mirrors what a session middleware needs: load a live session, save or
    refresh it with a time-to-live, destroy it, and prune expired rows.
    """

    model = Session

    async def load(self, sid: str) -> Optional[Any]:
        """Return the session document, or None if missing or expired."""
        stored = await self.get(sid)
        if stored is None or stored.is_expired:
            return None
        return stored.sess

    async def save(
        self,
        sid: str,
        sess: Any,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ) -> Session:
        """Insert or replace a session document and reset its expiry."""
        expire = seconds_from_now(ttl_seconds)
        stored = await self.get(sid)
        if stored is None:
            return await self.create(sid=sid, sess=sess, expire=expire)
        return await self.update(sid, sess=sess, expire=expire)

    async def touch(self, sid: str, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> Session:
        """Extend the expiry of an existing session.

        Raises:
            RecordNotFoundError: If the session does not exist.
        """
        return await self.update(sid, expire=seconds_from_now(ttl_seconds))

    async def destroy(self, sid: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        result = await self.session.execute(
            delete(Session)
            .where(Session.sid == sid)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    async def prune_expired(self, now: Optional[datetime] = None) -> int:
        """Delete every session whose expiry has passed.

        Args:
            now: Reference time, defaults to the current UTC time.

        Returns:
            Number of deleted sessions.
        """
        result = await self.session.execute(
            delete(Session)
            .where(Session.expire < (now or utc_now()))
            .execution_options(synchronize_session="fetch")
        )
        pruned = result.rowcount or 0
        if pruned:
            logger.info("Pruned %d expired sessions", pruned)
        return pruned


class LMSClient:
    """One repository per entity, all bound to the same session.

    Attributes:
        session: The shared async session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

        self.users = UserRepository(session)
        self.categories: Repository[Category] = Repository(session, Category)
        self.courses: Repository[Course] = Repository(session, Course)
        self.modules: Repository[Module] = Repository(session, Module)
        self.lessons: Repository[Lesson] = Repository(session, Lesson)
        self.enrollments: Repository[Enrollment] = Repository(session, Enrollment)
        self.assessments: Repository[Assessment] = Repository(session, Assessment)
        self.questions: Repository[Question] = Repository(session, Question)
        self.assessment_attempts: Repository[AssessmentAttempt] = Repository(
            session, AssessmentAttempt
        )
        self.groups: Repository[Group] = Repository(session, Group)
        self.group_members: Repository[GroupMember] = Repository(session, GroupMember)
        self.group_users: Repository[GroupUser] = Repository(session, GroupUser)
        self.course_access: Repository[CourseAccess] = Repository(session, CourseAccess)
        self.lesson_progress: Repository[LessonProgress] = Repository(session, LessonProgress)
        self.activity_logs = ActivityLogRepository(session)
        self.certificates = CertificateRepository(session)
        self.sessions = SessionStoreRepository(session)
        self.group_courses: Repository[GroupCourse] = Repository(session, GroupCourse)
        self.comments = CommentRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
