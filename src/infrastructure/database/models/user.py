# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model.

A user is the owner side of almost every other table: authored courses,
enrollments, assessment attempts, group memberships, access grants, lesson
progress, activity logs, certificates and comments. Rows owned by a user are
removed with it; courses they instruct keep existing without an instructor.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, CreatedAtMixin, enum_column
from src.infrastructure.database.models.enums import UserRole

if TYPE_CHECKING:
    from src.infrastructure.database.models.assessment import AssessmentAttempt
    from src.infrastructure.database.models.audit import ActivityLog
    from src.infrastructure.database.models.catalog import Course
    from src.infrastructure.database.models.discussion import Comment
    from src.infrastructure.database.models.group import CourseAccess, GroupMember, GroupUser
    from src.infrastructure.database.models.learning import (
        Certificate,
        Enrollment,
        LessonProgress,
    )


class User(Base, CreatedAtMixin):
    """Platform account.

    Attributes:
        id: Surrogate key.
        username: Unique login name.
        email: Unique email address.
        password_hash: bcrypt hash of the credential; never the plain value.
        name: Optional display name.
        profile_picture: Optional picture URL.
        role: employee, contributor or admin.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "ck_users_role"),
        default=UserRole.EMPLOYEE,
        server_default=UserRole.EMPLOYEE.value,
        nullable=False,
    )

    authored_courses: Mapped[list["Course"]] = relationship(
        back_populates="instructor",
        passive_deletes=True,
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    assessment_attempts: Mapped[list["AssessmentAttempt"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    group_memberships: Mapped[list["GroupMember"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    group_users: Mapped[list["GroupUser"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    course_access: Mapped[list["CourseAccess"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    lesson_progress: Mapped[list["LessonProgress"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    activity_logs: Mapped[list["ActivityLog"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    certificates: Mapped[list["Certificate"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_users_role", "role"),)

    @property
    def display_name(self) -> str:
        """Name if set, otherwise the username."""
        return self.name or self.username
