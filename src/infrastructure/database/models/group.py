# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Groups, their memberships and course access grants.

Group membership exists twice, as ``group_members`` and ``group_users``.
Both tables are kept because existing data lives in each; neither is derived
from the other.

A CourseAccess row targets a user or a group. Which one is meant is decided
by the application: the database accepts either, both or none.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, CreatedAtMixin, enum_column, utc_now
from src.infrastructure.database.models.enums import AccessType

if TYPE_CHECKING:
    from src.infrastructure.database.models.catalog import Course
    from src.infrastructure.database.models.user import User


class Group(Base, CreatedAtMixin):
    """Named set of users sharing course access."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    members: Mapped[list["GroupMember"]] = relationship(
        back_populates="group",
        cascade="all",
        passive_deletes=True,
    )
    group_users: Mapped[list["GroupUser"]] = relationship(
        back_populates="group",
        cascade="all",
        passive_deletes=True,
    )
    access_grants: Mapped[list["CourseAccess"]] = relationship(
        back_populates="group",
        cascade="all",
        passive_deletes=True,
    )
    group_courses: Mapped[list["GroupCourse"]] = relationship(
        back_populates="group",
        cascade="all",
        passive_deletes=True,
    )


class GroupMember(Base):
    """Membership of a user in a group."""

    __tablename__ = "group_members"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    group: Mapped["Group"] = relationship(back_populates="members")
    user: Mapped["User"] = relationship(back_populates="group_memberships")

    __table_args__ = (
        Index("ix_group_members_group_id", "group_id"),
        Index("ix_group_members_user_id", "user_id"),
    )


class GroupUser(Base, CreatedAtMixin):
    """Second group-to-user join table."""

    __tablename__ = "group_users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    group: Mapped["Group"] = relationship(back_populates="group_users")
    user: Mapped["User"] = relationship(back_populates="group_users")

    __table_args__ = (
        Index("ix_group_users_group_id", "group_id"),
        Index("ix_group_users_user_id", "user_id"),
    )


class GroupCourse(Base, CreatedAtMixin):
    """Many-to-many link between groups and courses."""

    __tablename__ = "group_courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )

    group: Mapped["Group"] = relationship(back_populates="group_courses")
    course: Mapped["Course"] = relationship(back_populates="group_courses")

    __table_args__ = (
        Index("ix_group_courses_group_id", "group_id"),
        Index("ix_group_courses_course_id", "course_id"),
    )


class CourseAccess(Base):
    """Grant of view or edit access on a course to a user or a group."""

    __tablename__ = "course_access"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    group_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
    )
    access_type: Mapped[AccessType] = mapped_column(
        enum_column(AccessType, "ck_course_access_access_type"),
        default=AccessType.VIEW,
        server_default=AccessType.VIEW.value,
        nullable=False,
    )
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    course: Mapped["Course"] = relationship(back_populates="access_grants")
    user: Mapped[Optional["User"]] = relationship(back_populates="course_access")
    group: Mapped[Optional["Group"]] = relationship(back_populates="access_grants")

    __table_args__ = (
        Index("ix_course_access_course_id", "course_id"),
        Index("ix_course_access_user_id", "user_id"),
        Index("ix_course_access_group_id", "group_id"),
    )

    @property
    def target(self) -> Optional[str]:
        """Which side the grant points at: "user", "group" or None.

        A row with both ids set reports "user".
        """
        if self.user_id is not None:
            return "user"
        if self.group_id is not None:
            return "group"
        return None
