# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog models.

Course → Module → Lesson is the content tree. Deleting a course removes its
modules, which removes their lessons and assessments; every row hanging off
those (enrollments, grants, certificates, progress, comments, questions,
attempts) goes with them through ``ON DELETE CASCADE``.

Category is a standalone lookup table. ``Course.category`` is a free-text
column and is not a foreign key to it.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, enum_column
from src.infrastructure.database.models.enums import CourseDifficulty, CourseStatus

if TYPE_CHECKING:
    from src.infrastructure.database.models.assessment import Assessment
    from src.infrastructure.database.models.discussion import Comment
    from src.infrastructure.database.models.group import CourseAccess, GroupCourse
    from src.infrastructure.database.models.learning import (
        Certificate,
        Enrollment,
        LessonProgress,
    )
    from src.infrastructure.database.models.user import User


class Category(Base, TimestampMixin):
    """Named course category."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Course(Base, TimestampMixin):
    """A course authored by an optional instructor.

    Attributes:
        title: Course title.
        description: Course description.
        category: Free-text category label.
        thumbnail: Optional image URL.
        duration: Optional estimated duration in minutes.
        difficulty: beginner, intermediate or advanced.
        instructor_id: Author; set to NULL if the user is deleted.
        status: draft, published or archived.
    """

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    thumbnail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[CourseDifficulty] = mapped_column(
        enum_column(CourseDifficulty, "ck_courses_difficulty"),
        default=CourseDifficulty.BEGINNER,
        server_default=CourseDifficulty.BEGINNER.value,
        nullable=False,
    )
    instructor_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[CourseStatus] = mapped_column(
        enum_column(CourseStatus, "ck_courses_status"),
        default=CourseStatus.DRAFT,
        server_default=CourseStatus.DRAFT.value,
        nullable=False,
    )

    instructor: Mapped[Optional["User"]] = relationship(back_populates="authored_courses")
    modules: Mapped[list["Module"]] = relationship(
        back_populates="course",
        cascade="all",
        passive_deletes=True,
        order_by="Module.position",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="course",
        cascade="all",
        passive_deletes=True,
    )
    access_grants: Mapped[list["CourseAccess"]] = relationship(
        back_populates="course",
        cascade="all",
        passive_deletes=True,
    )
    certificates: Mapped[list["Certificate"]] = relationship(
        back_populates="course",
        cascade="all",
        passive_deletes=True,
    )
    group_courses: Mapped[list["GroupCourse"]] = relationship(
        back_populates="course",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_courses_instructor_id", "instructor_id"),
        Index("ix_courses_status", "status"),
    )


class Module(Base):
    """Ordered section of a course."""

    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    course: Mapped["Course"] = relationship(back_populates="modules")
    lessons: Mapped[list["Lesson"]] = relationship(
        back_populates="module",
        cascade="all",
        passive_deletes=True,
        order_by="Lesson.position",
    )
    assessments: Mapped[list["Assessment"]] = relationship(
        back_populates="module",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_modules_course_id", "course_id"),)


class Lesson(Base):
    """Ordered unit of content inside a module.

    Attributes:
        content: Optional body text.
        video_url: Optional video link.
        duration: Optional duration in minutes.
    """

    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    module: Mapped["Module"] = relationship(back_populates="lessons")
    progress_records: Mapped[list["LessonProgress"]] = relationship(
        back_populates="lesson",
        cascade="all",
        passive_deletes=True,
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="lesson",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_lessons_module_id", "module_id"),)
