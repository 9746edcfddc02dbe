# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the learning-management schema.

Importing this package registers every table on ``Base.metadata``.
"""

from src.infrastructure.database.models.assessment import (
    Assessment,
    AssessmentAttempt,
    Question,
)
from src.infrastructure.database.models.audit import ActivityLog
from src.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    TimestampMixin,
    enum_column,
)
from src.infrastructure.database.models.catalog import Category, Course, Lesson, Module
from src.infrastructure.database.models.discussion import Comment
from src.infrastructure.database.models.enums import (
    AccessType,
    AttemptStatus,
    CourseDifficulty,
    CourseStatus,
    ProgressStatus,
    QuestionType,
    UserRole,
)
from src.infrastructure.database.models.group import (
    CourseAccess,
    Group,
    GroupCourse,
    GroupMember,
    GroupUser,
)
from src.infrastructure.database.models.learning import Certificate, Enrollment, LessonProgress
from src.infrastructure.database.models.session import Session
from src.infrastructure.database.models.user import User

# Tables in dependency order (parents first)
SCHEMA_TABLES = (
    "users",
    "categories",
    "courses",
    "modules",
    "lessons",
    "enrollments",
    "assessments",
    "questions",
    "assessment_attempts",
    "groups",
    "group_members",
    "group_users",
    "course_access",
    "lesson_progress",
    "activity_logs",
    "certificates",
    "sessions",
    "group_courses",
    "comments",
)

__all__ = [
    # Base
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "enum_column",
    "SCHEMA_TABLES",
    # Enums
    "AccessType",
    "AttemptStatus",
    "CourseDifficulty",
    "CourseStatus",
    "ProgressStatus",
    "QuestionType",
    "UserRole",
    # Users
    "User",
    # Catalog
    "Category",
    "Course",
    "Module",
    "Lesson",
    # Assessments
    "Assessment",
    "Question",
    "AssessmentAttempt",
    # Learner state
    "Enrollment",
    "LessonProgress",
    "Certificate",
    # Groups and access
    "Group",
    "GroupMember",
    "GroupUser",
    "GroupCourse",
    "CourseAccess",
    # Discussion
    "Comment",
    # Audit
    "ActivityLog",
    # Infrastructure
    "Session",
]
