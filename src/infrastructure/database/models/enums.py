# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enumerated value domains.

Each enum is persisted as its string value and guarded by a CHECK
constraint named ``ck_<table>_<column>``.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform role of a user."""

    EMPLOYEE = "employee"
    CONTRIBUTOR = "contributor"
    ADMIN = "admin"


class CourseDifficulty(str, Enum):
    """Course difficulty level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseStatus(str, Enum):
    """Publication state of a course."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class QuestionType(str, Enum):
    """Answer format of an assessment question."""

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"


class AttemptStatus(str, Enum):
    """State of an assessment attempt.

    IN_PROGRESS is the only open state; the other three are terminal.
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    PASSED = "passed"


class AccessType(str, Enum):
    """Level of a course access grant."""

    VIEW = "view"
    EDIT = "edit"


class ProgressStatus(str, Enum):
    """Per-user state of a lesson."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
