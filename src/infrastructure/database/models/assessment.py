# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment models.

An assessment optionally belongs to a module and owns its questions and the
attempts made against it. Scoring is not modelled here: ``score`` and
``answers`` are stored as handed in by the application.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, CreatedAtMixin, enum_column, utc_now
from src.infrastructure.database.models.enums import AttemptStatus, QuestionType

if TYPE_CHECKING:
    from src.infrastructure.database.models.catalog import Module
    from src.infrastructure.database.models.user import User


class Assessment(Base, CreatedAtMixin):
    """Quiz or exam, optionally attached to a module.

    Attributes:
        module_id: Owning module, if any.
        time_limit: Optional limit in minutes.
        passing_score: Optional threshold, unconstrained in range.
    """

    __tablename__ = "assessments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    module_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    time_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    passing_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    module: Mapped[Optional["Module"]] = relationship(back_populates="assessments")
    questions: Mapped[list["Question"]] = relationship(
        back_populates="assessment",
        cascade="all",
        passive_deletes=True,
        order_by="Question.position",
    )
    attempts: Mapped[list["AssessmentAttempt"]] = relationship(
        back_populates="assessment",
        cascade="all",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_assessments_module_id", "module_id"),)


class Question(Base):
    """Single question of an assessment.

    ``options`` holds the answer choices for multiple-choice questions as an
    opaque JSON document.
    """

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    assessment_id: Mapped[int] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[QuestionType] = mapped_column(
        enum_column(QuestionType, "ck_questions_question_type"),
        nullable=False,
    )
    options: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    correct_answer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    assessment: Mapped["Assessment"] = relationship(back_populates="questions")

    __table_args__ = (Index("ix_questions_assessment_id", "assessment_id"),)


class AssessmentAttempt(Base):
    """One user's attempt at an assessment."""

    __tablename__ = "assessment_attempts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    assessment_id: Mapped[int] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"),
        nullable=False,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    answers: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    status: Mapped[AttemptStatus] = mapped_column(
        enum_column(AttemptStatus, "ck_assessment_attempts_status"),
        default=AttemptStatus.IN_PROGRESS,
        server_default=AttemptStatus.IN_PROGRESS.value,
        nullable=False,
    )

    user: Mapped["User"] = relationship(back_populates="assessment_attempts")
    assessment: Mapped["Assessment"] = relationship(back_populates="attempts")

    __table_args__ = (
        Index("ix_assessment_attempts_user_id", "user_id"),
        Index("ix_assessment_attempts_assessment_id", "assessment_id"),
    )

    @property
    def is_finished(self) -> bool:
        """Whether the attempt reached a terminal status."""
        return self.status is not None and self.status != AttemptStatus.IN_PROGRESS
