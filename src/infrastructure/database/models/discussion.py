# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Threaded lesson comments.

Replies point at their parent through ``parent_id``. The tree has no depth
limit and only referential integrity is enforced: a parent must exist, and
deleting it deletes its replies. Nothing stops a chain from being rewired
into a cycle by an UPDATE.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from src.infrastructure.database.models.catalog import Lesson
    from src.infrastructure.database.models.user import User


class Comment(Base, TimestampMixin):
    """Comment on a lesson, optionally replying to another comment."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    lesson_id: Mapped[int] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )

    lesson: Mapped["Lesson"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship(back_populates="comments")
    parent: Mapped[Optional["Comment"]] = relationship(
        back_populates="replies",
        remote_side="Comment.id",
    )
    replies: Mapped[list["Comment"]] = relationship(
        back_populates="parent",
        cascade="all",
        passive_deletes=True,
        order_by="Comment.created_at",
    )

    __table_args__ = (
        Index("ix_comments_lesson_id", "lesson_id"),
        Index("ix_comments_user_id", "user_id"),
        Index("ix_comments_parent_id", "parent_id"),
    )

    @property
    def is_reply(self) -> bool:
        """Whether this comment answers another one."""
        return self.parent_id is not None
