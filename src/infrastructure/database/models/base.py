# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins.

Every model inherits from Base, so ``Base.metadata`` describes the complete
schema (used by ``create_schema`` and by the Alembic environment).
"""

import enum
from datetime import datetime
from typing import TypeVar

from sqlalchemy import DateTime, Enum, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import utc_now

__all__ = ["Base", "CreatedAtMixin", "TimestampMixin", "enum_column", "utc_now"]

EnumT = TypeVar("EnumT", bound=enum.Enum)


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base for all schema models.

    AsyncAttrs provides ``await obj.awaitable_attrs.<relationship>`` for lazy
    traversal under an AsyncSession.
    """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)!r}>"


class CreatedAtMixin:
    """Creation timestamp, set by the application and defaulted by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Creation and modification timestamps.

    ``updated_at`` is refreshed on every ORM-issued UPDATE.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        server_default=func.now(),
        nullable=False,
    )


def enum_column(enum_cls: type[EnumT], name: str) -> Enum:
    """Build a string-backed enum type guarded by a CHECK constraint.

    Values are stored as their ``.value`` strings in a VARCHAR column, and the
    database rejects anything outside the declared set. Unknown strings are
    passed through unvalidated so that the rejection comes from the engine.

    Args:
        enum_cls: Python enum declaring the domain.
        name: Constraint name for the generated CHECK.

    Returns:
        SQLAlchemy Enum type.
    """
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        validate_strings=False,
        values_callable=lambda members: [member.value for member in members],
    )
