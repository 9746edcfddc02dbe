# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Web session store table.

Backing table for a server-side session middleware: an opaque string id, the
serialized session document and its expiry. It is infrastructure, not domain
data, and has no relationships.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base
from src.utils.datetime import is_expired


class Session(Base):
    """Stored web session."""

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(255), primary_key=True)
    sess: Mapped[Any] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_sessions_expire", "expire"),)

    def __repr__(self) -> str:
        return f"<Session sid={self.sid!r}>"

    @property
    def is_expired(self) -> bool:
        """Whether the expiry time has passed."""
        return is_expired(self.expire)
