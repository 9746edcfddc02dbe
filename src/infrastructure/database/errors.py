# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database error taxonomy.

The schema's only behavioral contracts are the ones the relational engine
enforces: uniqueness, foreign keys, NOT NULL and CHECK constraints (which
carry the enum domains). SQLAlchemy reports all of them as a single
``IntegrityError``; this module splits that into typed exceptions.

Example:
    try:
        await client.users.create(username="ada", email="ada@example.com", ...)
    except UniqueViolationError:
        ...
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE codes for integrity constraint violations
SQLSTATE_NOT_NULL = "23502"
SQLSTATE_FOREIGN_KEY = "23503"
SQLSTATE_UNIQUE = "23505"
SQLSTATE_CHECK = "23514"


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RecordNotFoundError(DatabaseError):
    """Raised when a row looked up by primary key does not exist."""

    def __init__(self, model: str, record_id: object) -> None:
        super().__init__(f"{model} {record_id} not found")
        self.model = model
        self.record_id = record_id


class ImmutableRecordError(DatabaseError):
    """Raised when an append-only row is updated."""

    pass


class StaleRecordError(DatabaseError):
    """Raised when a flush finds a row already removed from the database."""

    pass


class ConstraintViolationError(DatabaseError):
    """Base for rows rejected by a database constraint."""

    pass


class UniqueViolationError(ConstraintViolationError):
    """Raised when a UNIQUE constraint or primary key is violated."""

    pass


class ForeignKeyViolationError(ConstraintViolationError):
    """Raised when a referenced row does not exist (or is still referenced)."""

    pass


class NotNullViolationError(ConstraintViolationError):
    """Raised when a required column is left NULL."""

    pass


class DomainViolationError(ConstraintViolationError):
    """Raised when a CHECK constraint rejects a value, e.g. an unknown enum member."""

    pass


def _sqlstate(error: IntegrityError) -> Optional[str]:
    """Extract the SQLSTATE from the driver exception, if the driver has one."""
    orig = error.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if isinstance(code, str):
            return code
    return None


def translate_integrity_error(error: IntegrityError) -> ConstraintViolationError:
    """Map an IntegrityError onto the constraint taxonomy.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports a message
    such as ``UNIQUE constraint failed: users.email``.

    Args:
        error: The IntegrityError raised on flush or commit.

    Returns:
        The matching ConstraintViolationError subclass instance. Unknown
        violations come back as the ConstraintViolationError base.
    """
    code = _sqlstate(error)
    text = str(error.orig).lower()

    if code == SQLSTATE_UNIQUE or "unique constraint" in text:
        return UniqueViolationError("Unique constraint violated", error)
    if code == SQLSTATE_FOREIGN_KEY or "foreign key constraint" in text:
        return ForeignKeyViolationError("Foreign key constraint violated", error)
    if code == SQLSTATE_NOT_NULL or "not null constraint" in text:
        return NotNullViolationError("Not-null constraint violated", error)
    if code == SQLSTATE_CHECK or "check constraint" in text:
        return DomainViolationError("Check constraint violated", error)

    return ConstraintViolationError("Integrity constraint violated", error)
