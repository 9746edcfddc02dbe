# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure.

This package provides the relational schema of the learning platform and
async access to it:
- models: SQLAlchemy declarative models for all tables
- connection: engine/session lifecycle
- repository / client: typed CRUD and relationship traversal
- errors: constraint violations mapped to typed exceptions
- migrations: Alembic revisions and a programmatic runner

Example:
    from src.infrastructure.database import LMSClient, get_session, init_database

    await init_database(settings)

    async with get_session() as session:
        client = LMSClient(session)
        user = await client.users.get_by_username("ada")
"""

from src.infrastructure.database.client import (
    ActivityLogRepository,
    CertificateRepository,
    CommentRepository,
    LMSClient,
    SessionStoreRepository,
    UserRepository,
)
from src.infrastructure.database.connection import (
    build_engine,
    check_database_connection,
    close_database,
    create_schema,
    drop_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.database.errors import (
    ConstraintViolationError,
    DatabaseError,
    DomainViolationError,
    ForeignKeyViolationError,
    ImmutableRecordError,
    NotNullViolationError,
    RecordNotFoundError,
    StaleRecordError,
    UniqueViolationError,
)
from src.infrastructure.database.repository import Repository

__all__ = [
    # Connection
    "build_engine",
    "init_database",
    "close_database",
    "get_engine",
    "get_sessionmaker",
    "get_session",
    "check_database_connection",
    "create_schema",
    "drop_schema",
    # Access
    "Repository",
    "LMSClient",
    "UserRepository",
    "CertificateRepository",
    "CommentRepository",
    "ActivityLogRepository",
    "SessionStoreRepository",
    # Errors
    "DatabaseError",
    "RecordNotFoundError",
    "ImmutableRecordError",
    "StaleRecordError",
    "ConstraintViolationError",
    "UniqueViolationError",
    "ForeignKeyViolationError",
    "NotNullViolationError",
    "DomainViolationError",
]
