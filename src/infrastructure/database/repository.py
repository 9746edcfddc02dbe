# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Generic async data access for the schema models.

``Repository`` gives every entity the same surface: create, read, list,
count, update, delete and traversal along a declared relationship.
Repositories flush but never commit; the transaction belongs to whoever owns
the session (``get_session`` or the caller).

A failed flush rolls the session back and is re-raised as one of the
constraint errors from ``src.infrastructure.database.errors``.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from src.infrastructure.database.errors import (
    RecordNotFoundError,
    StaleRecordError,
    translate_integrity_error,
)
from src.infrastructure.database.models.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """CRUD and relationship traversal for one model.

    Attributes:
        session: Async session the repository works in.
        model: Mapped class handled by this repository.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession, model: Optional[type[ModelT]] = None) -> None:
        """Initialize the repository.

        Args:
            session: Async database session.
            model: Mapped class; subclasses may set it as a class attribute.
        """
        self.session = session
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs a model")

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def create(self, **values: Any) -> ModelT:
        """Insert a row.

        Args:
            **values: Column attribute values.

        Returns:
            The persisted instance with server defaults loaded.

        Raises:
            ConstraintViolationError: If the database rejects the row.
        """
        self._check_columns(values)
        instance = self.model(**values)
        self.session.add(instance)
        await self._flush()
        await self.session.refresh(instance)

        logger.debug("Created %s: id=%s", self.model_name, self._identity(instance))
        return instance

    async def get(self, record_id: Any) -> Optional[ModelT]:
        """Get a row by primary key, or None.

        Always reads the database, so rows removed by an ON DELETE rule are
        not served from the identity map.
        """
        return await self.session.get(self.model, record_id, populate_existing=True)

    async def get_or_raise(self, record_id: Any) -> ModelT:
        """Get a row by primary key.

        Raises:
            RecordNotFoundError: If no row has this key.
        """
        instance = await self.get(record_id)
        if instance is None:
            raise RecordNotFoundError(self.model_name, record_id)
        return instance

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Sequence[ModelT]:
        """List rows matching equality filters.

        Args:
            filters: Column attribute → value; all must match.
            order_by: Column attribute, prefixed with "-" for descending.
                Defaults to the primary key.
            limit: Maximum number of rows.
            offset: Number of rows to skip.

        Returns:
            Matching instances.
        """
        query = self._filtered(select(self.model), filters)
        query = query.order_by(*self._ordering(order_by))
        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count rows matching equality filters."""
        query = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def update(self, record_id: Any, **values: Any) -> ModelT:
        """Update columns of an existing row.

        Primary key columns cannot be changed.

        Raises:
            RecordNotFoundError: If no row has this key.
            ConstraintViolationError: If the database rejects the change.
        """
        self._check_columns(values)
        immutable = set(values) & self._primary_key_names()
        if immutable:
            raise ValueError(f"Primary key of {self.model_name} is immutable: {sorted(immutable)}")

        instance = await self.get_or_raise(record_id)
        for key, value in values.items():
            setattr(instance, key, value)

        await self._flush()
        await self.session.refresh(instance)

        logger.debug("Updated %s: id=%s fields=%s", self.model_name, record_id, sorted(values))
        return instance

    async def delete(self, record_id: Any) -> None:
        """Delete a row; dependent rows follow the schema's ON DELETE rules.

        Raises:
            RecordNotFoundError: If no row has this key.
            ConstraintViolationError: If a reference blocks the delete.
        """
        instance = await self.get_or_raise(record_id)
        await self.session.delete(instance)
        await self._flush()

        logger.info("Deleted %s: id=%s", self.model_name, record_id)

    async def related(self, record_id: Any, relationship: str) -> Any:
        """Load a declared relationship of a row.

        Args:
            record_id: Primary key of the row.
            relationship: Relationship attribute name, e.g. "modules".

        Returns:
            A list for one-to-many relationships, an instance or None for
            many-to-one.

        Raises:
            ValueError: If the model declares no such relationship.
            RecordNotFoundError: If no row has this key.
        """
        if relationship not in inspect(self.model).relationships:
            raise ValueError(f"{self.model_name} has no relationship {relationship!r}")

        instance = await self.get_or_raise(record_id)
        await self.session.refresh(instance, attribute_names=[relationship])
        return getattr(instance, relationship)

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise translate_integrity_error(e) from e
        except StaleDataError as e:
            await self.session.rollback()
            raise StaleRecordError(f"{self.model_name} row no longer exists", e) from e

    def _filtered(self, query: Select, filters: Optional[Mapping[str, Any]]) -> Select:
        if not filters:
            return query
        self._check_columns(filters)
        return query.where(
            *(getattr(self.model, key) == value for key, value in filters.items())
        )

    def _ordering(self, order_by: Optional[str]) -> Sequence[Any]:
        if order_by is None:
            return [getattr(self.model, name) for name in self._primary_key_names()]

        descending = order_by.startswith("-")
        key = order_by.lstrip("-")
        self._check_columns({key: None})
        column = getattr(self.model, key)
        return [column.desc() if descending else column.asc()]

    def _check_columns(self, values: Mapping[str, Any]) -> None:
        known = inspect(self.model).column_attrs.keys()
        unknown = set(values) - set(known)
        if unknown:
            raise ValueError(f"{self.model_name} has no column(s) {sorted(unknown)}")

    def _primary_key_names(self) -> set[str]:
        mapper = inspect(self.model)
        return {mapper.get_property_by_column(column).key for column in mapper.primary_key}

    def _identity(self, instance: ModelT) -> Any:
        identity = inspect(instance).identity
        if identity is None:
            return None
        return identity[0] if len(identity) == 1 else identity

