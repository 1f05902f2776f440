"""Generic create/read/update executor over the relational record store.

Every service talks to storage through a RecordStoreGateway constructed with
an explicit session. The gateway translates driver failures into the portal's
error taxonomy:

- list/count/get: StoreUnavailableException on any SQLAlchemy error. A filter
  that matches nothing is an empty list, not an error.
- insert: ValidationException when a required column is missing or a
  constraint rejects the row, StoreUnavailableException otherwise.
- update: NotFoundException when the id is absent.
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from portal.exceptions import (
    NotFoundException,
    StoreUnavailableException,
    ValidationException,
)
from portal.models.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordStoreGateway:
    """Query executor bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(
        self,
        model: type[ModelT],
        filters: Sequence[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[ModelT]:
        """Return the rows of a collection matching every filter, in order."""
        query = select(model).where(*filters).order_by(*order_by)
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Listing {model.__tablename__} failed: {exc}")
            raise StoreUnavailableException() from exc

        return list(result.scalars().unique().all())

    async def count(
        self,
        model: type[ModelT],
        filters: Sequence[ColumnElement[bool]] = (),
    ) -> int:
        """Count the rows of a collection matching every filter."""
        query = select(func.count()).select_from(model).where(*filters)
        try:
            return (await self.session.execute(query)).scalar() or 0
        except SQLAlchemyError as exc:
            logger.error(f"Counting {model.__tablename__} failed: {exc}")
            raise StoreUnavailableException() from exc

    async def get(self, model: type[ModelT], record_id: uuid.UUID) -> ModelT | None:
        """Fetch one row by primary key, or None."""
        try:
            return await self.session.get(model, record_id)
        except SQLAlchemyError as exc:
            logger.error(f"Fetching {model.__tablename__} {record_id} failed: {exc}")
            raise StoreUnavailableException() from exc

    async def first(
        self,
        model: type[ModelT],
        filters: Sequence[ColumnElement[bool]] = (),
    ) -> ModelT | None:
        """Fetch the first row matching every filter, or None."""
        rows = await self.list(model, filters, limit=1)
        return rows[0] if rows else None

    async def insert(self, record: ModelT) -> uuid.UUID:
        """Insert a new row and return its id."""
        self._check_required(record)

        self.session.add(record)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning(f"Insert into {record.__tablename__} rejected: {exc.orig}")
            raise ValidationException(
                f"{record.__tablename__} record violates a store constraint"
            ) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Insert into {record.__tablename__} failed: {exc}")
            raise StoreUnavailableException() from exc

        generated = [
            name for name in ("created_at", "updated_at", "submitted_at")
            if name in inspect(record).expired_attributes
        ]
        if generated:
            await self.session.refresh(record, attribute_names=generated)

        return record.id

    async def update(
        self,
        model: type[ModelT],
        record_id: uuid.UUID,
        patch: dict[str, Any],
    ) -> None:
        """Apply a partial update to one row."""
        record = await self.get(model, record_id)
        if record is None:
            raise NotFoundException(model.__name__)

        for field, value in patch.items():
            setattr(record, field, value)

        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Update of {model.__tablename__} {record_id} failed: {exc}")
            raise StoreUnavailableException() from exc

        if "updated_at" in inspect(record).expired_attributes:
            await self.session.refresh(record, attribute_names=["updated_at"])

    async def commit(self) -> None:
        """Confirm pending mutations with the store."""
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Commit failed: {exc}")
            raise StoreUnavailableException() from exc

    async def reset(self) -> None:
        """Discard a failed read transaction so later loads can run.

        Rows loaded so far are detached first, which keeps them readable
        instead of expiring them with the rollback.
        """
        self.session.expunge_all()
        await self.session.rollback()

    def _check_required(self, record: Base) -> None:
        """Reject records missing a required column before they reach the store."""
        errors = []
        for column in record.__table__.columns:
            if column.nullable or column.primary_key:
                continue
            if column.default is not None or column.server_default is not None:
                continue
            value = getattr(record, column.key, None)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append({"field": column.key, "message": f"{column.key} is required"})

        if errors:
            raise ValidationException(errors)
