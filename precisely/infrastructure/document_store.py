"""Document Store — filter/sort/insert/update/delete over the document collection.

Invariants:
    - "No match" is a value (None, empty list, zero count), never an exception
    - Every SQLAlchemy failure becomes BackendUnavailableError after a rollback
    - A primary-key collision on insert becomes DuplicateIdError
    - Filters, sorts and field-sets address columns by dotted document path;
      an unknown path raises ValueError before any statement runs
    - Mutations commit before returning

Design Decisions:
    - Thin adapter over one AsyncSession: the session's lifetime belongs to the
      caller (request dependency or test fixture)
    - Sort specs as (path, ASCENDING | DESCENDING) pairs, mirroring the
      document-database call shape the access layer is written against
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from precisely.core.errors import BackendUnavailableError, DuplicateIdError
from precisely.models.document import FIELD_COLUMNS, DocumentRecord

logger = logging.getLogger(__name__)

ASCENDING = 1
DESCENDING = -1

Filter = dict[str, object]
Sort = list[tuple[str, int]]


def _column(path: str):
    try:
        return FIELD_COLUMNS[path]
    except KeyError:
        raise ValueError(f"unknown document field path: {path!r}") from None


def _where(filter_: Filter | None) -> list:
    return [_column(path) == val for path, val in (filter_ or {}).items()]


def _order_by(sort: Sort | None) -> list:
    clauses = []
    for path, direction in sort or []:
        col = _column(path)
        clauses.append(col.desc() if direction == DESCENDING else col.asc())
    return clauses


def _values(fields: dict[str, object]) -> dict:
    return {_column(path).key: val for path, val in fields.items()}


class DocumentStore:
    """Collection operations over DocumentRecord, bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_one(
        self, filter_: Filter | None = None, sort: Sort | None = None,
    ) -> DocumentRecord | None:
        """First record matching filter_ in sort order, or None."""
        query = (
            select(DocumentRecord)
            .where(*_where(filter_))
            .order_by(*_order_by(sort))
            .limit(1)
            .execution_options(populate_existing=True)
        )
        async with self._translate("find_one"):
            result = await self.session.execute(query)
            return result.scalars().first()

    async def find(
        self, filter_: Filter | None = None, sort: Sort | None = None,
    ) -> list[DocumentRecord]:
        """All records matching filter_ in sort order."""
        query = (
            select(DocumentRecord)
            .where(*_where(filter_))
            .order_by(*_order_by(sort))
            .execution_options(populate_existing=True)
        )
        async with self._translate("find"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def insert_one(self, fields: dict[str, object]) -> None:
        """Insert one record. Raises DuplicateIdError if the id is taken."""
        stmt = insert(DocumentRecord).values(**_values(fields))
        async with self._translate("insert", fields.get("id")):
            await self.session.execute(stmt)
            await self.session.commit()

    async def update_one(
        self, filter_: Filter, fields: dict[str, object],
    ) -> int:
        """Set `fields` on the record matching filter_. Returns matched count; no upsert."""
        stmt = (
            update(DocumentRecord)
            .where(*_where(filter_))
            .values(**_values(fields))
            .execution_options(synchronize_session=False)
        )
        async with self._translate("update"):
            result = await self.session.execute(stmt)
            await self.session.commit()
            return result.rowcount

    async def delete_one(self, filter_: Filter) -> int:
        """Delete the record matching filter_. Returns deleted count."""
        stmt = (
            delete(DocumentRecord)
            .where(*_where(filter_))
            .execution_options(synchronize_session=False)
        )
        async with self._translate("delete"):
            result = await self.session.execute(stmt)
            await self.session.commit()
            return result.rowcount

    @asynccontextmanager
    async def _translate(
        self, operation: str, document_id: object = None,
    ) -> AsyncGenerator[None, None]:
        """Roll back and map SQLAlchemy failures for one store call."""
        try:
            yield
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(
                f"Store integrity error on {operation}: {e}",
                extra={"operation": operation},
            )
            if operation == "insert":
                raise DuplicateIdError(document_id) from e
            raise BackendUnavailableError(str(e), operation) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Store {operation} failed: {e}",
                extra={"operation": operation},
            )
            raise BackendUnavailableError(str(e), operation) from e
