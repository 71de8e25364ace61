"""SQLAlchemy-backed data store. Each call runs in its own session on a worker thread."""

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

from sqlalchemy import delete as sql_delete
from sqlalchemy import select as sql_select
from sqlalchemy import update as sql_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fieldsales.db import get_session, session_scope
from fieldsales.db.base import Base
from fieldsales.db.models import MSLItemRow, ProductRow, StoreRow, VisitOrderRow, VisitRow
from fieldsales.models.outcomes import RowAction
from fieldsales.store.filters import Range
from fieldsales.store.protocol import (
    MSL_ITEMS,
    PRODUCTS,
    STORES,
    VISIT_ORDERS,
    VISITS,
    Filters,
    Row,
    StoreError,
    UpsertStatus,
)
from fieldsales.utils.logger import get_logger

logger = get_logger("fieldsales.store.sql")

T = TypeVar("T")

# The driver raises OverflowError for integers outside its column range without wrapping it
DB_ERRORS = (SQLAlchemyError, OverflowError)

COLLECTIONS: dict[str, type[Base]] = {
    MSL_ITEMS: MSLItemRow,
    PRODUCTS: ProductRow,
    STORES: StoreRow,
    VISITS: VisitRow,
    VISIT_ORDERS: VisitOrderRow,
}


def _model_for(collection: str) -> type[Base]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise StoreError(f"Unknown collection {collection!r}", collection=collection) from None


def _to_row(obj: Base) -> Row:
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns}


def _columns(model: type[Base]) -> set[str]:
    return {c.key for c in model.__table__.columns}


def _clean(model: type[Base], row: Row) -> Row:
    """Drop keys that are not columns of model (and a None id so the default applies)."""
    known = _columns(model)
    cleaned = {k: v for k, v in row.items() if k in known}
    if cleaned.get("id") is None:
        cleaned.pop("id", None)
    return cleaned


def _where(model: type[Base], filters: Optional[Filters]) -> list[Any]:
    clauses = []
    for field, expected in (filters or {}).items():
        if field not in _columns(model):
            raise StoreError(f"Unknown field {field!r} on {model.__tablename__}", collection=model.__tablename__)
        column = getattr(model, field)
        if isinstance(expected, Range):
            if expected.low is not None:
                clauses.append(column >= expected.low)
            if expected.high is not None:
                clauses.append(column <= expected.high)
        elif isinstance(expected, (list, tuple, set, frozenset)):
            clauses.append(column.in_(list(expected)))
        elif expected is None:
            clauses.append(column.is_(None))
        else:
            clauses.append(column == expected)
    return clauses


class SqlDataStore:
    """DataStore over the ORM tables; also provides atomic replace and bulk upsert."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._session_factory is None:
            with get_session() as session:
                yield session
        else:
            with session_scope(self._session_factory) as session:
                yield session

    async def _run(self, operation: str, collection: str, fn: Callable[[Session], T]) -> T:
        def _call() -> T:
            try:
                with self._session() as session:
                    return fn(session)
            except DB_ERRORS as e:
                logger.error("sql_store.error", operation=operation, collection=collection, error=str(e))
                raise StoreError(str(e), collection=collection, operation=operation) from e

        return await asyncio.to_thread(_call)

    async def select(self, collection: str, filters: Optional[Filters] = None) -> list[Row]:
        model = _model_for(collection)
        clauses = _where(model, filters)

        def _query(session: Session) -> list[Row]:
            return [_to_row(obj) for obj in session.scalars(sql_select(model).where(*clauses)).all()]

        return await self._run("select", collection, _query)

    async def insert(self, collection: str, rows: list[Row]) -> list[Row]:
        model = _model_for(collection)

        def _insert(session: Session) -> list[Row]:
            objs = [model(**_clean(model, r)) for r in rows]
            session.add_all(objs)
            session.flush()
            return [_to_row(o) for o in objs]

        return await self._run("insert", collection, _insert)

    async def update(self, collection: str, filters: Filters, patch: Row) -> int:
        model = _model_for(collection)
        clauses = _where(model, filters)
        values = _clean(model, patch)

        def _update(session: Session) -> int:
            return session.execute(sql_update(model).where(*clauses).values(**values)).rowcount

        return await self._run("update", collection, _update)

    async def delete(self, collection: str, filters: Filters) -> int:
        model = _model_for(collection)
        clauses = _where(model, filters)

        def _delete(session: Session) -> int:
            return session.execute(sql_delete(model).where(*clauses)).rowcount

        return await self._run("delete", collection, _delete)

    async def replace(self, collection: str, filters: Filters, rows: list[Row]) -> int:
        """Delete matching rows and insert rows in a single transaction."""
        model = _model_for(collection)
        clauses = _where(model, filters)

        def _replace(session: Session) -> int:
            deleted = session.execute(sql_delete(model).where(*clauses)).rowcount
            session.add_all([model(**_clean(model, r)) for r in rows])
            session.flush()
            logger.debug("sql_store.replace", collection=collection, deleted=deleted, inserted=len(rows))
            return len(rows)

        return await self._run("replace", collection, _replace)

    async def bulk_upsert(
        self,
        collection: str,
        key_fields: list[str],
        rows: list[Row],
        insert_only_fields: Optional[list[str]] = None,
    ) -> list[UpsertStatus]:
        """Upsert rows in one session; each row gets its own savepoint so one failure does not undo others."""
        model = _model_for(collection)
        skip = set(key_fields) | set(insert_only_fields or []) | {"id"}

        def _upsert(session: Session) -> list[UpsertStatus]:
            statuses: list[UpsertStatus] = []
            for row in rows:
                values = _clean(model, row)
                key_clauses = _where(model, {f: row.get(f) for f in key_fields})
                try:
                    with session.begin_nested():
                        existing = session.scalars(sql_select(model).where(*key_clauses)).first()
                        if existing is not None:
                            for k, v in values.items():
                                if k not in skip:
                                    setattr(existing, k, v)
                            action = RowAction.UPDATE
                        else:
                            session.add(model(**values))
                            action = RowAction.INSERT
                        session.flush()
                    statuses.append(UpsertStatus(ok=True, action=action))
                except DB_ERRORS as e:
                    logger.warning("sql_store.bulk_upsert.row_failed", collection=collection, error=str(e))
                    statuses.append(UpsertStatus(ok=False, error=str(e)))
            return statuses

        return await self._run("bulk_upsert", collection, _upsert)
