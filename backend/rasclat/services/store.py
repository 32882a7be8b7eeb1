"""CRUD over the content tables.

``Repository`` wraps one model. Reads take a tuple of loader options (the
join shape) and use the model's sort order; lookups accept either an internal
id or a slug.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import DuplicateKeyError
from ..utils.ids import is_object_id

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(getattr(exc, 'orig', exc)).lower()
    return 'unique' in text or 'duplicate' in text


class Repository:
    def __init__(self, db: Session, model, order_by: Sequence[Any] = (), options: Sequence[Any] = ()):
        self.db = db
        self.model = model
        self.order_by = tuple(order_by)
        self.options = tuple(options)

    def _select(self, options=None):
        stmt = select(self.model)
        opts = self.options if options is None else tuple(options)
        if opts:
            stmt = stmt.options(*opts)
        return stmt

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if _is_unique_violation(exc):
                raise DuplicateKeyError(str(exc.orig), exc) from exc
            raise

    def create(self, fields: Mapping[str, Any]):
        obj = self.model(**fields)
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        logger.info("created %s %s", self.model.__tablename__, obj.id)
        return obj

    def get(self, record_id: str, options=None):
        if not is_object_id(record_id):
            return None
        stmt = self._select(options).where(self.model.id == record_id)
        return self.db.execute(stmt).unique().scalar_one_or_none()

    def find_one(self, identifier: str, options=None):
        """Look up by id when ``identifier`` is id-shaped, otherwise by slug."""
        if is_object_id(identifier):
            return self.get(identifier, options)
        stmt = self._select(options).where(self.model.slug == identifier).order_by(self.model.created_at.desc())
        return self.db.execute(stmt).unique().scalars().first()

    def find_many(self, options=None, order_by=None, limit: int | None = None, **filters) -> list:
        stmt = self._select(options)
        for name, value in filters.items():
            column = getattr(self.model, name)
            stmt = stmt.where(column.in_(value) if isinstance(value, (list, tuple, set)) else column == value)
        stmt = stmt.order_by(*(self.order_by if order_by is None else order_by))
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).unique().scalars().all())

    def update(self, record_id: str, fields: Mapping[str, Any]):
        obj = self.get(record_id)
        if obj is None:
            return None
        for name, value in fields.items():
            setattr(obj, name, value)
        self._commit()
        self.db.refresh(obj)
        logger.info("updated %s %s (%s)", self.model.__tablename__, obj.id, ', '.join(fields))
        return obj

    def set_object_id(self, record_id: str, object_id: str):
        return self.update(record_id, {'object_id': object_id})

    def delete(self, record_id: str) -> bool:
        obj = self.get(record_id)
        if obj is None:
            return False
        self.db.delete(obj)
        self._commit()
        logger.info("deleted %s %s", self.model.__tablename__, record_id)
        return True

    def count(self, **filters) -> int:
        return len(self.find_many(options=(), **filters))
