"""
Row-level facade over the SQLAlchemy session.

Services never touch models directly: they go through :class:`Store`, which
speaks in table names, simple filters and plain ``dict`` rows. Every failure
raised by SQLAlchemy is turned into :class:`~nesttask.errors.StoreError` after
the session has been rolled back, so one failed call never poisons the next.
Each mutation commits on its own.
"""
import logging
from collections import namedtuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.inspection import inspect

from .errors import StoreError
from .extensions import db
from .models import Course, StudyMaterial, Task, Teacher, User

logger = logging.getLogger(__name__)

TABLES = {
    "courses": Course,
    "study_materials": StudyMaterial,
    "teachers": Teacher,
    "tasks": Task,
    "users": User,
}

Filter = namedtuple("Filter", "column op value")


def eq(column, value):
    return Filter(column, "eq", value)


def ieq(column, value):
    """Case-insensitive equality on a string column."""
    return Filter(column, "ieq", value)


def any_of(column, values):
    return Filter(column, "in", tuple(values))


def serialize(instance):
    return {attr.key: getattr(instance, attr.key) for attr in inspect(instance).mapper.column_attrs}


class Store:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _model(self, table):
        try:
            return TABLES[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    def _clause(self, model, f):
        col = getattr(model, f.column)
        if f.op == "ieq":
            return func.lower(col) == (f.value or "").lower()
        if f.op == "in":
            return col.in_(f.value)
        if f.value is None:
            return col.is_(None)
        return col == f.value

    def _statement(self, table, filters, order_by=None, descending=False):
        model = self._model(table)
        stmt = select(model).where(*[self._clause(model, f) for f in filters])
        if order_by:
            col = getattr(model, order_by)
            stmt = stmt.order_by(col.desc() if descending else col.asc())
        return stmt

    def _fail(self, action, table, exc):
        self.session.rollback()
        conflict = isinstance(exc, IntegrityError)
        message = str(getattr(exc, "orig", None) or exc)
        logger.warning("%s on %s failed: %s", action, table, message)
        return StoreError(message, conflict=conflict)

    def select(self, table, *filters, order_by=None, descending=False):
        stmt = self._statement(table, filters, order_by, descending)
        try:
            rows = self.session.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._fail("select", table, e) from e
        return [serialize(r) for r in rows]

    def select_one_or_none(self, table, *filters):
        """Return the single matching row, ``None``, or raise if several match."""
        stmt = self._statement(table, filters)
        try:
            row = self.session.scalars(stmt).one_or_none()
        except SQLAlchemyError as e:
            raise self._fail("select one", table, e) from e
        return serialize(row) if row is not None else None

    def insert(self, table, record):
        # unset keys fall back to column defaults
        obj = self._model(table)(**{k: v for k, v in record.items() if v is not None})
        self.session.add(obj)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("insert", table, e) from e
        return serialize(obj)

    def update(self, table, filters, changes):
        stmt = self._statement(table, filters)
        try:
            obj = self.session.scalars(stmt).one_or_none()
            if obj is None:
                return None
            for key, value in changes.items():
                setattr(obj, key, value)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", table, e) from e
        return serialize(obj)

    def delete(self, table, *filters):
        """Delete matching rows through the ORM (so cascades apply); return the count."""
        stmt = self._statement(table, filters)
        try:
            rows = self.session.scalars(stmt).all()
            for obj in rows:
                self.session.delete(obj)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", table, e) from e
        return len(rows)

    def count_by(self, table, column):
        col = getattr(self._model(table), column)
        try:
            pairs = self.session.execute(select(col, func.count()).group_by(col)).all()
        except SQLAlchemyError as e:
            raise self._fail("count", table, e) from e
        return {key: n for key, n in pairs}
