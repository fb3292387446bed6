from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside.application.ports.repositories import PersistenceError, UnitOfWork
from tableside.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from tableside.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from tableside.infrastructure.db.repositories.table_repo import (
    SqlAlchemyGuestSessionRepository,
    SqlAlchemyTableRepository,
    SqlAlchemyTableSessionRepository,
)
from tableside.infrastructure.db.session import get_engine


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Binds every repository to one ``Session`` so a use case commits once.

    Leaving the block without ``commit()`` rolls back. Driver and ORM failures
    surface as ``PersistenceError``.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = Session(self._engine, expire_on_commit=False)
        self.tables = SqlAlchemyTableRepository(self._session)
        self.table_sessions = SqlAlchemyTableSessionRepository(self._session)
        self.guest_sessions = SqlAlchemyGuestSessionRepository(self._session)
        self.menu = SqlAlchemyMenuRepository(self._session)
        self.orders = SqlAlchemyOrderRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self._session
        self._session = None
        if session is None:
            return
        try:
            session.rollback()
        finally:
            session.close()
        if isinstance(exc, SQLAlchemyError):
            raise PersistenceError(str(exc)) from exc

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
