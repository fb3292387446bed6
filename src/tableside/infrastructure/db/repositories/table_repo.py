from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tableside.application.ports.repositories import (
    GuestSessionRepository,
    TableRepository,
    TableSessionRepository,
)
from tableside.domain.common.ids import (
    GuestSessionId,
    TableId,
    TableNumber,
    TableSessionId,
)
from tableside.domain.session.entities import GuestSession, SessionStatus, TableSession
from tableside.domain.table.entities import Table
from tableside.infrastructure.db.models.table import (
    GuestSessionModel,
    TableModel,
    TableSessionModel,
)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_number(self, table_number: TableNumber) -> Table | None:
        statement = select(TableModel).where(TableModel.table_number == int(table_number))
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, table_number: TableNumber, qr_code_url: str | None) -> Table:
        model = TableModel(
            table_number=int(table_number),
            qr_code_url=qr_code_url,
            is_active=True,
        )
        try:
            with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError:
            existing = self.get_by_number(table_number)
            if existing is None:
                raise
            return existing
        return self._to_domain(model)

    def list_all(self) -> list[Table]:
        statement = select(TableModel).order_by(TableModel.table_number)
        return [self._to_domain(model) for model in self._session.execute(statement).scalars()]

    def _to_domain(self, model: TableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            table_number=TableNumber(model.table_number),
            qr_code_url=model.qr_code_url,
            is_active=model.is_active,
        )


class SqlAlchemyTableSessionRepository(TableSessionRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_active(self, table_id: TableId) -> TableSession | None:
        statement = (
            select(TableSessionModel)
            .where(
                TableSessionModel.table_id == int(table_id),
                TableSessionModel.status == SessionStatus.ACTIVE.value,
            )
            .order_by(TableSessionModel.created_at.desc())
            .limit(1)
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, table_session: TableSession) -> TableSession:
        model = TableSessionModel(
            id=str(table_session.session_id),
            table_id=int(table_session.table_id),
            status=table_session.status.value,
            created_at=table_session.created_at,
            updated_at=table_session.updated_at,
        )
        try:
            with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError:
            existing = self.find_active(table_session.table_id)
            if existing is None:
                raise
            return existing
        return table_session

    def list_active_ids(self, table_id: TableId) -> list[TableSessionId]:
        statement = select(TableSessionModel.id).where(
            TableSessionModel.table_id == int(table_id),
            TableSessionModel.status == SessionStatus.ACTIVE.value,
        )
        return [TableSessionId(value) for value in self._session.execute(statement).scalars()]

    def complete_active(self, table_id: TableId, now: datetime) -> int:
        statement = (
            update(TableSessionModel)
            .where(
                TableSessionModel.table_id == int(table_id),
                TableSessionModel.status == SessionStatus.ACTIVE.value,
            )
            .values(status=SessionStatus.COMPLETED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(statement).rowcount or 0)

    def _to_domain(self, model: TableSessionModel) -> TableSession:
        return TableSession(
            session_id=TableSessionId(model.id),
            table_id=TableId(model.table_id),
            status=SessionStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )


class SqlAlchemyGuestSessionRepository(GuestSessionRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_token(self, guest_token: str) -> GuestSession | None:
        statement = select(GuestSessionModel).where(GuestSessionModel.guest_token == guest_token)
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def find_active(self, table_session_id: TableSessionId) -> GuestSession | None:
        statement = (
            select(GuestSessionModel)
            .where(
                GuestSessionModel.table_session_id == str(table_session_id),
                GuestSessionModel.status == SessionStatus.ACTIVE.value,
            )
            .order_by(GuestSessionModel.created_at.desc())
            .limit(1)
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, guest_session: GuestSession) -> GuestSession:
        model = GuestSessionModel(
            id=str(guest_session.session_id),
            table_session_id=str(guest_session.table_session_id),
            guest_token=guest_session.guest_token,
            status=guest_session.status.value,
            created_at=guest_session.created_at,
            updated_at=guest_session.updated_at,
        )
        try:
            with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError:
            existing = self.find_by_token(guest_session.guest_token)
            if existing is None:
                raise
            return existing
        return guest_session

    def update(self, guest_session: GuestSession) -> None:
        statement = (
            update(GuestSessionModel)
            .where(GuestSessionModel.id == str(guest_session.session_id))
            .values(
                table_session_id=str(guest_session.table_session_id),
                status=guest_session.status.value,
                updated_at=guest_session.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        self._session.execute(statement)

    def complete_for_table(self, table_id: TableId, now: datetime) -> int:
        table_sessions = select(TableSessionModel.id).where(
            TableSessionModel.table_id == int(table_id)
        )
        statement = (
            update(GuestSessionModel)
            .where(
                GuestSessionModel.table_session_id.in_(table_sessions),
                GuestSessionModel.status == SessionStatus.ACTIVE.value,
            )
            .values(status=SessionStatus.COMPLETED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return int(self._session.execute(statement).rowcount or 0)

    def _to_domain(self, model: GuestSessionModel) -> GuestSession:
        return GuestSession(
            session_id=GuestSessionId(model.id),
            table_session_id=TableSessionId(model.table_session_id),
            guest_token=model.guest_token,
            status=SessionStatus(model.status),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
