from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from tableside.application.errors import InvalidGuestTokenError, InvalidTableNumberError
from tableside.application.metrics.order_lifecycle import (
    record_guest_session,
    record_table_session_opened,
)
from tableside.application.ports.repositories import UnitOfWork
from tableside.domain.common.ids import GuestSessionId, TableNumber, TableSessionId
from tableside.domain.session.entities import (
    MAX_GUEST_TOKEN_LENGTH,
    GuestSession,
    GuestSessionAction,
    TableSession,
    decide_guest_session_action,
    open_guest_session,
    open_table_session,
)
from tableside.domain.table.entities import InvalidTableNumberError as DomainTableNumberError
from tableside.domain.table.entities import Table, parse_table_number, placeholder_qr_code_url

logger = logging.getLogger(__name__)

DEFAULT_QR_BASE_URL = "https://cafe-ordering.com/qr"

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def validate_table_number(value: int) -> TableNumber:
    try:
        return parse_table_number(value)
    except DomainTableNumberError as exc:
        raise InvalidTableNumberError(str(exc)) from exc


def normalize_guest_token(value: str | None) -> str | None:
    token = value.strip() if value else ""
    if not token:
        return None
    if len(token) > MAX_GUEST_TOKEN_LENGTH:
        raise InvalidGuestTokenError(
            f"guest token must be at most {MAX_GUEST_TOKEN_LENGTH} characters",
            details={"maxLength": MAX_GUEST_TOKEN_LENGTH},
        )
    return token


def generate_guest_token(now: datetime) -> str:
    suffix = "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(9))
    return f"guest_{int(now.timestamp() * 1000)}_{suffix}"


@dataclass(frozen=True)
class SessionContext:
    table: Table
    table_session: TableSession
    guest_session: GuestSession


class SessionManager:
    """Resolves the (table, table session, guest session) triple an order attaches to.

    Works inside the caller's unit of work; nothing is committed here. Every
    create goes through a repository ``add`` that returns the surviving row when
    a concurrent request won the race, so callers converge on one active row.
    """

    def __init__(self, uow: UnitOfWork, qr_base_url: str = DEFAULT_QR_BASE_URL) -> None:
        self._uow = uow
        self._qr_base_url = qr_base_url

    def resolve(self, table_number: TableNumber, guest_token: str | None = None) -> SessionContext:
        table = self.resolve_table(table_number)
        table_session = self.resolve_table_session(table)
        guest_session = self.resolve_guest_session(table_session, guest_token)
        return SessionContext(
            table=table,
            table_session=table_session,
            guest_session=guest_session,
        )

    def resolve_table(self, table_number: TableNumber) -> Table:
        table = self._uow.tables.get_by_number(table_number)
        if table is not None:
            return table

        created = self._uow.tables.add(
            table_number=table_number,
            qr_code_url=placeholder_qr_code_url(self._qr_base_url, table_number),
        )
        logger.info("table_created", extra={"table_number": table_number})
        return created

    def resolve_table_session(self, table: Table) -> TableSession:
        current = self._uow.table_sessions.find_active(table.table_id)
        if current is not None:
            return current

        candidate = open_table_session(
            session_id=TableSessionId(f"tss_{uuid4().hex[:12]}"),
            table_id=table.table_id,
            now=datetime.now(timezone.utc),
        )
        persisted = self._uow.table_sessions.add(candidate)
        if persisted.session_id == candidate.session_id:
            record_table_session_opened()
            logger.info(
                "table_session_opened",
                extra={"table_number": table.table_number},
            )
        return persisted

    def resolve_guest_session(
        self,
        table_session: TableSession,
        guest_token: str | None,
    ) -> GuestSession:
        now = datetime.now(timezone.utc)
        token = normalize_guest_token(guest_token)

        if not token:
            current = self._uow.guest_sessions.find_active(table_session.session_id)
            if current is not None:
                record_guest_session(GuestSessionAction.REUSE.value)
                return current
            return self._create_guest_session(table_session, generate_guest_token(now), now)

        existing = self._uow.guest_sessions.find_by_token(token)
        action = decide_guest_session_action(existing, table_session)
        if existing is None or action == GuestSessionAction.CREATE:
            return self._create_guest_session(table_session, token, now)
        if action == GuestSessionAction.REUSE:
            record_guest_session(action.value)
            return existing
        return self._reattach(existing, table_session, now)

    def _create_guest_session(
        self,
        table_session: TableSession,
        guest_token: str,
        now: datetime,
    ) -> GuestSession:
        candidate = open_guest_session(
            session_id=GuestSessionId(f"gss_{uuid4().hex[:12]}"),
            table_session=table_session,
            guest_token=guest_token,
            now=now,
        )
        persisted = self._uow.guest_sessions.add(candidate)
        if persisted.session_id != candidate.session_id and not persisted.is_bound_to(
            table_session
        ):
            # Another request claimed the token first, on an older seating.
            return self._reattach(persisted, table_session, now)
        record_guest_session(GuestSessionAction.CREATE.value)
        return persisted

    def _reattach(
        self,
        guest_session: GuestSession,
        table_session: TableSession,
        now: datetime,
    ) -> GuestSession:
        reattached = guest_session.reattach(table_session, now)
        self._uow.guest_sessions.update(reattached)
        record_guest_session(GuestSessionAction.REATTACH.value)
        logger.info(
            "guest_session_reattached",
            extra={"guest_session_id": str(reattached.session_id)},
        )
        return reattached
