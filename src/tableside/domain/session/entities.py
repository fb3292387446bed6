from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from tableside.domain.common.ids import GuestSessionId, TableId, TableSessionId

MAX_GUEST_TOKEN_LENGTH = 255


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TableSession:
    session_id: TableSessionId
    table_id: TableId
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def complete(self, now: datetime) -> TableSession:
        if not self.is_active:
            return self
        return replace(self, status=SessionStatus.COMPLETED, updated_at=now)


@dataclass(frozen=True)
class GuestSession:
    session_id: GuestSessionId
    table_session_id: TableSessionId
    guest_token: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.guest_token.strip():
            raise ValueError("guest_token must be non-empty")

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def is_bound_to(self, table_session: TableSession) -> bool:
        return self.is_active and self.table_session_id == table_session.session_id

    def reattach(self, table_session: TableSession, now: datetime) -> GuestSession:
        return replace(
            self,
            table_session_id=table_session.session_id,
            status=SessionStatus.ACTIVE,
            updated_at=now,
        )


class GuestSessionAction(str, Enum):
    REUSE = "reuse"
    REATTACH = "reattach"
    CREATE = "create"


def decide_guest_session_action(
    existing: GuestSession | None,
    table_session: TableSession,
) -> GuestSessionAction:
    """Decide what to do with a guest token that was looked up globally.

    A token that already belongs to the table's current session is reused as-is.
    A token left behind by an earlier seating, or one that was completed, is
    moved onto the current session instead of spawning a second row.
    """
    if existing is None:
        return GuestSessionAction.CREATE
    if existing.is_bound_to(table_session):
        return GuestSessionAction.REUSE
    return GuestSessionAction.REATTACH


def open_table_session(
    session_id: TableSessionId,
    table_id: TableId,
    now: datetime,
) -> TableSession:
    return TableSession(
        session_id=session_id,
        table_id=table_id,
        status=SessionStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )


def open_guest_session(
    session_id: GuestSessionId,
    table_session: TableSession,
    guest_token: str,
    now: datetime,
) -> GuestSession:
    return GuestSession(
        session_id=session_id,
        table_session_id=table_session.session_id,
        guest_token=guest_token,
        status=SessionStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
