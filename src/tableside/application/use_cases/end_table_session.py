from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from tableside.application.dto.responses import SuccessResponse
from tableside.application.errors import TableNotFoundError
from tableside.application.metrics.order_lifecycle import record_table_sessions_ended
from tableside.application.ports.repositories import PersistenceError, UnitOfWork
from tableside.application.use_cases.session_manager import validate_table_number

logger = logging.getLogger(__name__)


class EndTableSession:
    """Clears a table for the next party.

    Completes the active seating and then every guest session that ever sat at
    the table, so no guest token from an earlier seating stays active.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(self, table_number: int) -> SuccessResponse:
        number = validate_table_number(table_number)
        now = datetime.now(timezone.utc)

        try:
            with self._uow_factory() as uow:
                table = uow.tables.get_by_number(number)
                if table is None:
                    raise TableNotFoundError(
                        f"table {number} not found",
                        details={"tableNumber": int(number)},
                    )
                ended = uow.table_sessions.complete_active(table.table_id, now)
                released = uow.guest_sessions.complete_for_table(table.table_id, now)
                uow.commit()
        except PersistenceError:
            logger.exception("table_session_end_failed", extra={"table_number": number})
            raise

        record_table_sessions_ended(ended)
        logger.info(
            "table_session_ended",
            extra={
                "table_number": number,
                "table_sessions": ended,
                "guest_sessions": released,
            },
        )
        return SuccessResponse(success=True)
