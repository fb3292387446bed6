from __future__ import annotations

from typing import Callable

from tableside.application.dto.responses import OrderSummaryResponse
from tableside.application.errors import TableNotFoundError
from tableside.application.mappers.order_mapper import to_order_summary_response
from tableside.application.ports.repositories import UnitOfWork
from tableside.application.use_cases.session_manager import (
    normalize_guest_token,
    validate_table_number,
)


class TableOrders:
    """Orders placed during the table's current seating, newest first."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(
        self,
        table_number: int,
        guest_token: str | None = None,
    ) -> list[OrderSummaryResponse]:
        number = validate_table_number(table_number)
        token = normalize_guest_token(guest_token)

        with self._uow_factory() as uow:
            table = uow.tables.get_by_number(number)
            if table is None:
                raise TableNotFoundError(
                    f"table {number} not found",
                    details={"tableNumber": int(number)},
                )

            session_ids = uow.table_sessions.list_active_ids(table.table_id)
            if not session_ids:
                return []

            guest_session_id = None
            if token:
                guest_session = uow.guest_sessions.find_by_token(token)
                if guest_session is None:
                    return []
                guest_session_id = guest_session.session_id

            orders = uow.orders.list_for_table_sessions(
                table_session_ids=session_ids,
                guest_session_id=guest_session_id,
            )

        orders.sort(key=lambda order: order.created_at, reverse=True)
        return [to_order_summary_response(order) for order in orders]
