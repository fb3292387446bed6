from __future__ import annotations

from typing import Callable

from tableside.application.dto.responses import OrderDetailResponse
from tableside.application.errors import OrderNotFoundError
from tableside.application.mappers.order_mapper import to_order_detail_response
from tableside.application.ports.repositories import UnitOfWork
from tableside.domain.common.ids import OrderId


class GetOrder:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: OrderId) -> OrderDetailResponse:
        with self._uow_factory() as uow:
            detail = uow.orders.get_detail(order_id)
        if detail is None:
            raise OrderNotFoundError(f"order {order_id} not found", details={"orderId": order_id})
        return to_order_detail_response(detail.order, detail.table_number)
