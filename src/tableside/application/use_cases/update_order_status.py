from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from tableside.application.dto.responses import OrderStatusResponse
from tableside.application.errors import (
    InvalidOrderStatusError,
    InvalidOrderTransitionError,
    OrderNotFoundError,
)
from tableside.application.metrics.order_lifecycle import record_transition
from tableside.application.ports.repositories import PersistenceError, UnitOfWork
from tableside.domain.common.ids import OrderId
from tableside.domain.order.entities import (
    OrderStatus,
    OrderTransitionError,
    UnknownOrderStatusError,
    parse_order_status,
)

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(self, order_id: OrderId, status: str) -> OrderStatusResponse:
        try:
            new_status = parse_order_status(status)
        except UnknownOrderStatusError as exc:
            raise InvalidOrderStatusError(
                str(exc),
                details={"allowed": [value.value for value in OrderStatus]},
            ) from exc

        now = datetime.now(timezone.utc)
        try:
            with self._uow_factory() as uow:
                order = uow.orders.get(order_id)
                if order is None:
                    raise OrderNotFoundError(
                        f"order {order_id} not found",
                        details={"orderId": order_id},
                    )

                try:
                    updated = order.transition_to(new_status, now)
                except OrderTransitionError as exc:
                    raise InvalidOrderTransitionError(str(exc)) from exc

                uow.orders.update_status(updated)
                uow.commit()
        except PersistenceError:
            logger.exception("order_status_update_failed", extra={"order_id": order_id})
            raise

        if updated.status != order.status:
            record_transition(order, new_status, now=now)
            logger.info(
                "order_status_updated",
                extra={"order_id": order_id, "status": new_status.value},
            )
        return OrderStatusResponse(id=str(updated.order_id), status=updated.status.value)
