from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from tableside.application.dto.requests import CreateOrderRequest
from tableside.application.dto.responses import OrderReceiptResponse
from tableside.application.errors import (
    EmptyCartError,
    InvalidCartLineError,
    MenuItemUnavailableError,
)
from tableside.application.mappers.order_mapper import to_order_receipt_response
from tableside.application.metrics.order_lifecycle import (
    record_cart_rejected,
    record_order_created,
)
from tableside.application.ports.repositories import PersistenceError, UnitOfWork
from tableside.application.use_cases.session_manager import (
    DEFAULT_QR_BASE_URL,
    SessionManager,
    normalize_guest_token,
    validate_table_number,
)
from tableside.domain.common.ids import MAX_STORED_INT, MenuItemId, OrderId, OrderItemId
from tableside.domain.menu.entities import preparation_time_for
from tableside.domain.order.entities import OrderItem, create_pending_order

logger = logging.getLogger(__name__)


class CreateOrder:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        *,
        qr_base_url: str = DEFAULT_QR_BASE_URL,
    ) -> None:
        self._uow_factory = uow_factory
        self._qr_base_url = qr_base_url

    def execute(self, request_dto: CreateOrderRequest) -> OrderReceiptResponse:
        table_number = validate_table_number(request_dto.table)
        if not request_dto.items:
            record_cart_rejected("empty_cart")
            raise EmptyCartError("cart must contain at least one item")
        for line in request_dto.items:
            if not 1 <= line.menu_item_id <= MAX_STORED_INT:
                record_cart_rejected("invalid_menu_item_id")
                raise InvalidCartLineError(
                    f"invalid menu item id: {line.menu_item_id}",
                    details={"menuItemId": line.menu_item_id},
                )
            if not 1 <= line.quantity <= MAX_STORED_INT:
                record_cart_rejected("invalid_quantity")
                raise InvalidCartLineError(
                    f"quantity must be between 1 and {MAX_STORED_INT} "
                    f"for menu item {line.menu_item_id}",
                    details={"menuItemId": line.menu_item_id},
                )
        guest_token = normalize_guest_token(request_dto.guest_token)

        requested_ids = list(
            dict.fromkeys(MenuItemId(line.menu_item_id) for line in request_dto.items)
        )

        try:
            with self._uow_factory() as uow:
                available = {
                    item.item_id: item for item in uow.menu.find_available_items(requested_ids)
                }
                missing = [item_id for item_id in requested_ids if item_id not in available]
                if missing:
                    record_cart_rejected("unavailable_item")
                    raise MenuItemUnavailableError(
                        "some menu items are not available or do not exist",
                        details={"menuItemIds": [int(item_id) for item_id in missing]},
                    )

                context = SessionManager(uow, qr_base_url=self._qr_base_url).resolve(
                    table_number,
                    guest_token,
                )

                # One row per submitted line; repeated menu items are not merged.
                order_items: list[OrderItem] = []
                for line in request_dto.items:
                    menu_item = available[MenuItemId(line.menu_item_id)]
                    order_items.append(
                        OrderItem(
                            item_id=OrderItemId(f"oit_{uuid4().hex[:12]}"),
                            menu_item_id=menu_item.item_id,
                            name=menu_item.name,
                            quantity=line.quantity,
                            price=menu_item.price,
                        )
                    )
                order = create_pending_order(
                    order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
                    table_session_id=context.table_session.session_id,
                    guest_session_id=context.guest_session.session_id,
                    items=order_items,
                    preparation_time=preparation_time_for(list(available.values())),
                    now=datetime.now(timezone.utc),
                )
                uow.orders.add(order)
                uow.commit()
        except PersistenceError:
            logger.exception("order_create_failed", extra={"table_number": table_number})
            raise

        record_order_created(order)
        logger.info(
            "order_created",
            extra={
                "order_id": str(order.order_id),
                "table_number": table_number,
                "guest_session_id": str(context.guest_session.session_id),
            },
        )
        return to_order_receipt_response(order, context.guest_session.guest_token)
