from __future__ import annotations

from tableside.application.dto.responses import (
    OrderDetailResponse,
    OrderItemDetailResponse,
    OrderReceiptResponse,
    OrderSummaryResponse,
)
from tableside.domain.common.ids import TableNumber
from tableside.domain.order.entities import Order


def to_order_receipt_response(order: Order, guest_token: str) -> OrderReceiptResponse:
    totals = order.totals
    return OrderReceiptResponse(
        orderId=str(order.order_id),
        status=order.status.value,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        preparationTime=order.preparation_time,
        guestToken=guest_token,
    )


def to_order_detail_response(order: Order, table_number: TableNumber) -> OrderDetailResponse:
    totals = order.totals
    return OrderDetailResponse(
        id=str(order.order_id),
        tableNumber=int(table_number),
        status=order.status.value,
        preparationTime=order.preparation_time,
        createdAt=order.created_at,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        items=[
            OrderItemDetailResponse(
                menuItemId=int(item.menu_item_id),
                name=item.name,
                quantity=item.quantity,
                price=item.price,
                total=item.line_total,
            )
            for item in order.items
        ],
    )


def to_order_summary_response(order: Order) -> OrderSummaryResponse:
    totals = order.totals
    return OrderSummaryResponse(
        id=str(order.order_id),
        status=order.status.value,
        createdAt=order.created_at,
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        itemCount=order.item_count,
    )
