from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

from tableside.domain.order.entities import Order, OrderStatus

ORDERS_CREATED_TOTAL = Counter(
    "tableside_orders_created_total",
    "Total number of orders created.",
)

ORDER_ITEMS_TOTAL = Counter(
    "tableside_order_items_total",
    "Total number of order item rows created.",
)

ORDER_REJECTED_CARTS_TOTAL = Counter(
    "tableside_order_rejected_carts_total",
    "Total number of carts rejected before an order was created.",
    ["reason"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "tableside_order_transition_total",
    "Total number of order status transitions.",
    ["from", "to"],
)

ORDER_TIME_IN_FLIGHT_SECONDS = Histogram(
    "tableside_order_time_to_status_seconds",
    "Time between order creation and a status update.",
    ["to"],
)

TABLE_SESSIONS_OPENED_TOTAL = Counter(
    "tableside_table_sessions_opened_total",
    "Total number of table sessions opened.",
)

TABLE_SESSIONS_ENDED_TOTAL = Counter(
    "tableside_table_sessions_ended_total",
    "Total number of table sessions completed by staff.",
)

GUEST_SESSIONS_TOTAL = Counter(
    "tableside_guest_sessions_total",
    "Guest session resolutions by outcome.",
    ["action"],
)


def record_order_created(order: Order) -> None:
    ORDERS_CREATED_TOTAL.inc()
    ORDER_ITEMS_TOTAL.inc(len(order.items))


def record_cart_rejected(reason: str) -> None:
    ORDER_REJECTED_CARTS_TOTAL.labels(reason=reason).inc()


def record_transition(
    order: Order,
    to_status: OrderStatus,
    now: datetime | None = None,
) -> None:
    current = now or datetime.now(timezone.utc)
    ORDER_TRANSITION_TOTAL.labels(**{"from": order.status.value, "to": to_status.value}).inc()
    ORDER_TIME_IN_FLIGHT_SECONDS.labels(to=to_status.value).observe(
        max((current - order.created_at).total_seconds(), 0.0)
    )


def record_table_session_opened() -> None:
    TABLE_SESSIONS_OPENED_TOTAL.inc()


def record_table_sessions_ended(count: int) -> None:
    if count > 0:
        TABLE_SESSIONS_ENDED_TOTAL.inc(count)


def record_guest_session(action: str) -> None:
    GUEST_SESSIONS_TOTAL.labels(action=action).inc()
