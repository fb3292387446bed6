from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from tableside.domain.common.ids import (
    GuestSessionId,
    MenuItemId,
    OrderId,
    OrderItemId,
    TableSessionId,
)
from tableside.domain.common.money import OrderTotals, compute_totals


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


TERMINAL_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.REJECTED}
)


class UnknownOrderStatusError(ValueError):
    pass


class OrderTransitionError(Exception):
    pass


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as exc:
        raise UnknownOrderStatusError(f"invalid status: {value}") from exc


@dataclass(frozen=True)
class OrderItem:
    item_id: OrderItemId
    menu_item_id: MenuItemId
    name: str
    quantity: int
    price: int
    status: OrderStatus = OrderStatus.PENDING

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.price < 0:
            raise ValueError("price must be >= 0")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    table_session_id: TableSessionId
    guest_session_id: GuestSessionId
    status: OrderStatus
    preparation_time: int
    items: list[OrderItem]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        if self.preparation_time < 0:
            raise ValueError("preparation_time must be >= 0")

    @property
    def totals(self) -> OrderTotals:
        return compute_totals(self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, status: OrderStatus, now: datetime) -> Order:
        # Any known status is reachable from a live order; finished orders stay finished.
        if status == self.status:
            return replace(self, updated_at=now)
        if self.is_terminal:
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={status.value}"
            )
        return replace(self, status=status, updated_at=now)


def create_pending_order(
    order_id: OrderId,
    table_session_id: TableSessionId,
    guest_session_id: GuestSessionId,
    items: list[OrderItem],
    preparation_time: int,
    now: datetime,
) -> Order:
    if not items:
        raise ValueError("order must contain at least one item")
    return Order(
        order_id=order_id,
        table_session_id=table_session_id,
        guest_session_id=guest_session_id,
        status=OrderStatus.PENDING,
        preparation_time=preparation_time,
        items=items,
        created_at=now,
        updated_at=now,
    )
