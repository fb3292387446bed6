from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from tableside.domain.common.ids import (
    GuestSessionId,
    MenuCategoryId,
    MenuItemId,
    OrderId,
    TableId,
    TableNumber,
    TableSessionId,
)
from tableside.domain.menu.entities import MenuCategory, MenuItem
from tableside.domain.order.entities import Order
from tableside.domain.session.entities import GuestSession, TableSession
from tableside.domain.table.entities import Table


class TableRepository(Protocol):
    def get_by_number(self, table_number: TableNumber) -> Table | None: ...

    def add(self, table_number: TableNumber, qr_code_url: str | None) -> Table: ...

    def list_all(self) -> list[Table]: ...


class TableSessionRepository(Protocol):
    def find_active(self, table_id: TableId) -> TableSession | None: ...

    def add(self, table_session: TableSession) -> TableSession: ...

    def list_active_ids(self, table_id: TableId) -> list[TableSessionId]: ...

    def complete_active(self, table_id: TableId, now: datetime) -> int: ...


class GuestSessionRepository(Protocol):
    def find_by_token(self, guest_token: str) -> GuestSession | None: ...

    def find_active(self, table_session_id: TableSessionId) -> GuestSession | None: ...

    def add(self, guest_session: GuestSession) -> GuestSession: ...

    def update(self, guest_session: GuestSession) -> None: ...

    def complete_for_table(self, table_id: TableId, now: datetime) -> int: ...


class MenuRepository(Protocol):
    def list_active_categories(self) -> list[MenuCategory]: ...

    def find_available_items(self, item_ids: list[MenuItemId]) -> list[MenuItem]: ...

    def get_category(self, category_id: MenuCategoryId) -> MenuCategory | None: ...

    def add_category(self, name: str) -> MenuCategory: ...

    def delete_category(self, category_id: MenuCategoryId) -> bool: ...

    def get_item(self, item_id: MenuItemId) -> MenuItem | None: ...

    def add_item(self, draft: MenuItemDraft) -> MenuItem: ...

    def update_item(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem | None: ...

    def delete_item(self, item_id: MenuItemId) -> bool: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def get_detail(self, order_id: OrderId) -> OrderDetailData | None: ...

    def list_for_table_sessions(
        self,
        table_session_ids: list[TableSessionId],
        guest_session_id: GuestSessionId | None,
    ) -> list[Order]: ...

    def update_status(self, order: Order) -> None: ...


class UnitOfWork(Protocol):
    """One transactional boundary: everything done through it commits together."""

    tables: TableRepository
    table_sessions: TableSessionRepository
    guest_sessions: GuestSessionRepository
    menu: MenuRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def commit(self) -> None: ...


class PersistenceError(Exception):
    pass


@dataclass(frozen=True)
class MenuItemDraft:
    category_id: MenuCategoryId
    name: str
    price: int
    description: str | None = None
    is_available: bool = True
    preparation_time: int | None = None
    image_path: str | None = None


@dataclass(frozen=True)
class OrderDetailData:
    order: Order
    table_number: TableNumber
