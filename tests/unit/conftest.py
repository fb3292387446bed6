from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tableside.application.ports.repositories import (
    MenuItemDraft,
    OrderDetailData,
    PersistenceError,
)
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
from tableside.domain.session.entities import GuestSession, SessionStatus, TableSession
from tableside.domain.table.entities import Table


class InMemoryStore:
    def __init__(self) -> None:
        self.tables: dict[TableId, Table] = {}
        self.table_sessions: dict[TableSessionId, TableSession] = {}
        self.guest_sessions: dict[GuestSessionId, GuestSession] = {}
        self.categories: dict[MenuCategoryId, MenuCategory] = {}
        self.items: dict[MenuItemId, MenuItem] = {}
        self.orders: dict[OrderId, Order] = {}
        self.commits = 0
        self.fail_on_commit = False

    def snapshot(self) -> dict[str, dict]:
        return {
            "tables": dict(self.tables),
            "table_sessions": dict(self.table_sessions),
            "guest_sessions": dict(self.guest_sessions),
            "categories": dict(self.categories),
            "items": dict(self.items),
            "orders": dict(self.orders),
        }

    def restore(self, snapshot: dict[str, dict]) -> None:
        for name, values in snapshot.items():
            setattr(self, name, values)

    def add_category(self, name: str, is_active: bool = True) -> MenuCategory:
        category = MenuCategory(
            category_id=MenuCategoryId(max(self.categories, default=0) + 1),
            name=name,
            is_active=is_active,
        )
        self.categories[category.category_id] = category
        return category

    def add_item(
        self,
        category_id: int,
        name: str,
        price: int,
        *,
        is_available: bool = True,
        preparation_time: int | None = None,
        image_path: str | None = None,
    ) -> MenuItem:
        item = MenuItem(
            item_id=MenuItemId(max(self.items, default=0) + 1),
            category_id=MenuCategoryId(category_id),
            name=name,
            description=None,
            price=price,
            is_available=is_available,
            preparation_time=preparation_time,
            image_path=image_path,
        )
        self.items[item.item_id] = item
        return item

    def table_by_number(self, table_number: int) -> Table | None:
        for table in self.tables.values():
            if table.table_number == table_number:
                return table
        return None

    def active_table_sessions(self, table_id: TableId) -> list[TableSession]:
        return [
            session
            for session in self.table_sessions.values()
            if session.table_id == table_id and session.is_active
        ]


class InMemoryTableRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get_by_number(self, table_number: TableNumber) -> Table | None:
        return self._store.table_by_number(table_number)

    def add(self, table_number: TableNumber, qr_code_url: str | None) -> Table:
        existing = self._store.table_by_number(table_number)
        if existing is not None:
            return existing
        table = Table(
            table_id=TableId(max(self._store.tables, default=0) + 1),
            table_number=table_number,
            qr_code_url=qr_code_url,
            is_active=True,
        )
        self._store.tables[table.table_id] = table
        return table

    def list_all(self) -> list[Table]:
        return sorted(self._store.tables.values(), key=lambda table: table.table_number)


class InMemoryTableSessionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def find_active(self, table_id: TableId) -> TableSession | None:
        active = self._store.active_table_sessions(table_id)
        if not active:
            return None
        return max(active, key=lambda session: session.created_at)

    def add(self, table_session: TableSession) -> TableSession:
        existing = self.find_active(table_session.table_id)
        if existing is not None:
            return existing
        self._store.table_sessions[table_session.session_id] = table_session
        return table_session

    def list_active_ids(self, table_id: TableId) -> list[TableSessionId]:
        return [session.session_id for session in self._store.active_table_sessions(table_id)]

    def complete_active(self, table_id: TableId, now: datetime) -> int:
        active = self._store.active_table_sessions(table_id)
        for session in active:
            self._store.table_sessions[session.session_id] = session.complete(now)
        return len(active)


class InMemoryGuestSessionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def find_by_token(self, guest_token: str) -> GuestSession | None:
        for session in self._store.guest_sessions.values():
            if session.guest_token == guest_token:
                return session
        return None

    def find_active(self, table_session_id: TableSessionId) -> GuestSession | None:
        active = [
            session
            for session in self._store.guest_sessions.values()
            if session.table_session_id == table_session_id and session.is_active
        ]
        if not active:
            return None
        return max(active, key=lambda session: session.created_at)

    def add(self, guest_session: GuestSession) -> GuestSession:
        existing = self.find_by_token(guest_session.guest_token)
        if existing is not None:
            return existing
        self._store.guest_sessions[guest_session.session_id] = guest_session
        return guest_session

    def update(self, guest_session: GuestSession) -> None:
        self._store.guest_sessions[guest_session.session_id] = guest_session

    def complete_for_table(self, table_id: TableId, now: datetime) -> int:
        session_ids = {
            session.session_id
            for session in self._store.table_sessions.values()
            if session.table_id == table_id
        }
        count = 0
        for guest in list(self._store.guest_sessions.values()):
            if guest.table_session_id in session_ids and guest.is_active:
                self._store.guest_sessions[guest.session_id] = replace(
                    guest,
                    status=SessionStatus.COMPLETED,
                    updated_at=now,
                )
                count += 1
        return count


class InMemoryMenuRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list_active_categories(self) -> list[MenuCategory]:
        categories = []
        for category_id in sorted(self._store.categories):
            category = self._store.categories[category_id]
            if not category.is_active:
                continue
            items = [
                self._store.items[item_id]
                for item_id in sorted(self._store.items)
                if self._store.items[item_id].category_id == category_id
            ]
            categories.append(replace(category, items=items))
        return categories

    def find_available_items(self, item_ids: list[MenuItemId]) -> list[MenuItem]:
        return [
            self._store.items[item_id]
            for item_id in item_ids
            if item_id in self._store.items and self._store.items[item_id].is_available
        ]

    def get_category(self, category_id: MenuCategoryId) -> MenuCategory | None:
        return self._store.categories.get(category_id)

    def add_category(self, name: str) -> MenuCategory:
        return self._store.add_category(name)

    def delete_category(self, category_id: MenuCategoryId) -> bool:
        if self._store.categories.pop(category_id, None) is None:
            return False
        for item_id, item in list(self._store.items.items()):
            if item.category_id == category_id:
                del self._store.items[item_id]
        return True

    def get_item(self, item_id: MenuItemId) -> MenuItem | None:
        return self._store.items.get(item_id)

    def add_item(self, draft: MenuItemDraft) -> MenuItem:
        item = self._store.add_item(
            draft.category_id,
            draft.name,
            draft.price,
            is_available=draft.is_available,
            preparation_time=draft.preparation_time,
            image_path=draft.image_path,
        )
        if draft.description is not None:
            item = replace(item, description=draft.description)
            self._store.items[item.item_id] = item
        return item

    def update_item(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem | None:
        item = self._store.items.get(item_id)
        if item is None:
            return None
        updated = replace(item, **changes)
        self._store.items[item_id] = updated
        return updated

    def delete_item(self, item_id: MenuItemId) -> bool:
        return self._store.items.pop(item_id, None) is not None


class InMemoryOrderRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def add(self, order: Order) -> None:
        self._store.orders[order.order_id] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self._store.orders.get(order_id)

    def get_detail(self, order_id: OrderId) -> OrderDetailData | None:
        order = self._store.orders.get(order_id)
        if order is None:
            return None
        table_session = self._store.table_sessions[order.table_session_id]
        table = self._store.tables[table_session.table_id]
        return OrderDetailData(order=order, table_number=table.table_number)

    def list_for_table_sessions(
        self,
        table_session_ids: list[TableSessionId],
        guest_session_id: GuestSessionId | None,
    ) -> list[Order]:
        return [
            order
            for order in self._store.orders.values()
            if order.table_session_id in table_session_ids
            and (guest_session_id is None or order.guest_session_id == guest_session_id)
        ]

    def update_status(self, order: Order) -> None:
        self._store.orders[order.order_id] = order


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._snapshot: dict[str, dict] | None = None
        self.tables = InMemoryTableRepository(store)
        self.table_sessions = InMemoryTableSessionRepository(store)
        self.guest_sessions = InMemoryGuestSessionRepository(store)
        self.menu = InMemoryMenuRepository(store)
        self.orders = InMemoryOrderRepository(store)

    def __enter__(self) -> InMemoryUnitOfWork:
        self._snapshot = self._store.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Anything not committed is discarded.
        if self._snapshot is not None:
            self._store.restore(self._snapshot)
        self._snapshot = None

    def commit(self) -> None:
        if self._store.fail_on_commit:
            raise PersistenceError("commit failed")
        self._snapshot = self._store.snapshot()
        self._store.commits += 1


class FakeCache:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.broken = False
        self.deleted: list[str] = []

    def get(self, key: str) -> str | None:
        if self.broken:
            raise ConnectionError("cache down")
        return self.values.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self.broken:
            raise ConnectionError("cache down")
        self.values[key] = value

    def delete(self, key: str) -> None:
        if self.broken:
            raise ConnectionError("cache down")
        self.deleted.append(key)
        self.values.pop(key, None)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore) -> Callable[[], InMemoryUnitOfWork]:
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()
