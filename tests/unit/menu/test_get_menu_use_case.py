from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.application.errors import InvalidTableNumberError
from tableside.application.ports.repositories import PersistenceError
from tableside.application.use_cases.get_menu import CATALOG_CACHE_KEY, GetMenu


def _seed(store) -> None:
    coffee = store.add_category("Coffee")
    hidden = store.add_category("Seasonal", is_active=False)
    store.add_item(coffee.category_id, "Espresso", 250, preparation_time=3)
    store.add_item(coffee.category_id, "Iced Latte", 420, image_path="iced-latte.jpg")
    store.add_item(coffee.category_id, "Mocha", 450, is_available=False)
    store.add_item(hidden.category_id, "Pumpkin Latte", 500)


def test_get_menu_returns_active_categories_with_all_items(store, uow_factory, cache) -> None:
    _seed(store)
    use_case = GetMenu(uow_factory, cache, image_base_url="https://cdn.example.com/menu-images")
    payload = use_case.execute(4)

    assert payload.tableNumber == 4
    assert [category.name for category in payload.categories] == ["Coffee"]
    items = payload.categories[0].items
    assert [item.name for item in items] == ["Espresso", "Iced Latte", "Mocha"]
    assert items[0].preparationTime == 3
    assert items[1].preparationTime == 10
    assert items[1].imageUrl == "https://cdn.example.com/menu-images/iced-latte.jpg"
    assert items[2].isAvailable is False


def test_get_menu_opens_table_and_session(store, uow_factory, cache) -> None:
    GetMenu(uow_factory, cache).execute(4)
    GetMenu(uow_factory, cache).execute(4)

    table = store.table_by_number(4)
    assert table is not None
    assert len(store.active_table_sessions(table.table_id)) == 1
    assert store.guest_sessions == {}


def test_get_menu_caches_catalog(store, uow_factory, cache) -> None:
    _seed(store)
    GetMenu(uow_factory, cache).execute(4)
    assert CATALOG_CACHE_KEY in cache.values

    # Served from cache even after the store changes.
    store.add_item(1, "Cortado", 300)
    payload = GetMenu(uow_factory, cache).execute(4)
    assert [item.name for item in payload.categories[0].items] == [
        "Espresso",
        "Iced Latte",
        "Mocha",
    ]


def test_get_menu_falls_back_to_store_when_cache_is_down(store, uow_factory, cache) -> None:
    _seed(store)
    cache.broken = True
    payload = GetMenu(uow_factory, cache).execute(4)
    assert len(payload.categories[0].items) == 3


def test_get_menu_ignores_corrupt_cache_entry(store, uow_factory, cache) -> None:
    _seed(store)
    cache.values[CATALOG_CACHE_KEY] = "{not json"
    payload = GetMenu(uow_factory, cache).execute(4)
    assert payload.categories[0].name == "Coffee"


def test_get_menu_rejects_invalid_table_number(store, uow_factory, cache) -> None:
    with pytest.raises(InvalidTableNumberError):
        GetMenu(uow_factory, cache).execute(0)
    assert store.tables == {}


def test_get_menu_surfaces_persistence_failure(store, uow_factory, cache) -> None:
    store.fail_on_commit = True
    with pytest.raises(PersistenceError):
        GetMenu(uow_factory, cache).execute(4)
