from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.application.dto.requests import (
    AddCategoryRequest,
    AddMenuItemRequest,
    UpdateMenuItemRequest,
)
from tableside.application.errors import (
    InvalidMenuCategoryError,
    InvalidMenuItemError,
    MenuCategoryNotFoundError,
    MenuItemNotFoundError,
)
from tableside.application.use_cases.get_menu import CATALOG_CACHE_KEY
from tableside.application.use_cases.menu_admin import (
    AddCategory,
    AddMenuItem,
    DeleteCategory,
    DeleteMenuItem,
    UpdateMenuItem,
)


def test_add_category_invalidates_catalog(store, uow_factory, cache) -> None:
    cache.values[CATALOG_CACHE_KEY] = "{}"
    payload = AddCategory(uow_factory, cache).execute(AddCategoryRequest(name=" Desserts "))

    assert payload.name == "Desserts"
    assert payload.items == []
    assert CATALOG_CACHE_KEY not in cache.values


def test_add_menu_item_requires_existing_category(store, uow_factory, cache) -> None:
    with pytest.raises(InvalidMenuCategoryError):
        AddMenuItem(uow_factory, cache).execute(
            AddMenuItemRequest.model_validate({"categoryId": 42, "name": "Tart", "price": 400})
        )
    assert store.items == {}


def test_add_menu_item(store, uow_factory, cache) -> None:
    category = store.add_category("Pastry")
    payload = AddMenuItem(uow_factory, cache, image_base_url="/img").execute(
        AddMenuItemRequest.model_validate(
            {
                "categoryId": category.category_id,
                "name": "Tart",
                "price": 400,
                "preparationTime": 4,
                "imagePath": "tart.jpg",
            }
        )
    )

    assert payload.categoryId == category.category_id
    assert payload.isAvailable is True
    assert payload.preparationTime == 4
    assert payload.imageUrl == "/img/tart.jpg"
    assert cache.deleted == [CATALOG_CACHE_KEY]


def test_update_menu_item_applies_only_supplied_fields(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    item = store.add_item(category.category_id, "Latte", 400, preparation_time=6)

    payload = UpdateMenuItem(uow_factory, cache).execute(
        item.item_id,
        UpdateMenuItemRequest.model_validate({"price": 450, "isAvailable": False}),
    )

    assert payload.price == 450
    assert payload.isAvailable is False
    assert payload.name == "Latte"
    assert store.items[item.item_id].preparation_time == 6


def test_update_menu_item_can_clear_optional_fields(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    item = store.add_item(category.category_id, "Latte", 400, preparation_time=6)

    payload = UpdateMenuItem(uow_factory, cache).execute(
        item.item_id,
        UpdateMenuItemRequest.model_validate({"preparationTime": None}),
    )

    assert payload.preparationTime == 10
    assert store.items[item.item_id].preparation_time is None


def test_update_menu_item_rejects_null_required_field(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    item = store.add_item(category.category_id, "Latte", 400)

    with pytest.raises(InvalidMenuItemError):
        UpdateMenuItem(uow_factory, cache).execute(
            item.item_id,
            UpdateMenuItemRequest.model_validate({"price": None}),
        )


def test_update_menu_item_rejects_unknown_category(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    item = store.add_item(category.category_id, "Latte", 400)

    with pytest.raises(InvalidMenuCategoryError):
        UpdateMenuItem(uow_factory, cache).execute(
            item.item_id,
            UpdateMenuItemRequest.model_validate({"categoryId": 99}),
        )


def test_update_unknown_menu_item(store, uow_factory, cache) -> None:
    with pytest.raises(MenuItemNotFoundError):
        UpdateMenuItem(uow_factory, cache).execute(
            7,
            UpdateMenuItemRequest.model_validate({"price": 100}),
        )


def test_delete_category_removes_its_items(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    store.add_item(category.category_id, "Latte", 400)

    payload = DeleteCategory(uow_factory, cache).execute(category.category_id)

    assert payload.success is True
    assert store.categories == {}
    assert store.items == {}


def test_delete_unknown_category(uow_factory, cache) -> None:
    with pytest.raises(MenuCategoryNotFoundError):
        DeleteCategory(uow_factory, cache).execute(5)


def test_delete_menu_item(store, uow_factory, cache) -> None:
    category = store.add_category("Coffee")
    item = store.add_item(category.category_id, "Latte", 400)

    assert DeleteMenuItem(uow_factory, cache).execute(item.item_id).success is True
    assert store.items == {}
    with pytest.raises(MenuItemNotFoundError):
        DeleteMenuItem(uow_factory, cache).execute(item.item_id)


def test_admin_mutation_survives_cache_outage(store, uow_factory, cache) -> None:
    cache.broken = True
    payload = AddCategory(uow_factory, cache).execute(AddCategoryRequest(name="Tea"))
    assert payload.name == "Tea"
    assert len(store.categories) == 1
