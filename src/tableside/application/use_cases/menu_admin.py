from __future__ import annotations

import logging
from typing import Callable

from tableside.application.dto.requests import (
    AddCategoryRequest,
    AddMenuItemRequest,
    UpdateMenuItemRequest,
)
from tableside.application.dto.responses import (
    MenuCategoryResponse,
    MenuItemResponse,
    SuccessResponse,
)
from tableside.application.errors import (
    InvalidMenuCategoryError,
    InvalidMenuItemError,
    MenuCategoryNotFoundError,
    MenuItemNotFoundError,
)
from tableside.application.mappers.menu_mapper import (
    to_menu_category_response,
    to_menu_item_response,
)
from tableside.application.ports.cache import CacheStore
from tableside.application.ports.repositories import MenuItemDraft, UnitOfWork
from tableside.application.use_cases.get_menu import CATALOG_CACHE_KEY, DEFAULT_IMAGE_BASE_URL
from tableside.domain.common.ids import MenuCategoryId, MenuItemId

logger = logging.getLogger(__name__)

_NON_NULLABLE_ITEM_FIELDS = ("category_id", "name", "price", "is_available")


def invalidate_catalog(cache: CacheStore | None) -> None:
    if cache is None:
        return
    try:
        cache.delete(CATALOG_CACHE_KEY)
    except Exception:
        logger.warning("menu_cache_invalidate_failed", exc_info=True)


def _category_not_found(category_id: int) -> MenuCategoryNotFoundError:
    return MenuCategoryNotFoundError(
        f"menu category {category_id} not found",
        details={"categoryId": category_id},
    )


def _unknown_category(category_id: int) -> InvalidMenuCategoryError:
    return InvalidMenuCategoryError(
        f"menu category {category_id} does not exist",
        details={"categoryId": category_id},
    )


def _item_not_found(item_id: int) -> MenuItemNotFoundError:
    return MenuItemNotFoundError(
        f"menu item {item_id} not found",
        details={"menuItemId": item_id},
    )


class AddCategory:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(self, request_dto: AddCategoryRequest) -> MenuCategoryResponse:
        with self._uow_factory() as uow:
            category = uow.menu.add_category(request_dto.name.strip())
            uow.commit()

        invalidate_catalog(self._cache)
        logger.info("menu_category_added", extra={"category_id": int(category.category_id)})
        return to_menu_category_response(category, DEFAULT_IMAGE_BASE_URL)


class DeleteCategory:
    """Removes a category together with every item filed under it."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(self, category_id: int) -> SuccessResponse:
        with self._uow_factory() as uow:
            if not uow.menu.delete_category(MenuCategoryId(category_id)):
                raise _category_not_found(category_id)
            uow.commit()

        invalidate_catalog(self._cache)
        logger.info("menu_category_deleted", extra={"category_id": category_id})
        return SuccessResponse(success=True)


class AddMenuItem:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore | None = None,
        *,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache
        self._image_base_url = image_base_url

    def execute(self, request_dto: AddMenuItemRequest) -> MenuItemResponse:
        category_id = MenuCategoryId(request_dto.category_id)
        with self._uow_factory() as uow:
            if uow.menu.get_category(category_id) is None:
                raise _unknown_category(request_dto.category_id)
            item = uow.menu.add_item(
                MenuItemDraft(
                    category_id=category_id,
                    name=request_dto.name.strip(),
                    price=request_dto.price,
                    description=request_dto.description,
                    is_available=request_dto.is_available,
                    preparation_time=request_dto.preparation_time,
                    image_path=request_dto.image_path,
                )
            )
            uow.commit()

        invalidate_catalog(self._cache)
        logger.info("menu_item_added", extra={"menu_item_id": int(item.item_id)})
        return to_menu_item_response(item, self._image_base_url)


class UpdateMenuItem:
    """Applies only the fields present in the request; explicit nulls clear optional fields."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore | None = None,
        *,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache
        self._image_base_url = image_base_url

    def execute(self, item_id: int, request_dto: UpdateMenuItemRequest) -> MenuItemResponse:
        changes = request_dto.model_dump(exclude_unset=True)
        nulled = [
            name for name in _NON_NULLABLE_ITEM_FIELDS if name in changes and changes[name] is None
        ]
        if nulled:
            raise InvalidMenuItemError(
                "fields cannot be null",
                details={"fields": nulled},
            )
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise InvalidMenuItemError("name must be non-empty", details={"fields": ["name"]})

        with self._uow_factory() as uow:
            if "category_id" in changes:
                changes["category_id"] = MenuCategoryId(changes["category_id"])
                if uow.menu.get_category(changes["category_id"]) is None:
                    raise _unknown_category(changes["category_id"])

            if changes:
                item = uow.menu.update_item(MenuItemId(item_id), changes)
            else:
                item = uow.menu.get_item(MenuItemId(item_id))
            if item is None:
                raise _item_not_found(item_id)
            uow.commit()

        if changes:
            invalidate_catalog(self._cache)
            logger.info(
                "menu_item_updated",
                extra={"menu_item_id": item_id, "fields": sorted(changes)},
            )
        return to_menu_item_response(item, self._image_base_url)


class DeleteMenuItem:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache

    def execute(self, item_id: int) -> SuccessResponse:
        with self._uow_factory() as uow:
            if not uow.menu.delete_item(MenuItemId(item_id)):
                raise _item_not_found(item_id)
            uow.commit()

        invalidate_catalog(self._cache)
        logger.info("menu_item_deleted", extra={"menu_item_id": item_id})
        return SuccessResponse(success=True)
