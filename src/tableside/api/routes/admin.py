from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, status

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
from tableside.application.use_cases.menu_admin import (
    AddCategory,
    AddMenuItem,
    DeleteCategory,
    DeleteMenuItem,
    UpdateMenuItem,
)
from tableside.domain.common.ids import MAX_STORED_INT
from tableside.infrastructure import config
from tableside.infrastructure.cache.cache_store import RedisCacheStore
from tableside.infrastructure.db.repositories.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter(prefix="/v1/admin")

RowId = Annotated[int, Path(ge=1, le=MAX_STORED_INT)]


def _add_category_use_case() -> AddCategory:
    return AddCategory(uow_factory=SqlAlchemyUnitOfWork, cache=RedisCacheStore())


def _delete_category_use_case() -> DeleteCategory:
    return DeleteCategory(uow_factory=SqlAlchemyUnitOfWork, cache=RedisCacheStore())


def _add_menu_item_use_case() -> AddMenuItem:
    return AddMenuItem(
        uow_factory=SqlAlchemyUnitOfWork,
        cache=RedisCacheStore(),
        image_base_url=config.menu_image_base_url(),
    )


def _update_menu_item_use_case() -> UpdateMenuItem:
    return UpdateMenuItem(
        uow_factory=SqlAlchemyUnitOfWork,
        cache=RedisCacheStore(),
        image_base_url=config.menu_image_base_url(),
    )


def _delete_menu_item_use_case() -> DeleteMenuItem:
    return DeleteMenuItem(uow_factory=SqlAlchemyUnitOfWork, cache=RedisCacheStore())


@router.post(
    "/categories",
    response_model=MenuCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_category(request_dto: AddCategoryRequest) -> MenuCategoryResponse:
    return _add_category_use_case().execute(request_dto)


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
def delete_category(category_id: RowId) -> SuccessResponse:
    return _delete_category_use_case().execute(category_id)


@router.post(
    "/menu-items",
    response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_menu_item(request_dto: AddMenuItemRequest) -> MenuItemResponse:
    return _add_menu_item_use_case().execute(request_dto)


@router.patch("/menu-items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(item_id: RowId, request_dto: UpdateMenuItemRequest) -> MenuItemResponse:
    return _update_menu_item_use_case().execute(item_id, request_dto)


@router.delete("/menu-items/{item_id}", response_model=SuccessResponse)
def delete_menu_item(item_id: RowId) -> SuccessResponse:
    return _delete_menu_item_use_case().execute(item_id)
