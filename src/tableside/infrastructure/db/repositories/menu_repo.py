from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from tableside.application.ports.repositories import MenuItemDraft, MenuRepository
from tableside.domain.common.ids import MenuCategoryId, MenuItemId
from tableside.domain.menu.entities import MenuCategory, MenuItem
from tableside.infrastructure.db.models.menu import MenuCategoryModel, MenuItemModel

_UPDATABLE_ITEM_FIELDS = frozenset(
    {
        "category_id",
        "name",
        "description",
        "price",
        "is_available",
        "preparation_time",
        "image_path",
    }
)


class SqlAlchemyMenuRepository(MenuRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_active_categories(self) -> list[MenuCategory]:
        statement = (
            select(MenuCategoryModel)
            .options(selectinload(MenuCategoryModel.items))
            .where(MenuCategoryModel.is_active.is_(True))
            .order_by(MenuCategoryModel.id)
        )
        return [
            self._category_to_domain(model, with_items=True)
            for model in self._session.execute(statement).scalars()
        ]

    def find_available_items(self, item_ids: list[MenuItemId]) -> list[MenuItem]:
        if not item_ids:
            return []
        statement = (
            select(MenuItemModel)
            .where(
                MenuItemModel.id.in_([int(item_id) for item_id in item_ids]),
                MenuItemModel.is_available.is_(True),
            )
            .order_by(MenuItemModel.id)
        )
        return [self._item_to_domain(model) for model in self._session.execute(statement).scalars()]

    def get_category(self, category_id: MenuCategoryId) -> MenuCategory | None:
        model = self._session.get(MenuCategoryModel, int(category_id))
        if model is None:
            return None
        return self._category_to_domain(model, with_items=False)

    def add_category(self, name: str) -> MenuCategory:
        model = MenuCategoryModel(name=name, is_active=True)
        self._session.add(model)
        self._session.flush()
        return self._category_to_domain(model, with_items=False)

    def delete_category(self, category_id: MenuCategoryId) -> bool:
        # Items go with their category.
        self._session.execute(
            delete(MenuItemModel)
            .where(MenuItemModel.category_id == int(category_id))
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(
            delete(MenuCategoryModel)
            .where(MenuCategoryModel.id == int(category_id))
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    def get_item(self, item_id: MenuItemId) -> MenuItem | None:
        model = self._session.get(MenuItemModel, int(item_id))
        if model is None:
            return None
        return self._item_to_domain(model)

    def add_item(self, draft: MenuItemDraft) -> MenuItem:
        model = MenuItemModel(
            category_id=int(draft.category_id),
            name=draft.name,
            description=draft.description,
            price=draft.price,
            is_available=draft.is_available,
            preparation_time=draft.preparation_time,
            image_path=draft.image_path,
        )
        self._session.add(model)
        self._session.flush()
        return self._item_to_domain(model)

    def update_item(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem | None:
        unknown = set(changes) - _UPDATABLE_ITEM_FIELDS
        if unknown:
            raise ValueError(f"unknown menu item fields: {sorted(unknown)}")

        model = self._session.get(MenuItemModel, int(item_id))
        if model is None:
            return None
        for name, value in changes.items():
            setattr(model, name, value)
        self._session.flush()
        return self._item_to_domain(model)

    def delete_item(self, item_id: MenuItemId) -> bool:
        result = self._session.execute(
            delete(MenuItemModel)
            .where(MenuItemModel.id == int(item_id))
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    def _category_to_domain(self, model: MenuCategoryModel, with_items: bool) -> MenuCategory:
        items = [self._item_to_domain(item) for item in model.items] if with_items else []
        return MenuCategory(
            category_id=MenuCategoryId(model.id),
            name=model.name,
            is_active=model.is_active,
            items=items,
        )

    def _item_to_domain(self, model: MenuItemModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            category_id=MenuCategoryId(model.category_id),
            name=model.name,
            description=model.description,
            price=model.price,
            is_available=model.is_available,
            preparation_time=model.preparation_time,
            image_path=model.image_path,
        )
