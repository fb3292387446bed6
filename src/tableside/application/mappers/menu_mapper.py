from __future__ import annotations

from tableside.application.dto.responses import (
    MenuCategoryResponse,
    MenuItemResponse,
)
from tableside.domain.menu.entities import MenuCategory, MenuItem


def image_url_for(image_path: str | None, image_base_url: str) -> str | None:
    if not image_path:
        return None
    if image_path.startswith(("http://", "https://")):
        return image_path
    return f"{image_base_url.rstrip('/')}/{image_path.lstrip('/')}"


def to_menu_item_response(item: MenuItem, image_base_url: str) -> MenuItemResponse:
    return MenuItemResponse(
        id=int(item.item_id),
        categoryId=int(item.category_id),
        name=item.name,
        description=item.description,
        price=item.price,
        isAvailable=item.is_available,
        preparationTime=item.effective_preparation_time,
        imageUrl=image_url_for(item.image_path, image_base_url),
    )


def to_menu_category_response(
    category: MenuCategory,
    image_base_url: str,
) -> MenuCategoryResponse:
    return MenuCategoryResponse(
        id=int(category.category_id),
        name=category.name,
        items=[to_menu_item_response(item, image_base_url) for item in category.items],
    )
