from __future__ import annotations

from dataclasses import dataclass, field

from tableside.domain.common.ids import MenuCategoryId, MenuItemId

DEFAULT_PREPARATION_TIME_MINUTES = 10


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    category_id: MenuCategoryId
    name: str
    description: str | None
    price: int
    is_available: bool
    preparation_time: int | None = None
    image_path: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")
        if self.preparation_time is not None and self.preparation_time < 0:
            raise ValueError("preparation_time must be >= 0")

    @property
    def effective_preparation_time(self) -> int:
        if self.preparation_time is None:
            return DEFAULT_PREPARATION_TIME_MINUTES
        return self.preparation_time


@dataclass(frozen=True)
class MenuCategory:
    category_id: MenuCategoryId
    name: str
    is_active: bool = True
    items: list[MenuItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")


def preparation_time_for(items: list[MenuItem]) -> int:
    # Kitchen readiness is bounded by the slowest dish, not the sum.
    if not items:
        return DEFAULT_PREPARATION_TIME_MINUTES
    return max(item.effective_preparation_time for item in items)
