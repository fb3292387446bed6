from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tableside.domain.common.ids import MAX_STORED_INT


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class CartLineRequest(CamelBaseModel):
    menu_item_id: int
    quantity: int


class CreateOrderRequest(CamelBaseModel):
    table: int
    items: list[CartLineRequest] = Field(default_factory=list)
    guest_token: str | None = None


class UpdateOrderStatusRequest(CamelBaseModel):
    status: str


class AddCategoryRequest(CamelBaseModel):
    name: str = Field(min_length=1, max_length=255)


class AddMenuItemRequest(CamelBaseModel):
    category_id: int = Field(ge=1, le=MAX_STORED_INT)
    name: str = Field(min_length=1, max_length=255)
    price: int = Field(ge=0, le=MAX_STORED_INT)
    description: str | None = None
    is_available: bool = True
    preparation_time: int | None = Field(default=None, ge=0, le=MAX_STORED_INT)
    image_path: str | None = None


class UpdateMenuItemRequest(CamelBaseModel):
    category_id: int | None = Field(default=None, ge=1, le=MAX_STORED_INT)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    price: int | None = Field(default=None, ge=0, le=MAX_STORED_INT)
    description: str | None = None
    is_available: bool | None = None
    preparation_time: int | None = Field(default=None, ge=0, le=MAX_STORED_INT)
    image_path: str | None = None
