from __future__ import annotations

from typing import Any


class ApplicationError(Exception):
    code = "APPLICATION_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class NotFoundError(ApplicationError):
    code = "NOT_FOUND"


class InvalidInputError(ApplicationError):
    code = "INVALID_INPUT"


class ConflictError(ApplicationError):
    code = "CONFLICT"


class TableNotFoundError(NotFoundError):
    code = "TABLE_NOT_FOUND"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"


class MenuCategoryNotFoundError(NotFoundError):
    code = "MENU_CATEGORY_NOT_FOUND"


class MenuItemNotFoundError(NotFoundError):
    code = "MENU_ITEM_NOT_FOUND"


class InvalidTableNumberError(InvalidInputError):
    code = "INVALID_TABLE_NUMBER"


class EmptyCartError(InvalidInputError):
    code = "EMPTY_CART"


class InvalidCartLineError(InvalidInputError):
    code = "INVALID_CART_LINE"


class MenuItemUnavailableError(InvalidInputError):
    code = "MENU_ITEM_UNAVAILABLE"


class InvalidOrderStatusError(InvalidInputError):
    code = "INVALID_ORDER_STATUS"


class InvalidMenuItemError(InvalidInputError):
    code = "INVALID_MENU_ITEM"


class InvalidMenuCategoryError(InvalidInputError):
    code = "INVALID_MENU_CATEGORY"


class InvalidOrderTransitionError(ConflictError):
    code = "INVALID_ORDER_TRANSITION"


class InvalidGuestTokenError(InvalidInputError):
    code = "INVALID_GUEST_TOKEN"
