from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MenuItemResponse(BaseModel):
    id: int
    categoryId: int
    name: str
    description: str | None = None
    price: int
    isAvailable: bool
    preparationTime: int
    imageUrl: str | None = None


class MenuCategoryResponse(BaseModel):
    id: int
    name: str
    items: list[MenuItemResponse] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    categories: list[MenuCategoryResponse] = Field(default_factory=list)


class MenuResponse(BaseModel):
    tableNumber: int
    categories: list[MenuCategoryResponse] = Field(default_factory=list)


class OrderReceiptResponse(BaseModel):
    orderId: str
    status: str
    subtotal: int
    tax: int
    total: int
    preparationTime: int
    guestToken: str


class OrderItemDetailResponse(BaseModel):
    menuItemId: int
    name: str
    quantity: int
    price: int
    total: int


class OrderDetailResponse(BaseModel):
    id: str
    tableNumber: int
    status: str
    preparationTime: int
    createdAt: datetime
    subtotal: int
    tax: int
    total: int
    items: list[OrderItemDetailResponse] = Field(default_factory=list)


class OrderSummaryResponse(BaseModel):
    id: str
    status: str
    createdAt: datetime
    subtotal: int
    tax: int
    total: int
    itemCount: int


class OrderStatusResponse(BaseModel):
    id: str
    status: str


class SuccessResponse(BaseModel):
    success: bool


class TableResponse(BaseModel):
    id: int
    tableNumber: int
    qrCodeUrl: str | None = None
    isActive: bool
