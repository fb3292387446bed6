from __future__ import annotations

from fastapi import APIRouter, status

from tableside.application.dto.requests import CreateOrderRequest, UpdateOrderStatusRequest
from tableside.application.dto.responses import (
    OrderDetailResponse,
    OrderReceiptResponse,
    OrderStatusResponse,
)
from tableside.application.use_cases.create_order import CreateOrder
from tableside.application.use_cases.get_order import GetOrder
from tableside.application.use_cases.update_order_status import UpdateOrderStatus
from tableside.domain.common.ids import OrderId
from tableside.infrastructure import config
from tableside.infrastructure.db.repositories.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


def _create_order_use_case() -> CreateOrder:
    return CreateOrder(uow_factory=SqlAlchemyUnitOfWork, qr_base_url=config.qr_base_url())


def _get_order_use_case() -> GetOrder:
    return GetOrder(uow_factory=SqlAlchemyUnitOfWork)


def _update_order_status_use_case() -> UpdateOrderStatus:
    return UpdateOrderStatus(uow_factory=SqlAlchemyUnitOfWork)


@router.post(
    "/v1/orders",
    response_model=OrderReceiptResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(request_dto: CreateOrderRequest) -> OrderReceiptResponse:
    return _create_order_use_case().execute(request_dto)


@router.get("/v1/orders/{order_id}", response_model=OrderDetailResponse)
def get_order(order_id: str) -> OrderDetailResponse:
    return _get_order_use_case().execute(OrderId(order_id))


@router.patch("/v1/orders/{order_id}/status", response_model=OrderStatusResponse)
def update_order_status(
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
) -> OrderStatusResponse:
    return _update_order_status_use_case().execute(OrderId(order_id), request_dto.status)
