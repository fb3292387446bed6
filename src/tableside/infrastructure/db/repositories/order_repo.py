from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from tableside.application.ports.repositories import OrderDetailData, OrderRepository
from tableside.domain.common.ids import (
    GuestSessionId,
    MenuItemId,
    OrderId,
    OrderItemId,
    TableNumber,
    TableSessionId,
)
from tableside.domain.order.entities import Order, OrderItem, OrderStatus
from tableside.infrastructure.db.models.order import OrderItemModel, OrderModel
from tableside.infrastructure.db.models.table import TableModel, TableSessionModel
from tableside.infrastructure.db.repositories.table_repo import as_utc


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, order: Order) -> None:
        self._session.add(self._to_model(order))
        self._session.flush()

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == str(order_id))
        )
        model = self._session.execute(statement).scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_detail(self, order_id: OrderId) -> OrderDetailData | None:
        statement = (
            select(OrderModel, TableModel.table_number)
            .join(TableSessionModel, TableSessionModel.id == OrderModel.table_session_id)
            .join(TableModel, TableModel.id == TableSessionModel.table_id)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == str(order_id))
        )
        row = self._session.execute(statement).one_or_none()
        if row is None:
            return None
        model, table_number = row
        return OrderDetailData(
            order=self._to_domain(model),
            table_number=TableNumber(table_number),
        )

    def list_for_table_sessions(
        self,
        table_session_ids: list[TableSessionId],
        guest_session_id: GuestSessionId | None,
    ) -> list[Order]:
        if not table_session_ids:
            return []
        statement = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.table_session_id.in_([str(value) for value in table_session_ids]))
        )
        if guest_session_id is not None:
            statement = statement.where(OrderModel.guest_session_id == str(guest_session_id))
        statement = statement.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return [self._to_domain(model) for model in self._session.execute(statement).scalars()]

    def update_status(self, order: Order) -> None:
        statement = (
            update(OrderModel)
            .where(OrderModel.id == str(order.order_id))
            .values(status=order.status.value, updated_at=order.updated_at)
            .execution_options(synchronize_session=False)
        )
        self._session.execute(statement)

    def _to_model(self, order: Order) -> OrderModel:
        model = OrderModel(
            id=str(order.order_id),
            table_session_id=str(order.table_session_id),
            guest_session_id=str(order.guest_session_id),
            status=order.status.value,
            preparation_time=order.preparation_time,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        model.items = [
            OrderItemModel(
                id=str(item.item_id),
                order_id=str(order.order_id),
                position=position,
                menu_item_id=int(item.menu_item_id),
                name=item.name,
                quantity=item.quantity,
                price=item.price,
                status=item.status.value,
            )
            for position, item in enumerate(order.items)
        ]
        return model

    def _to_domain(self, model: OrderModel) -> Order:
        items = [
            OrderItem(
                item_id=OrderItemId(item.id),
                menu_item_id=MenuItemId(item.menu_item_id),
                name=item.name,
                quantity=item.quantity,
                price=item.price,
                status=OrderStatus(item.status),
            )
            for item in model.items
        ]
        return Order(
            order_id=OrderId(model.id),
            table_session_id=TableSessionId(model.table_session_id),
            guest_session_id=GuestSessionId(model.guest_session_id),
            status=OrderStatus(model.status),
            preparation_time=model.preparation_time,
            items=items,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
