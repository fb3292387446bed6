from __future__ import annotations

from fastapi import APIRouter, Query

from tableside.application.dto.responses import (
    OrderSummaryResponse,
    SuccessResponse,
    TableResponse,
)
from tableside.application.use_cases.end_table_session import EndTableSession
from tableside.application.use_cases.list_tables import ListTables
from tableside.application.use_cases.table_orders import TableOrders
from tableside.infrastructure.db.repositories.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


def _list_tables_use_case() -> ListTables:
    return ListTables(uow_factory=SqlAlchemyUnitOfWork)


def _table_orders_use_case() -> TableOrders:
    return TableOrders(uow_factory=SqlAlchemyUnitOfWork)


def _end_table_session_use_case() -> EndTableSession:
    return EndTableSession(uow_factory=SqlAlchemyUnitOfWork)


@router.get("/v1/tables", response_model=list[TableResponse])
def list_tables() -> list[TableResponse]:
    return _list_tables_use_case().execute()


@router.get("/v1/tables/{table_number}/orders", response_model=list[OrderSummaryResponse])
def list_table_orders(
    table_number: int,
    guest_token: str | None = Query(default=None, alias="guestToken"),
) -> list[OrderSummaryResponse]:
    return _table_orders_use_case().execute(table_number, guest_token=guest_token)


@router.post("/v1/tables/{table_number}/end-session", response_model=SuccessResponse)
def end_table_session(table_number: int) -> SuccessResponse:
    return _end_table_session_use_case().execute(table_number)
