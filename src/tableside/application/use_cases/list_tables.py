from __future__ import annotations

from typing import Callable

from tableside.application.dto.responses import TableResponse
from tableside.application.mappers.table_mapper import to_table_responses
from tableside.application.ports.repositories import UnitOfWork


class ListTables:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def execute(self) -> list[TableResponse]:
        with self._uow_factory() as uow:
            return to_table_responses(uow.tables.list_all())
