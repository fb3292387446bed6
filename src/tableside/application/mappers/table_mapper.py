from __future__ import annotations

from typing import Iterable

from tableside.application.dto.responses import TableResponse
from tableside.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        id=int(table.table_id),
        tableNumber=int(table.table_number),
        qrCodeUrl=table.qr_code_url,
        isActive=table.is_active,
    )


def to_table_responses(tables: Iterable[Table]) -> list[TableResponse]:
    """Registry listing, always ordered by table number."""
    return [to_table_response(table) for table in sorted(tables, key=lambda t: t.table_number)]
