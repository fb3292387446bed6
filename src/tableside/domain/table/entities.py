from __future__ import annotations

from dataclasses import dataclass

from tableside.domain.common.ids import MAX_STORED_INT, TableId, TableNumber


@dataclass(frozen=True)
class Table:
    table_id: TableId
    table_number: TableNumber
    qr_code_url: str | None
    is_active: bool

    def __post_init__(self) -> None:
        if self.table_number < 1:
            raise ValueError("table_number must be >= 1")


def placeholder_qr_code_url(base_url: str, table_number: TableNumber) -> str:
    return f"{base_url.rstrip('/')}/table{table_number}"


class InvalidTableNumberError(ValueError):
    pass


def parse_table_number(value: int) -> TableNumber:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_STORED_INT:
        raise InvalidTableNumberError(f"invalid table number: {value!r}")
    return TableNumber(value)
