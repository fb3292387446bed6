from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

TAX_RATE = Decimal("0.05")


class PricedLine(Protocol):
    @property
    def price(self) -> int: ...

    @property
    def quantity(self) -> int: ...


@dataclass(frozen=True)
class OrderTotals:
    """Amounts are whole currency units; tax is rounded half-up."""

    subtotal: int
    tax: int
    total: int

    def __post_init__(self) -> None:
        if self.subtotal < 0 or self.tax < 0:
            raise ValueError("subtotal and tax must be >= 0")
        if self.total != self.subtotal + self.tax:
            raise ValueError("total must equal subtotal + tax")


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_tax(subtotal: int) -> int:
    return round_half_up(Decimal(subtotal) * TAX_RATE)


def compute_totals(lines: Iterable[PricedLine]) -> OrderTotals:
    subtotal = sum(line.price * line.quantity for line in lines)
    tax = compute_tax(subtotal)
    return OrderTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)
