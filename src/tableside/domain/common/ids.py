from __future__ import annotations

from typing import NewType

TableId = NewType("TableId", int)
TableNumber = NewType("TableNumber", int)
TableSessionId = NewType("TableSessionId", str)
GuestSessionId = NewType("GuestSessionId", str)
MenuCategoryId = NewType("MenuCategoryId", int)
MenuItemId = NewType("MenuItemId", int)
OrderId = NewType("OrderId", str)
OrderItemId = NewType("OrderItemId", str)

# Largest value an INTEGER id, table number or quantity column can hold.
MAX_STORED_INT = 2_147_483_647
