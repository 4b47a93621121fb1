# shopfront/models/cart.py
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from .shop import MenuItem

class CartLine(BaseModel):
    """One item and its quantity in the cart"""
    item_id: str
    name: str
    unit_price: Decimal
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

class Cart:
    """Single-shop cart. All mutations are local; nothing is sent until checkout."""

    def __init__(self):
        self.shop_id: Optional[str] = None
        self._lines: List[CartLine] = []

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def _find(self, item_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None

    def accepts(self, item: MenuItem) -> bool:
        """False when the item would mix shops in a non-empty cart"""
        return self.is_empty or self.shop_id == item.shop_id

    def add_item(self, item: MenuItem) -> bool:
        """Add one unit of item. Returns False (no-op) for an item of another shop."""
        if not self.accepts(item):
            return False

        if self.is_empty:
            self.shop_id = item.shop_id

        line = self._find(item.item_id)
        if line:
            line.quantity += 1
        else:
            self._lines.append(CartLine(
                item_id=item.item_id,
                name=item.name,
                unit_price=item.price,
                quantity=1
            ))
        return True

    def update_quantity(self, item_id: str, new_quantity: int):
        if new_quantity < 1:
            self.remove_item(item_id)
            return

        line = self._find(item_id)
        if line:
            line.quantity = new_quantity

    def remove_item(self, item_id: str):
        self._lines = [line for line in self._lines if line.item_id != item_id]
        if not self._lines:
            self.shop_id = None

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal(0))

    def deduct(self, ordered: List[CartLine]):
        """Take ordered quantities out of the cart; anything added since stays"""
        for ordered_line in ordered:
            line = self._find(ordered_line.item_id)
            if line:
                self.update_quantity(line.item_id, line.quantity - ordered_line.quantity)

    def clear(self):
        self._lines = []
        self.shop_id = None

    def snapshot(self) -> List[CartLine]:
        """Deep copy of the lines, safe to hold while the cart keeps changing"""
        return [line.model_copy() for line in self._lines]
