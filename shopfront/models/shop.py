# shopfront/models/shop.py
from decimal import Decimal
from typing import Optional
from pydantic import Field
from .base import WireModel

class Shop(WireModel):
    """Vendor offering a menu"""
    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None

class MenuItem(WireModel):
    """Purchasable item belonging to one shop"""
    item_id: str
    shop_id: str
    name: str
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
