# shopfront/models/order.py
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from .base import TimeStampedModel, WireModel

class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DELIVERED = "delivered"
    DISCARDED = "discarded"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

class OrderItem(WireModel):
    """Individual item in an order"""
    item_id: str
    item_name: str
    quantity: int
    price: Decimal
    
    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity

class Order(TimeStampedModel):
    """Server-confirmed order; status fields are only ever set from server data"""
    order_id: str
    shop_id: str
    user_id: Optional[str] = None
    items: List[OrderItem] = []
    total_price: Decimal = Decimal(0)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    
    # Owner view only, filled by payment-info enrichment
    payment_info: Optional[Dict[str, Any]] = None

    @property
    def is_completed(self) -> bool:
        return self.status in [OrderStatus.DELIVERED, OrderStatus.DISCARDED, OrderStatus.REJECTED]

    @property
    def payment_id(self) -> Optional[str]:
        if not self.payment_info:
            return None
        payment_id = self.payment_info.get("payment_id")
        return str(payment_id) if payment_id is not None else None

    def merged_with(self, payload: Dict[str, Any]) -> "Order":
        """Return a copy with the fields present in payload taking precedence"""
        data = self.model_dump()
        data.update(payload)
        if data.get("payment_info") is None:
            data["payment_info"] = self.payment_info
        return Order.model_validate(data)
