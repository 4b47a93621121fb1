# shopfront/models/payment.py
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel
from .base import WireModel
from .cart import CartLine

class PaymentMethodType(str, Enum):
    JAZZCASH = "jazzcash"
    EASYPAISA = "easypaisa"
    SADAPAY = "sadapay"
    NAYAPAY = "nayapay"
    BANK_TRANSFER = "bank_transfer"

class PaymentMethod(WireModel):
    """Payment method a shop accepts, with its account instructions"""
    id: str
    # kept as a plain string: shops may offer methods newer than this client
    type: str
    details: List[str] = []

    @property
    def label(self) -> str:
        return self.type.replace("_", " ").title()

class ShopPaymentDetails(WireModel):
    methods: List[PaymentMethod] = []

    def find(self, method_type: str) -> Optional[PaymentMethod]:
        for method in self.methods:
            if method.type == method_type:
                return method
        return None

class PendingPayment(BaseModel):
    """Checkout in progress; lives until the order is placed or checkout is dismissed"""
    cart_snapshot: List[CartLine]
    total: Decimal
    shop_id: str
    method: str
    proof_image_url: Optional[str] = None
