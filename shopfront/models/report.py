# shopfront/models/report.py
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import ConfigDict, Field, field_validator
from .base import WireModel

class ShopDetails(WireModel):
    name: Optional[str] = None
    total_orders: int = 0
    total_menu_items: int = 0
    average_order_value: Decimal = Decimal(0)

class DailyRevenue(WireModel):
    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    daily_revenue: Decimal = Decimal(0)

    @field_validator("day", mode="before")
    @classmethod
    def _date_part(cls, value):
        # the backend sends full ISO timestamps at midnight
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

class ShopDashboard(WireModel):
    """Revenue overview of one shop, as returned by /shopDashboard"""
    model_config = ConfigDict(populate_by_name=True)

    revenue: Decimal = Decimal(0)
    shop_details: ShopDetails = Field(default_factory=ShopDetails, alias="shopDetails")
    top_selling_items: Dict[str, Any] = Field(default_factory=dict, alias="topSellingItems")
    recent_orders: List[Dict[str, Any]] = Field(default_factory=list, alias="recentOrders")
    revenue_over_time: List[DailyRevenue] = Field(default_factory=list, alias="revenueOverTime")
    customer_insights: List[Dict[str, Any]] = Field(default_factory=list, alias="customerInsights")

    @property
    def top_items(self) -> List[Dict[str, Any]]:
        return list(self.top_selling_items.get("items") or [])
