# shopfront/services/report_service.py
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
import pydantic
import pytz
from ..config import Config
from ..exceptions import ApiError, FetchError
from ..models.report import ShopDashboard

class ReportService:
    """Owner revenue reporting"""
    
    def __init__(self, api):
        self.api = api
        self.tz = pytz.timezone(Config.TIMEZONE)
        self.logger = logging.getLogger(__name__)

    async def get_owner_shops(self) -> List[Dict[str, Any]]:
        try:
            return await self.api.list_owner_shops()
        except ApiError as e:
            self.logger.error(f"Failed to fetch owner shops: {e}")
            raise FetchError("Failed to fetch dashboard data. Please try again.") from e

    async def get_shop_report(self, shop_id: Optional[str] = None) -> ShopDashboard:
        """Dashboard of the given shop, or of the owner's first shop"""
        if shop_id is None:
            shops = await self.get_owner_shops()
            if not shops:
                raise FetchError("No shops found for this owner.")
            shop_id = str(shops[0]["id"])

        try:
            data = await self.api.get_shop_dashboard(shop_id)
            return ShopDashboard.model_validate(data)
        except (ApiError, pydantic.ValidationError) as e:
            self.logger.error(f"Failed to fetch dashboard of shop {shop_id}: {e}")
            raise FetchError("Failed to fetch dashboard data. Please try again.") from e

    def summarize_period(self, report: ShopDashboard, days: int) -> Dict[str, Any]:
        """Revenue over the last ``days`` days, counted in the shop's timezone"""
        today = datetime.now(self.tz).date()
        start_date = today - timedelta(days=days - 1)
        
        points = [p for p in report.revenue_over_time if start_date <= p.day <= today]
        return {
            "period": {
                "start": start_date.strftime("%Y-%m-%d"),
                "end": today.strftime("%Y-%m-%d")
            },
            "total_income": sum((p.daily_revenue for p in points), Decimal(0)),
            "active_days": len([p for p in points if p.daily_revenue > 0])
        }
