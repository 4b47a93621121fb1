# shopfront/utils/formatters.py
from datetime import datetime
from decimal import Decimal
from typing import Optional
import pytz
from ..config import Config

def format_price(amount: Decimal) -> str:
    """Format a price with the shop currency"""
    return f"{Config.CURRENCY} {Decimal(amount):,.2f}"

def format_datetime(dt: Optional[datetime]) -> str:
    """Format a timestamp in the configured timezone"""
    if dt is None:
        return "-"
    local_tz = pytz.timezone(Config.TIMEZONE)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(local_tz).strftime("%Y-%m-%d %H:%M")
