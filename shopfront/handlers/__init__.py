# shopfront/handlers/__init__.py
"""Telegram handlers"""
from .user_handlers import UserHandler
from .shop_handlers import ShopHandler
from .checkout_handler import CheckoutHandler
from .order_handlers import OrderHandler, TelegramNotifier
from .admin_handlers import AdminHandler
from .callback_handler import CallbackHandler

__all__ = [
    'UserHandler',
    'ShopHandler',
    'CheckoutHandler',
    'OrderHandler',
    'TelegramNotifier',
    'AdminHandler',
    'CallbackHandler'
]
