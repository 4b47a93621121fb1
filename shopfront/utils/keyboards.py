# shopfront/utils/keyboards.py
from typing import List
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from ..models.cart import Cart
from ..models.order import Order, OrderStatus, PaymentStatus
from ..models.payment import PaymentMethod
from ..models.shop import MenuItem, Shop
from .formatters import format_price

class Keyboards:
    @staticmethod
    def main_menu(is_owner: bool = False) -> InlineKeyboardMarkup:
        """Main menu keyboard"""
        if is_owner:
            keyboard = [
                [InlineKeyboardButton("📋 Shop orders", callback_data="shop_orders")],
                [InlineKeyboardButton("📈 Revenue report", callback_data="report")],
            ]
        else:
            keyboard = [
                [InlineKeyboardButton("🏪 Shops", callback_data="shops")],
                [InlineKeyboardButton("🛒 My cart", callback_data="cart")],
                [InlineKeyboardButton("📝 My orders", callback_data="my_orders")],
            ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def shops_menu(shops: List[Shop]) -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton(shop.name, callback_data=f"shop_{shop.id}")]
            for shop in shops
        ]
        keyboard.append([InlineKeyboardButton("🏠 Main menu", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def menu_items_menu(items: List[MenuItem]) -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton(
                f"➕ {item.name} ({format_price(item.price)})",
                callback_data=f"add_{item.item_id}"
            )]
            for item in items
        ]
        keyboard.append([
            InlineKeyboardButton("🛒 Cart", callback_data="cart"),
            InlineKeyboardButton("⬅️ Shops", callback_data="shops")
        ])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def cart_menu(cart: Cart) -> InlineKeyboardMarkup:
        """Quantity controls per line plus checkout"""
        keyboard = []
        for line in cart.lines:
            keyboard.append([
                InlineKeyboardButton("➖", callback_data=f"cartdec_{line.item_id}"),
                InlineKeyboardButton(f"{line.name} x{line.quantity}", callback_data="cart"),
                InlineKeyboardButton("➕", callback_data=f"cartinc_{line.item_id}"),
                InlineKeyboardButton("🗑", callback_data=f"cartdel_{line.item_id}"),
            ])
        if not cart.is_empty:
            keyboard.append([
                InlineKeyboardButton("💳 Place order", callback_data="checkout"),
                InlineKeyboardButton("🧹 Clear", callback_data="cart_clear")
            ])
        keyboard.append([InlineKeyboardButton("🏠 Main menu", callback_data="main_menu")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def other_shop_cart() -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton("🧹 Clear cart", callback_data="cart_clear")],
            [InlineKeyboardButton("🛒 View cart", callback_data="cart")]
        ]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def payment_methods(methods: List[PaymentMethod]) -> InlineKeyboardMarkup:
        """Payment method keyboard"""
        keyboard = [
            [InlineKeyboardButton(f"💳 {method.label}", callback_data=f"method_{method.type}")]
            for method in methods
        ]
        keyboard.append([InlineKeyboardButton("❌ Cancel", callback_data="checkout_cancel")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def checkout_menu(can_submit: bool) -> InlineKeyboardMarkup:
        keyboard = []
        if can_submit:
            keyboard.append([InlineKeyboardButton("✅ Verify & Place Order", callback_data="checkout_submit")])
        keyboard.append([InlineKeyboardButton("❌ Cancel", callback_data="checkout_cancel")])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def orders_menu(orders: List[Order]) -> InlineKeyboardMarkup:
        keyboard = [
            [InlineKeyboardButton(
                f"🔎 #{order.order_id} ({order.status.value})",
                callback_data=f"order_{order.order_id}"
            )]
            for order in orders
        ]
        keyboard.append([
            InlineKeyboardButton("🔄 Refresh", callback_data="orders_refresh"),
            InlineKeyboardButton("✖️ Close", callback_data="orders_close")
        ])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def order_detail_menu(order: Order, is_owner: bool) -> InlineKeyboardMarkup:
        keyboard = []
        if is_owner:
            statuses = [s for s in OrderStatus if s != OrderStatus.PENDING]
            for i in range(0, len(statuses), 3):
                keyboard.append([
                    InlineKeyboardButton(s.value.title(), callback_data=f"status_{order.order_id}_{s.value}")
                    for s in statuses[i:i + 3]
                ])
            keyboard.append([
                InlineKeyboardButton(f"💳 {s.value.title()}", callback_data=f"verify_{order.order_id}_{s.value}")
                for s in PaymentStatus
            ])
        keyboard.append([InlineKeyboardButton("⬅️ Back to orders", callback_data="detail_close")])
        return InlineKeyboardMarkup(keyboard)
