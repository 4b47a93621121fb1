# shopfront/utils/messages.py
from typing import Any, Dict, List, Optional
from ..models.cart import Cart
from ..models.order import Order, OrderStatus, PaymentStatus
from ..models.payment import PaymentMethod, PendingPayment
from ..models.report import ShopDashboard
from ..models.shop import MenuItem, Shop
from .formatters import format_price, format_datetime

STATUS_EMOJI = {
    OrderStatus.PENDING: "⏳",
    OrderStatus.PREPARING: "👨‍🍳",
    OrderStatus.ACCEPTED: "✅",
    OrderStatus.REJECTED: "❌",
    OrderStatus.DELIVERED: "📦",
    OrderStatus.DISCARDED: "🗑",
}

PAYMENT_EMOJI = {
    PaymentStatus.PENDING: "🔍",
    PaymentStatus.VERIFIED: "✅",
    PaymentStatus.REJECTED: "❌",
}

class Messages:
    @staticmethod
    def welcome(name: Optional[str], is_owner: bool) -> str:
        text = f"Hi {name or 'there'}! 👋\n\n"
        if is_owner:
            return text + "Manage your shop orders and reports from the menu below."
        return text + "Browse shops, fill your cart and track your orders from the menu below."

    @staticmethod
    def format_shops(shops: List[Shop]) -> str:
        if not shops:
            return "There are no shops available right now."
        return "🏪 Pick a shop:"

    @staticmethod
    def format_menu(shop: Optional[Shop], items: List[MenuItem]) -> str:
        title = shop.name if shop else "Menu"
        if not items:
            return f"🍽 {title}\n\nThis shop has no items yet."
        lines = [f"🍽 {title}\n"]
        for item in items:
            lines.append(f"• {item.name}: {format_price(item.price)}")
            if item.description:
                lines.append(f"   {item.description}")
        lines.append("\nTap an item to add it to your cart.")
        return "\n".join(lines)

    @staticmethod
    def format_cart(cart: Cart) -> str:
        """Cart contents with line totals"""
        if cart.is_empty:
            return "🛒 Your cart is empty"
        lines = ["🛒 Cart", "------------------"]
        for line in cart.lines:
            lines.append(f"{line.name} (x{line.quantity}): {format_price(line.line_total)}")
        lines.append("------------------")
        lines.append(f"💰 Total: {format_price(cart.total())}")
        return "\n".join(lines)

    @staticmethod
    def payment_instructions(pending: PendingPayment, method: Optional[PaymentMethod]) -> str:
        details = "\n".join(method.details) if method and method.details else "-"
        label = method.label if method else pending.method
        text = (
            f"💳 Pay with {label}\n\n"
            f"{details}\n\n"
            f"💰 Amount: {format_price(pending.total)}\n\n"
            "🔹 After paying, send a screenshot of the payment here."
        )
        if pending.proof_image_url:
            text += "\n\n🖼 Screenshot received. Tap \"Verify & Place Order\" to submit."
        return text

    @staticmethod
    def format_order(order: Order) -> str:
        """One-block order summary"""
        items_text = "\n".join(
            f"- {item.quantity}x {item.item_name}: {format_price(item.total_price)}"
            for item in order.items
        )
        return (
            f"🛍 Order #{order.order_id}\n"
            f"------------------\n"
            f"{items_text}\n"
            f"------------------\n"
            f"💰 Total: {format_price(order.total_price)}\n"
            f"📊 Status: {STATUS_EMOJI[order.status]} {order.status.value}\n"
            f"💳 Payment: {PAYMENT_EMOJI[order.payment_status]} {order.payment_status.value}\n"
            f"🕒 Ordered: {format_datetime(order.created_at)}\n"
        )

    @staticmethod
    def format_order_list(orders: List[Order]) -> str:
        if not orders:
            return "No orders found."
        return "📝 Orders:\n\n" + "\n".join(Messages.format_order(order) for order in orders)

    @staticmethod
    def format_order_detail(order: Order) -> str:
        """Order summary plus the payment proof details the owner checks"""
        text = Messages.format_order(order)
        text += f"🔄 Updated: {format_datetime(order.updated_at)}\n"

        info = order.payment_info
        if info is None:
            return text + "\n⚠️ Payment details unavailable"

        payment: Dict[str, Any] = info.get("payment") or {}
        text += "\n💳 Payment details\n"
        text += f"Payment ID: {info.get('payment_id', '-')}\n"
        if info.get("payment_method") or payment.get("method"):
            text += f"Method: {info.get('payment_method') or payment.get('method')}\n"
        if payment.get("geminiResponse"):
            text += f"Automated check: {payment['geminiResponse']}\n"
        if payment.get("screenshotUrl"):
            text += f"Screenshot: {payment['screenshotUrl']}\n"
        return text

    @staticmethod
    def order_status_changed(order: Order) -> str:
        return f"🔔 Order {order.order_id} status updated to {order.status.value}"

    @staticmethod
    def new_order_received(order: Order) -> str:
        return f"🆕 New order received!\n\n{Messages.format_order(order)}"

    @staticmethod
    def format_report(report: ShopDashboard, periods: Dict[str, Dict[str, Any]]) -> str:
        details = report.shop_details
        text = (
            f"📊 {details.name or 'Shop'} dashboard\n\n"
            f"💰 Total revenue: {format_price(report.revenue)}\n"
            f"📦 Total orders: {details.total_orders:,}\n"
            f"🍽 Menu items: {details.total_menu_items:,}\n"
            f"📈 Avg. order value: {format_price(details.average_order_value)}\n"
        )
        for title, summary in periods.items():
            text += f"{title}: {format_price(summary['total_income'])}\n"

        if report.top_items:
            text += "\n🔝 Top selling items:\n"
            for item in report.top_items:
                text += f"- {item.get('name') or item.get('item_name')}: {item.get('total_quantity', item.get('sales', 0))} sold\n"

        if report.customer_insights:
            text += "\n👥 Top customers:\n"
            for customer in report.customer_insights:
                text += f"- {customer.get('name') or customer.get('email')}: {customer.get('order_count', 0)} orders\n"
        return text
