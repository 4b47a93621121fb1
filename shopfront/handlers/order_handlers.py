# shopfront/handlers/order_handlers.py
import logging
from typing import Optional
from telegram import Bot, Update
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..config import Config
from ..constants import HTTP_SESSION_KEY
from ..exceptions import ApiError, FetchError, ValidationError
from ..models.order import Order, OrderStatus, PaymentStatus
from ..models.user import Session
from ..services.dashboard_service import (
    DashboardNotifier, OrderDashboard, customer_scope, owner_scope
)
from ..services.live_update_service import LiveUpdateService
from ..services.order_service import OrderService
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages

class TelegramNotifier(DashboardNotifier):
    """Shows dashboard changes in the chat that mounted it"""

    def __init__(self, bot: Bot, chat_id: int, is_owner: bool):
        self.bot = bot
        self.chat_id = chat_id
        self.is_owner = is_owner
        self.detail_message_id: Optional[int] = None
        self.logger = logging.getLogger(__name__)

    async def order_created(self, order: Order):
        await self.bot.send_message(self.chat_id, Messages.new_order_received(order))

    async def order_updated(self, order: Order):
        await self.bot.send_message(self.chat_id, Messages.order_status_changed(order))

    async def detail_refreshed(self, order: Order):
        if self.detail_message_id is None:
            return
        try:
            await self.bot.edit_message_text(
                Messages.format_order_detail(order) if self.is_owner else Messages.format_order(order),
                chat_id=self.chat_id,
                message_id=self.detail_message_id,
                reply_markup=Keyboards.order_detail_menu(order, self.is_owner)
            )
        except BadRequest as e:
            # Telegram rejects edits that change nothing
            if "not modified" in str(e).lower():
                return
            self.logger.warning(f"Order detail message {self.detail_message_id} not refreshed: {e}")
            self.detail_message_id = None
        except TelegramError as e:
            self.logger.warning(f"Order detail message {self.detail_message_id} not refreshed: {e}")

class OrderHandler(BaseHandler):
    """Live order views for customers and shop owners"""

    async def show_my_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Mount the customer's live orders view"""
        if update.callback_query:
            await update.callback_query.answer()
        session = await self.require_session(update, context, owner=False)
        if session is None:
            return
        await self._mount(update, context, session, customer_scope(session.user.id))

    async def show_shop_orders(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Mount the owner's live shop orders view"""
        if update.callback_query:
            await update.callback_query.answer()
        session = await self.require_session(update, context, owner=True)
        if session is None:
            return

        try:
            shops = await self.api(context).list_owner_shops()
            shop_ids = {str(shop["id"]) for shop in shops if shop.get("id") is not None}
        except ApiError as e:
            # without the shop list the channel is left unfiltered
            self.logger.warning(f"Could not fetch owner shops for event scope: {e}")
            shop_ids = set()
        await self._mount(update, context, session, owner_scope(shop_ids))

    async def _mount(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                     session: Session, scope):
        chat_id = update.effective_chat.id
        ledger = OrderService(self.api(context), owner=session.is_owner)
        channel = None
        if Config.PUSH_URL:
            channel = LiveUpdateService(
                context.bot_data[HTTP_SESSION_KEY],
                Config.PUSH_URL,
                token=session.token,
                reconnect_delay=Config.CHANNEL_RECONNECT_DELAY
            )
        dashboard = OrderDashboard(
            ledger,
            channel=channel,
            notifier=TelegramNotifier(context.bot, chat_id, session.is_owner),
            scope=scope,
            # owners rely on the push channel; customers also poll
            refresh_interval=None if session.is_owner else Config.ORDER_REFRESH_INTERVAL
        )

        try:
            await self.dashboards(context).mount(chat_id, dashboard)
        except FetchError as e:
            await self.reply(update, f"❌ {e}", self.keyboards.orders_menu([]))
            return
        await self._render_list(update, dashboard)

    async def _render_list(self, update: Update, dashboard: OrderDashboard):
        orders = dashboard.ledger.orders
        await self.reply(update, self.messages.format_order_list(orders), self.keyboards.orders_menu(orders))

    def _dashboard(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> Optional[OrderDashboard]:
        return self.dashboards(context).get(update.effective_chat.id)

    async def refresh(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Manual refresh of the mounted view"""
        query = update.callback_query
        dashboard = self._dashboard(update, context)
        if dashboard is None:
            await query.answer("This view is closed, open your orders again")
            return
        try:
            await dashboard.refresh()
        except FetchError as e:
            await query.answer(f"❌ {e}")
            return
        await query.answer("🔄 Updated")
        await self._render_list(update, dashboard)

    async def close(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Unmount the live view (button or /close)"""
        closed = await self.dashboards(context).unmount(update.effective_chat.id)
        if update.callback_query:
            await update.callback_query.answer()
            await self.reply(update, "✖️ Live orders view closed.")
        else:
            await update.message.reply_text(
                "✖️ Live orders view closed." if closed else "No live orders view is open."
            )

    async def show_detail(self, update: Update, context: ContextTypes.DEFAULT_TYPE, order_id: str):
        query = update.callback_query
        dashboard = self._dashboard(update, context)
        order = dashboard.open_detail(order_id) if dashboard else None
        if order is None:
            await query.answer("❌ Order not found")
            return
        await query.answer()

        is_owner = dashboard.ledger.owner
        dashboard.notifier.detail_message_id = query.message.message_id
        text = self.messages.format_order_detail(order) if is_owner else self.messages.format_order(order)
        await self.reply(update, text, self.keyboards.order_detail_menu(order, is_owner))

    async def close_detail(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        query = update.callback_query
        await query.answer()
        dashboard = self._dashboard(update, context)
        if dashboard is None:
            await self.reply(update, "This view is closed, open your orders again")
            return
        dashboard.close_detail()
        dashboard.notifier.detail_message_id = None
        await self._render_list(update, dashboard)

    async def update_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                            order_id: str, status: str):
        """Owner changes an order's fulfilment status"""
        await self._owner_write(update, context, order_id, "status", status)

    async def update_verification(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                                  order_id: str, status: str):
        """Owner marks an order's payment proof"""
        await self._owner_write(update, context, order_id, "payment", status)

    async def _owner_write(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                           order_id: str, kind: str, status: str):
        query = update.callback_query
        if await self.require_session(update, context, owner=True) is None:
            return
        dashboard = self._dashboard(update, context)
        if dashboard is None:
            await query.answer("This view is closed, open your orders again")
            return

        try:
            if kind == "status":
                order = await dashboard.ledger.update_order_status(order_id, OrderStatus(status))
                success = "✅ Order status updated successfully"
            else:
                order = await dashboard.ledger.update_payment_status(order_id, PaymentStatus(status))
                success = "✅ Verification status updated successfully"
        except (ValidationError, FetchError) as e:
            await query.answer(f"❌ {e}", show_alert=True)
            return

        await query.answer(success)
        if order is not None and dashboard.detail_order_id == order.order_id:
            await dashboard.notifier.detail_refreshed(order)
