# shopfront/handlers/callback_handler.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from .user_handlers import UserHandler
from .shop_handlers import ShopHandler
from .order_handlers import OrderHandler
from .admin_handlers import AdminHandler

class CallbackHandler(BaseHandler):
    """Routes callback queries outside the checkout conversation"""

    def __init__(self, user_handler: UserHandler, shop_handler: ShopHandler,
                 order_handler: OrderHandler, admin_handler: AdminHandler):
        super().__init__()
        self.user_handler = user_handler
        self.shop_handler = shop_handler
        self.order_handler = order_handler
        self.admin_handler = admin_handler
    
    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Dispatch every callback query to its handler"""
        query = update.callback_query
        data = query.data
        
        if data == "main_menu":
            await self.user_handler.show_main_menu(update, context)
        elif data == "shops":
            await self.shop_handler.show_shops(update, context)
        elif data == "shop_orders":
            await self.order_handler.show_shop_orders(update, context)
        elif data.startswith("shop_"):
            await self.shop_handler.show_menu(update, context, data.split('_', 1)[1])
        elif data.startswith("add_"):
            await self.shop_handler.add_to_cart(update, context, data.split('_', 1)[1])
        elif data.startswith("cart"):
            await self.handle_cart_callback(update, context)
        elif data == "my_orders":
            await self.order_handler.show_my_orders(update, context)
        elif data.startswith("orders_") or data.startswith("order_") or data == "detail_close":
            await self.handle_orders_callback(update, context)
        elif data.startswith("status_") or data.startswith("verify_"):
            await self.handle_owner_callback(update, context)
        elif data == "report":
            await self.admin_handler.show_report(update, context)
        else:
            await query.answer("⚠️ Invalid action")

    async def handle_cart_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        data = update.callback_query.data
        
        if data == "cart":
            await self.shop_handler.show_cart(update, context)
        elif data == "cart_clear":
            await self.shop_handler.clear_cart(update, context)
        elif data.startswith("cartinc_"):
            await self.shop_handler.change_quantity(update, context, data.split('_', 1)[1], 1)
        elif data.startswith("cartdec_"):
            await self.shop_handler.change_quantity(update, context, data.split('_', 1)[1], -1)
        elif data.startswith("cartdel_"):
            await self.shop_handler.remove_from_cart(update, context, data.split('_', 1)[1])
        else:
            await update.callback_query.answer("⚠️ Invalid action")

    async def handle_orders_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        data = update.callback_query.data

        if data == "orders_refresh":
            await self.order_handler.refresh(update, context)
        elif data == "orders_close":
            await self.order_handler.close(update, context)
        elif data == "detail_close":
            await self.order_handler.close_detail(update, context)
        elif data.startswith("order_"):
            await self.order_handler.show_detail(update, context, data.split('_', 1)[1])
        else:
            await update.callback_query.answer("⚠️ Invalid action")

    async def handle_owner_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        # status_<order_id>_<status> / verify_<order_id>_<status>
        kind, rest = update.callback_query.data.split('_', 1)
        order_id, status = rest.rsplit('_', 1)

        if kind == "status":
            await self.order_handler.update_status(update, context, order_id, status)
        else:
            await self.order_handler.update_verification(update, context, order_id, status)
