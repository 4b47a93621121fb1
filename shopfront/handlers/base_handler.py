# shopfront/handlers/base_handler.py
import logging
from typing import Optional
from telegram import Update, InlineKeyboardMarkup
from telegram.error import BadRequest
from telegram.ext import ContextTypes, ConversationHandler
from ..constants import CART_KEY, CATALOG_KEY, CHECKOUT_KEY, DASHBOARDS_KEY, SESSION_KEY
from ..models.cart import Cart
from ..models.user import Session
from ..services.api_client import ApiClient
from ..services.catalog_service import CatalogService
from ..services.dashboard_service import DashboardRegistry
from ..services.session_service import SessionService
from ..utils.keyboards import Keyboards
from ..utils.messages import Messages

class BaseHandler:
    """Base class for handlers"""
    def __init__(self):
        self.keyboards = Keyboards()
        self.messages = Messages()
        self.logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    async def cancel_conversation(update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Cancel the current conversation"""
        context.user_data.pop(CHECKOUT_KEY, None)
        if update.callback_query:
            await update.callback_query.answer()
            await update.callback_query.edit_message_text("❌ Cancelled.")
        else:
            await update.message.reply_text("❌ Cancelled.")
        return ConversationHandler.END

    @staticmethod
    def get_session(context: ContextTypes.DEFAULT_TYPE) -> Optional[Session]:
        return context.user_data.get(SESSION_KEY)

    @staticmethod
    def session_service(context: ContextTypes.DEFAULT_TYPE) -> SessionService:
        return context.bot_data["session_service"]

    @staticmethod
    def dashboards(context: ContextTypes.DEFAULT_TYPE) -> DashboardRegistry:
        return context.bot_data[DASHBOARDS_KEY]

    def api(self, context: ContextTypes.DEFAULT_TYPE) -> ApiClient:
        return self.session_service(context).client(self.get_session(context))

    @staticmethod
    def cart(context: ContextTypes.DEFAULT_TYPE) -> Cart:
        return context.user_data.setdefault(CART_KEY, Cart())

    def catalog(self, context: ContextTypes.DEFAULT_TYPE) -> CatalogService:
        catalog = context.user_data.get(CATALOG_KEY)
        if catalog is None:
            catalog = CatalogService(self.api(context))
            context.user_data[CATALOG_KEY] = catalog
        return catalog

    async def require_session(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                              owner: Optional[bool] = None) -> Optional[Session]:
        """Current session, or None after telling the user why not"""
        session = self.get_session(context)
        if session is None:
            await self.reply(update, "🔐 Please log in first: /login <token>")
            return None
        if owner is not None and session.is_owner != owner:
            await self.reply(update, "⛔️ You do not have access to this section.")
            return None
        return session

    @staticmethod
    async def reply(update: Update, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None):
        """Edit the message behind a button press, or answer a typed message"""
        query = update.callback_query
        if query:
            try:
                await query.edit_message_text(text, reply_markup=reply_markup)
            except BadRequest as e:
                # Telegram rejects edits that change nothing
                if "not modified" not in str(e).lower():
                    raise
        else:
            await update.effective_message.reply_text(text, reply_markup=reply_markup)
