# shopfront/handlers/user_handlers.py
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..constants import CART_KEY, CATALOG_KEY, CHECKOUT_KEY, SESSION_KEY
from ..exceptions import ApiError, AuthError

class UserHandler(BaseHandler):
    """Session and main menu commands"""

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /start"""
        session = self.get_session(context)
        if session is None:
            await update.message.reply_text(
                "Welcome to the storefront! 👋\n\n"
                "Log in with the token from your account page:\n"
                "/login <token>"
            )
            return

        await update.message.reply_text(
            self.messages.welcome(session.user.name, session.is_owner),
            reply_markup=self.keyboards.main_menu(session.is_owner)
        )

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /help"""
        await update.message.reply_text(
            "/login <token> - log in\n"
            "/logout - log out\n"
            "/shops - browse shops\n"
            "/cart - show your cart\n"
            "/orders - your live orders\n"
            "/shoporders - orders of your shop (owners)\n"
            "/report - revenue report (owners)\n"
            "/close - close the live orders view"
        )

    async def login(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /login <token>"""
        if not context.args:
            await update.message.reply_text("Usage: /login <token>")
            return

        try:
            session = await self.session_service(context).login(context.args[0])
        except AuthError as e:
            await update.message.reply_text(f"❌ Login failed: {e}")
            return
        except ApiError:
            await update.message.reply_text("❌ Could not reach the server. Please try again.")
            return

        await self._drop_session_state(update, context)
        context.user_data[SESSION_KEY] = session

        # the token message should not linger in the chat history
        try:
            await update.message.delete()
        except TelegramError as e:
            self.logger.debug(f"Could not delete login message: {e}")

        await update.effective_chat.send_message(
            self.messages.welcome(session.user.name, session.is_owner),
            reply_markup=self.keyboards.main_menu(session.is_owner)
        )

    async def logout(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle /logout"""
        await self._drop_session_state(update, context)
        context.user_data.pop(SESSION_KEY, None)
        await update.message.reply_text("👋 You have been logged out.")

    async def _drop_session_state(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await self.dashboards(context).unmount(update.effective_chat.id)
        for key in (CART_KEY, CATALOG_KEY, CHECKOUT_KEY):
            context.user_data.pop(key, None)

    async def show_main_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show the main menu"""
        if update.callback_query:
            await update.callback_query.answer()
        session = await self.require_session(update, context)
        if session is None:
            return
        await self.reply(update, "🏠 Main menu:", self.keyboards.main_menu(session.is_owner))
