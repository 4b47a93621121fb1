# shopfront/handlers/admin_handlers.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..exceptions import FetchError
from ..services.report_service import ReportService

class AdminHandler(BaseHandler):
    """Shop owner reporting"""

    async def show_report(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Revenue overview of the owner's shop"""
        if update.callback_query:
            await update.callback_query.answer()
        if await self.require_session(update, context, owner=True) is None:
            return

        report_service = ReportService(self.api(context))
        shop_id = context.args[0] if context.args else None
        try:
            report = await report_service.get_shop_report(shop_id)
        except FetchError as e:
            await self.reply(update, f"❌ {e}", self.keyboards.main_menu(is_owner=True))
            return

        periods = {
            "📅 Today": report_service.summarize_period(report, 1),
            "🗓 Last 7 days": report_service.summarize_period(report, 7),
            "📆 Last 30 days": report_service.summarize_period(report, 30),
        }
        await self.reply(
            update,
            self.messages.format_report(report, periods),
            self.keyboards.main_menu(is_owner=True)
        )
