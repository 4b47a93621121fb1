# shopfront/bot.py
import logging
import aiohttp
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
)
from .config import Config
from .constants import DASHBOARDS_KEY, HTTP_SESSION_KEY
from .handlers import (
    UserHandler,
    ShopHandler,
    CheckoutHandler,
    OrderHandler,
    AdminHandler,
    CallbackHandler
)
from .services.dashboard_service import DashboardRegistry
from .services.file_service import FileService
from .services.session_service import SessionService

logger = logging.getLogger(__name__)

class StorefrontBot:
    def __init__(self):
        """Build the bot application"""
        self.application = (
            Application.builder()
            .token(Config.TELEGRAM_TOKEN)
            .post_init(self.on_startup)
            .post_shutdown(self.on_shutdown)
            .build()
        )
        self.user_handler = UserHandler()
        self.shop_handler = ShopHandler()
        self.checkout_handler = CheckoutHandler()
        self.order_handler = OrderHandler()
        self.admin_handler = AdminHandler()
        self.callback_handler = CallbackHandler(
            self.user_handler, self.shop_handler, self.order_handler, self.admin_handler
        )
        self.setup_handlers()

    @staticmethod
    async def on_startup(application: Application):
        """Shared resources living as long as the bot"""
        http_session = aiohttp.ClientSession()
        application.bot_data[HTTP_SESSION_KEY] = http_session
        application.bot_data["session_service"] = SessionService(
            http_session, Config.API_BASE_URL, timeout=Config.REQUEST_TIMEOUT
        )
        application.bot_data["file_service"] = FileService()
        application.bot_data[DASHBOARDS_KEY] = DashboardRegistry()
        logger.info(f"Backend at {Config.API_BASE_URL}, push channel at {Config.PUSH_URL or 'disabled'}")

    @staticmethod
    async def on_shutdown(application: Application):
        """Unmount every live view and close the HTTP session"""
        registry = application.bot_data.get(DASHBOARDS_KEY)
        if registry is not None:
            await registry.close_all()
        http_session = application.bot_data.get(HTTP_SESSION_KEY)
        if http_session is not None:
            await http_session.close()
        
    def setup_handlers(self):
        """Register bot handlers"""
        # Session and menus
        self.application.add_handler(CommandHandler("start", self.user_handler.start))
        self.application.add_handler(CommandHandler("help", self.user_handler.help))
        self.application.add_handler(CommandHandler("login", self.user_handler.login))
        self.application.add_handler(CommandHandler("logout", self.user_handler.logout))
        
        # Customer dashboard
        self.application.add_handler(CommandHandler("shops", self.shop_handler.show_shops))
        self.application.add_handler(CommandHandler("cart", self.shop_handler.show_cart))
        self.application.add_handler(CommandHandler("orders", self.order_handler.show_my_orders))
        
        # Owner dashboard
        self.application.add_handler(CommandHandler("shoporders", self.order_handler.show_shop_orders))
        self.application.add_handler(CommandHandler("report", self.admin_handler.show_report))
        self.application.add_handler(CommandHandler("close", self.order_handler.close))
        
        # Checkout conversation must see its callbacks before the router
        self.application.add_handler(self.checkout_handler.conversation())
        self.application.add_handler(CallbackQueryHandler(self.callback_handler.handle_callback))

    def run(self):
        """Poll for updates until interrupted"""
        logger.info("Starting bot...")
        self.application.run_polling()
