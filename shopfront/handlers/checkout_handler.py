# shopfront/handlers/checkout_handler.py
from telegram import Update
from telegram.ext import (
    ContextTypes, ConversationHandler, CommandHandler,
    MessageHandler, CallbackQueryHandler, filters
)
from .base_handler import BaseHandler
from ..constants import CHECKOUT_KEY, WAITING_PAYMENT_METHOD, WAITING_PAYMENT_PROOF
from ..exceptions import FetchError, SubmissionError, UploadError, ValidationError
from ..services.payment_service import PaymentService

class CheckoutHandler(BaseHandler):
    """Checkout conversation: payment method, screenshot upload, order submission"""

    def _payment(self, context: ContextTypes.DEFAULT_TYPE) -> PaymentService:
        return context.user_data.get(CHECKOUT_KEY)

    async def start_checkout(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Entry point: "Place order" pressed"""
        query = update.callback_query
        await query.answer()
        if await self.require_session(update, context, owner=False) is None:
            return ConversationHandler.END

        cart = self.cart(context)
        if cart.is_empty:
            await self.reply(update, "❌ Your cart is empty", self.keyboards.cart_menu(cart))
            return ConversationHandler.END

        catalog = self.catalog(context)
        if catalog.selected_shop_id != cart.shop_id or catalog.payment_details is None:
            try:
                await catalog.select_shop(cart.shop_id)
            except FetchError as e:
                await self.reply(update, f"❌ {e}", self.keyboards.cart_menu(cart))
                return ConversationHandler.END

        if catalog.payment_details is None or not catalog.payment_details.methods:
            await self.reply(
                update,
                "❌ Failed to fetch shop payment details",
                self.keyboards.cart_menu(cart)
            )
            return ConversationHandler.END

        context.user_data[CHECKOUT_KEY] = PaymentService(
            self.api(context),
            context.bot_data["file_service"],
            cart
        )
        await self.reply(
            update,
            f"{self.messages.format_cart(cart)}\n\nSelect a payment method:",
            self.keyboards.payment_methods(catalog.payment_details.methods)
        )
        return WAITING_PAYMENT_METHOD

    async def choose_method(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Payment method picked; show the shop's account details"""
        query = update.callback_query
        await query.answer()

        payment = self._payment(context)
        if payment is None:
            await self.reply(update, "❌ Checkout expired, please place the order again.")
            return ConversationHandler.END

        method_type = query.data.split('_', 1)[1]
        try:
            pending = payment.begin(method_type)
        except ValidationError as e:
            await self.reply(update, f"❌ {e}")
            return ConversationHandler.END

        method = self.catalog(context).payment_details.find(method_type)
        await self.reply(
            update,
            self.messages.payment_instructions(pending, method),
            self.keyboards.checkout_menu(payment.can_submit)
        )
        return WAITING_PAYMENT_PROOF

    async def receive_proof(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Payment screenshot received; upload it"""
        payment = self._payment(context)
        if payment is None:
            await update.message.reply_text("❌ Checkout expired, please place the order again.")
            return ConversationHandler.END

        if update.message.photo:
            file_id = update.message.photo[-1].file_id
        else:  # image sent as a document
            file_id = update.message.document.file_id

        file = await context.bot.get_file(file_id)
        content = bytes(await file.download_as_bytearray())

        try:
            await payment.upload_proof(content)
        except (UploadError, ValidationError) as e:
            await update.message.reply_text(
                f"❌ {e}\nPlease send the screenshot again.",
                reply_markup=self.keyboards.checkout_menu(payment.can_submit)
            )
            return WAITING_PAYMENT_PROOF

        method = self.catalog(context).payment_details.find(payment.pending.method)
        await update.message.reply_text(
            "✅ Image uploaded successfully\n\n"
            + self.messages.payment_instructions(payment.pending, method),
            reply_markup=self.keyboards.checkout_menu(payment.can_submit)
        )
        return WAITING_PAYMENT_PROOF

    async def submit(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Verify & place order pressed"""
        query = update.callback_query
        await query.answer()

        payment = self._payment(context)
        if payment is None:
            await self.reply(update, "❌ Checkout expired, please place the order again.")
            return ConversationHandler.END

        dashboard = self.dashboards(context).get(update.effective_chat.id)
        ledger = dashboard.ledger if dashboard is not None and not dashboard.ledger.owner else None

        try:
            order = await payment.submit(ledger=ledger)
        except (ValidationError, SubmissionError) as e:
            await self.reply(update, f"❌ {e}", self.keyboards.checkout_menu(payment.can_submit))
            return WAITING_PAYMENT_PROOF

        context.user_data.pop(CHECKOUT_KEY, None)
        await self.reply(
            update,
            "✅ Payment verified and order placed successfully\n\n"
            + self.messages.format_order(order),
            self.keyboards.main_menu()
        )
        return ConversationHandler.END

    async def cancel(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        payment = self._payment(context)
        if payment is not None:
            payment.reset()
        return await self.cancel_conversation(update, context)

    def conversation(self) -> ConversationHandler:
        """Checkout conversation handler"""
        return ConversationHandler(
            entry_points=[
                CallbackQueryHandler(self.start_checkout, pattern='^checkout$')
            ],
            states={
                WAITING_PAYMENT_METHOD: [
                    CallbackQueryHandler(self.choose_method, pattern='^method_')
                ],
                WAITING_PAYMENT_PROOF: [
                    MessageHandler(filters.PHOTO | filters.Document.IMAGE, self.receive_proof),
                    CallbackQueryHandler(self.submit, pattern='^checkout_submit$')
                ]
            },
            fallbacks=[
                CallbackQueryHandler(self.cancel, pattern='^checkout_cancel$'),
                CommandHandler('cancel', self.cancel)
            ]
        )
