# shopfront/handlers/shop_handlers.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..exceptions import FetchError

class ShopHandler(BaseHandler):
    """Shop browsing and cart handlers for customers"""

    async def show_shops(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """List shops"""
        if update.callback_query:
            await update.callback_query.answer()
        if await self.require_session(update, context, owner=False) is None:
            return

        try:
            shops = await self.catalog(context).load_shops()
        except FetchError as e:
            await self.reply(update, f"❌ {e}", self.keyboards.main_menu())
            return

        await self.reply(update, self.messages.format_shops(shops), self.keyboards.shops_menu(shops))

    async def show_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE, shop_id: str):
        """Select a shop and show its menu"""
        await update.callback_query.answer()
        if await self.require_session(update, context, owner=False) is None:
            return

        catalog = self.catalog(context)
        try:
            items = await catalog.select_shop(shop_id)
        except FetchError as e:
            await self.reply(update, f"❌ {e}", self.keyboards.shops_menu(catalog.shops))
            return

        text = self.messages.format_menu(catalog.get_shop(shop_id), items)
        cart = self.cart(context)
        if not cart.is_empty and cart.shop_id != catalog.selected_shop_id:
            text += "\n\n⚠️ Your cart holds items from another shop. Clear it to order here."
        await self.reply(update, text, self.keyboards.menu_items_menu(items))

    async def add_to_cart(self, update: Update, context: ContextTypes.DEFAULT_TYPE, item_id: str):
        """Add one unit of a menu item to the cart"""
        query = update.callback_query
        if self.get_session(context) is None:
            await query.answer("🔐 Please log in first")
            return

        item = self.catalog(context).get_item(item_id)
        if item is None:
            await query.answer("❌ Item not found, open the menu again")
            return

        cart = self.cart(context)
        if not cart.add_item(item):
            await query.answer()
            await query.message.reply_text(
                "⚠️ Your cart holds items from another shop.\n"
                "Clear the cart to order from this one.",
                reply_markup=self.keyboards.other_shop_cart()
            )
            return

        await query.answer(f"✅ {item.name} added to cart")

    async def show_cart(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Show the cart with quantity controls"""
        if update.callback_query:
            await update.callback_query.answer()
        if await self.require_session(update, context, owner=False) is None:
            return

        cart = self.cart(context)
        await self.reply(update, self.messages.format_cart(cart), self.keyboards.cart_menu(cart))

    async def change_quantity(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                              item_id: str, delta: int):
        cart = self.cart(context)
        for line in cart.lines:
            if line.item_id == item_id:
                cart.update_quantity(item_id, line.quantity + delta)
                break
        await self.show_cart(update, context)

    async def remove_from_cart(self, update: Update, context: ContextTypes.DEFAULT_TYPE, item_id: str):
        self.cart(context).remove_item(item_id)
        await update.callback_query.answer("Item removed from cart")
        cart = self.cart(context)
        await self.reply(update, self.messages.format_cart(cart), self.keyboards.cart_menu(cart))

    async def clear_cart(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        self.cart(context).clear()
        await update.callback_query.answer("🧹 Cart cleared")
        cart = self.cart(context)
        await self.reply(update, self.messages.format_cart(cart), self.keyboards.cart_menu(cart))
