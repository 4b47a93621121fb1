# shopfront/services/catalog_service.py
import logging
from typing import List, Optional
import pydantic
from ..exceptions import ApiError, FetchError
from ..models.payment import ShopPaymentDetails
from ..models.shop import MenuItem, Shop

class CatalogService:
    """Read-through cache of shops and the selected shop's menu"""

    def __init__(self, api):
        self.api = api
        self.shops: List[Shop] = []
        self.selected_shop_id: Optional[str] = None
        self.menu_items: List[MenuItem] = []
        self.payment_details: Optional[ShopPaymentDetails] = None
        self.logger = logging.getLogger(__name__)

    async def load_shops(self) -> List[Shop]:
        """Fetch the list of shops"""
        try:
            data = await self.api.list_shops()
            self.shops = [Shop.model_validate(shop) for shop in data]
        except (ApiError, pydantic.ValidationError) as e:
            self.logger.error(f"Failed to fetch shops: {e}")
            raise FetchError("Failed to fetch shops") from e
        return self.shops

    async def select_shop(self, shop_id: str) -> List[MenuItem]:
        """Fetch a shop's menu and payment details and make it the selected shop"""
        try:
            data = await self.api.list_menu_items(shop_id)
            items = []
            for item in data:
                # some menus omit shop_id on their items
                item.setdefault("shop_id", shop_id)
                items.append(MenuItem.model_validate(item))
        except (ApiError, pydantic.ValidationError) as e:
            self.logger.error(f"Failed to fetch menu items for shop {shop_id}: {e}")
            raise FetchError("Failed to fetch menu items") from e

        self.menu_items = items
        self.selected_shop_id = str(shop_id)
        self.payment_details = await self._fetch_payment_details(shop_id)
        return self.menu_items

    async def _fetch_payment_details(self, shop_id: str) -> Optional[ShopPaymentDetails]:
        try:
            data = await self.api.get_shop_payment_details(shop_id)
            return ShopPaymentDetails.model_validate(data)
        except (ApiError, pydantic.ValidationError) as e:
            # the menu stays usable; checkout reports the missing methods
            self.logger.warning(f"Failed to fetch payment details for shop {shop_id}: {e}")
            return None

    def get_shop(self, shop_id: str) -> Optional[Shop]:
        for shop in self.shops:
            if shop.id == str(shop_id):
                return shop
        return None

    def get_item(self, item_id: str) -> Optional[MenuItem]:
        for item in self.menu_items:
            if item.item_id == str(item_id):
                return item
        return None
