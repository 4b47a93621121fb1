from decimal import Decimal

import pytest

from shopfront.exceptions import FetchError
from shopfront.services.catalog_service import CatalogService


@pytest.fixture
def catalog(api):
    api.shops = [{"id": 1, "name": "Chai Corner"}, {"id": "S2", "name": "Brew Bar"}]
    api.menu_items = {"1": [{"item_id": 10, "name": "Tea", "price": "2.50"}]}
    api.payment_details = {"1": {"methods": [{"id": 5, "type": "jazzcash", "details": ["0300-1234567"]}]}}
    return CatalogService(api)


class TestShops:
    async def test_load_shops(self, catalog):
        shops = await catalog.load_shops()

        assert [shop.id for shop in shops] == ["1", "S2"]
        assert catalog.get_shop(1).name == "Chai Corner"
        assert catalog.get_shop("missing") is None

    async def test_load_shops_failure(self, catalog, api):
        api.fail.add("list_shops")

        with pytest.raises(FetchError):
            await catalog.load_shops()


class TestSelectShop:
    async def test_select_shop_loads_menu_and_methods(self, catalog):
        items = await catalog.select_shop("1")

        assert catalog.selected_shop_id == "1"
        assert items[0].shop_id == "1"
        assert catalog.get_item(10).price == Decimal("2.50")
        assert catalog.payment_details.find("jazzcash").details == ["0300-1234567"]
        assert catalog.payment_details.find("easypaisa") is None

    async def test_menu_failure_keeps_previous_selection(self, catalog, api):
        await catalog.select_shop("1")
        api.fail.add("list_menu_items")

        with pytest.raises(FetchError):
            await catalog.select_shop("S2")
        assert catalog.selected_shop_id == "1"
        assert catalog.get_item("10") is not None

    async def test_missing_payment_details_do_not_block_menu(self, catalog, api):
        api.fail.add("get_shop_payment_details")

        items = await catalog.select_shop("1")

        assert len(items) == 1
        assert catalog.payment_details is None

    async def test_negative_price_is_rejected(self, catalog, api):
        api.menu_items["1"] = [{"item_id": 10, "name": "Tea", "price": "-1"}]

        with pytest.raises(FetchError):
            await catalog.select_shop("1")
