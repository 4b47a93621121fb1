from decimal import Decimal

import pytest

from shopfront.config import Config
from shopfront.exceptions import ApiError
from shopfront.models.cart import Cart
from shopfront.models.shop import MenuItem


class FakeApi:
    """In-memory stand-in for ApiClient; records every call"""

    def __init__(self):
        self.calls = []
        self.shops = []
        self.menu_items = {}
        self.payment_details = {}
        self.user_orders = []
        self.shop_orders = []
        self.payment_ids = {}
        self.payment_details_by_id = {}
        self.owner_shops = []
        self.dashboards = {}
        self.upload_results = []
        self.submit_results = []
        self.write_results = []
        self.fail = set()

    def _call(self, name, *args):
        self.calls.append((name, args))
        if name in self.fail:
            raise ApiError(f"{name} failed", status=500)

    def count(self, name):
        return len([c for c in self.calls if c[0] == name])

    async def list_shops(self):
        self._call("list_shops")
        return self.shops

    async def list_menu_items(self, shop_id):
        self._call("list_menu_items", shop_id)
        return [dict(item) for item in self.menu_items.get(shop_id, [])]

    async def get_shop_payment_details(self, shop_id):
        self._call("get_shop_payment_details", shop_id)
        return self.payment_details.get(shop_id, {"methods": []})

    async def upload_image(self, content, filename, content_type="application/octet-stream"):
        self._call("upload_image", filename)
        result = self.upload_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def verify_payment_and_create_order(self, payload):
        self._call("verify_payment_and_create_order", payload)
        result = self.submit_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def list_user_orders(self):
        self._call("list_user_orders")
        return [dict(order) for order in self.user_orders]

    async def list_shop_orders(self):
        self._call("list_shop_orders")
        return [dict(order) for order in self.shop_orders]

    async def update_order_status(self, order_id, status):
        self._call("update_order_status", order_id, status)
        return self.write_results.pop(0) if self.write_results else {}

    async def update_payment_status(self, order_id, payment_id, status):
        self._call("update_payment_status", order_id, payment_id, status)
        return self.write_results.pop(0) if self.write_results else {}

    async def get_payment_id(self, order_id):
        self._call("get_payment_id", order_id)
        info = self.payment_ids.get(order_id)
        if info is None:
            raise ApiError(f"no payment for {order_id}", status=404)
        return info

    async def get_payment_details(self, payment_id):
        self._call("get_payment_details", payment_id)
        details = self.payment_details_by_id.get(payment_id)
        if details is None:
            raise ApiError(f"no details for {payment_id}", status=404)
        return details

    async def list_owner_shops(self):
        self._call("list_owner_shops")
        return self.owner_shops

    async def get_shop_dashboard(self, shop_id):
        self._call("get_shop_dashboard", shop_id)
        return self.dashboards[shop_id]


class FakeFileService:
    """Accepts any non-empty content as a PNG"""

    def inspect_image(self, content):
        if not content:
            return {'success': False, 'error': 'The file is empty'}
        return {'success': True, 'filename': 'payment.png', 'mime_type': 'image/png', 'size': len(content)}


def order_payload(order_id="O1", status="pending", payment_status="pending", **extra):
    payload = {
        "order_id": order_id,
        "shop_id": "S1",
        "user_id": "U1",
        "items": [{"item_id": "A", "item_name": "Tea", "quantity": 3, "price": "2.50"}],
        "total_price": "7.50",
        "status": status,
        "payment_status": payment_status,
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    payload.update(extra)
    return payload


@pytest.fixture(autouse=True)
def local_settings(monkeypatch):
    monkeypatch.setattr(Config, "CURRENCY", "Rs")
    monkeypatch.setattr(Config, "TIMEZONE", "Asia/Karachi")


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def file_service():
    return FakeFileService()


@pytest.fixture
def tea():
    return MenuItem(item_id="A", shop_id="S1", name="Tea", price=Decimal("2.50"))


@pytest.fixture
def samosa():
    return MenuItem(item_id="B", shop_id="S1", name="Samosa", price=Decimal("1.25"))


@pytest.fixture
def other_shop_item():
    return MenuItem(item_id="Z", shop_id="S2", name="Coffee", price=Decimal("3.00"))


@pytest.fixture
def cart():
    return Cart()
