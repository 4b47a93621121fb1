# shopfront/services/api_client.py
import asyncio
import logging
from typing import Any, Dict, List, Optional
import aiohttp
from ..exceptions import ApiError

class ApiClient:
    """Thin async client for the storefront REST backend.

    One shared ``aiohttp.ClientSession`` is used by every chat; the bearer
    token of the session that owns this client is attached to each request.
    Every method documents the single response shape it relies on.
    """

    def __init__(self, http_session: aiohttp.ClientSession, base_url: str,
                 token: Optional[str] = None, timeout: int = 30):
        self.http = http_session
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.logger = logging.getLogger(__name__)

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with self.http.request(
                method, url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    self.logger.warning(f"{method} {path} failed: {response.status} {body[:200]}")
                    raise ApiError(f"{method} {path} returned {response.status}", status=response.status)
                data = await response.json(content_type=None)
                return data if data is not None else {}
        except aiohttp.ClientError as e:
            self.logger.error(f"{method} {path} transport error: {e}")
            raise ApiError(f"{method} {path} failed: {e}") from e
        except asyncio.TimeoutError as e:
            self.logger.error(f"{method} {path} timed out")
            raise ApiError(f"{method} {path} timed out") from e
        except ValueError as e:
            self.logger.error(f"{method} {path} returned invalid JSON: {e}")
            raise ApiError(f"{method} {path} returned invalid JSON") from e

    # Session
    async def verify_token(self) -> Dict[str, Any]:
        """GET /verifyToken -> {user: {...}}"""
        return await self._request("GET", "/verifyToken")

    # Catalog
    async def list_shops(self) -> List[Dict[str, Any]]:
        """GET /getAllShops -> [shop, ...]"""
        return await self._request("GET", "/getAllShops")

    async def list_menu_items(self, shop_id: str) -> List[Dict[str, Any]]:
        """GET /shop/{id}/getAllMenuItems -> {items: [...]}"""
        data = await self._request("GET", f"/shop/{shop_id}/getAllMenuItems")
        return data.get("items") or []

    async def get_shop_payment_details(self, shop_id: str) -> Dict[str, Any]:
        """GET /shop/{id}/payment-details -> {methods: [{id, type, details}]}"""
        return await self._request("GET", f"/shop/{shop_id}/payment-details")

    # Checkout
    async def upload_image(self, content: bytes, filename: str,
                           content_type: str = "application/octet-stream") -> str:
        """POST /imageupload (multipart field "image") -> {data: {url}}"""
        form = aiohttp.FormData()
        form.add_field("image", content, filename=filename, content_type=content_type)
        data = await self._request("POST", "/imageupload", data=form)
        url = (data.get("data") or {}).get("url")
        if not url:
            raise ApiError("Image upload response carried no url")
        return url

    async def verify_payment_and_create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST /verifyPaymentAndCreateOrder -> {status, order}"""
        return await self._request("POST", "/verifyPaymentAndCreateOrder", json=payload)

    # Orders
    async def list_user_orders(self) -> List[Dict[str, Any]]:
        """GET /listUserOrders -> {orders: [...]}"""
        data = await self._request("GET", "/listUserOrders")
        return data.get("orders") or []

    async def list_shop_orders(self) -> List[Dict[str, Any]]:
        """GET /listShopOrders -> {orders: [...]}"""
        data = await self._request("GET", "/listShopOrders")
        return data.get("orders") or []

    async def update_order_status(self, order_id: str, status: str) -> Dict[str, Any]:
        """PUT /updateOrderStatus/{id}; may echo {order}"""
        return await self._request("PUT", f"/updateOrderStatus/{order_id}", json={"status": status})

    async def update_payment_status(self, order_id: str, payment_id: str, status: str) -> Dict[str, Any]:
        """PUT /updatePaymentStatus/{id}; may echo {order}"""
        return await self._request(
            "PUT", f"/updatePaymentStatus/{order_id}",
            json={"paymentId": payment_id, "status": status}
        )

    async def get_payment_id(self, order_id: str) -> Dict[str, Any]:
        """GET /getPaymentId/{id} -> {paymentInfo: {payment_id, ...}}"""
        data = await self._request("GET", f"/getPaymentId/{order_id}")
        return data.get("paymentInfo") or {}

    async def get_payment_details(self, payment_id: str) -> Dict[str, Any]:
        """GET /paymentDetails/{paymentId} -> {data: {...}}"""
        data = await self._request("GET", f"/paymentDetails/{payment_id}")
        return data.get("data") or {}

    # Reporting
    async def list_owner_shops(self) -> List[Dict[str, Any]]:
        """GET /ownerShops -> {shops: [...]}"""
        data = await self._request("GET", "/ownerShops")
        return data.get("shops") or []

    async def get_shop_dashboard(self, shop_id: str) -> Dict[str, Any]:
        """GET /shopDashboard/{id} -> dashboard object"""
        return await self._request("GET", f"/shopDashboard/{shop_id}")
