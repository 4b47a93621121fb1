# shopfront/services/order_service.py
import asyncio
import logging
from typing import Any, Dict, List, Optional, Union
import pydantic
from ..exceptions import ApiError, FetchError, ValidationError
from ..models.order import Order, OrderStatus, PaymentStatus

OrderPayload = Union[Order, Dict[str, Any]]

class OrderService:
    """Client-side ledger of orders for one identity.

    Pull (``load_initial``) and push (``merge_insert``/``apply_update``) both
    land here, so there is one reconciliation path whatever the source.
    Applying the same snapshot twice leaves the ledger unchanged.
    """

    def __init__(self, api, owner: bool = False):
        self.api = api
        self.owner = owner
        self._orders: Dict[str, Order] = {}
        # display order, newest first
        self._order_ids: List[str] = []
        self.closed = False
        self.logger = logging.getLogger(__name__)

    @property
    def orders(self) -> List[Order]:
        return [self._orders[order_id] for order_id in self._order_ids]

    def get(self, order_id: str) -> Optional[Order]:
        return self._orders.get(str(order_id))

    def __contains__(self, order_id: str) -> bool:
        return str(order_id) in self._orders

    def __len__(self) -> int:
        return len(self._order_ids)

    def close(self):
        """Detach from the view; later merges are ignored"""
        self.closed = True

    async def load_initial(self) -> List[Order]:
        """Fetch the identity's orders and replace the ledger wholesale"""
        try:
            if self.owner:
                data = await self.api.list_shop_orders()
            else:
                data = await self.api.list_user_orders()
        except ApiError as e:
            self.logger.error(f"Failed to fetch orders: {e}")
            raise FetchError("Failed to fetch orders") from e

        orders = []
        for payload in data:
            try:
                orders.append(Order.model_validate(payload))
            except pydantic.ValidationError as e:
                self.logger.warning(f"Skipping malformed order {payload.get('order_id')}: {e}")

        if self.owner:
            orders = await self._enrich(orders)

        if self.closed:
            self.logger.debug("Ledger closed during load; dropping result")
            return []

        self._replace(orders)
        return self.orders

    def _replace(self, orders: List[Order]):
        self._orders = {}
        self._order_ids = []
        for order in orders:
            if order.order_id not in self._orders:
                self._order_ids.append(order.order_id)
            self._orders[order.order_id] = order

    def merge_insert(self, payload: OrderPayload) -> Optional[Order]:
        """Prepend a new order, or replace the stored one with the same id"""
        if self.closed:
            return None

        order = self._coerce(payload)
        if order is None:
            return None

        existing = self._orders.get(order.order_id)
        if existing is None:
            self._order_ids.insert(0, order.order_id)
        elif order.payment_info is None and existing.payment_info is not None:
            order = order.model_copy(update={"payment_info": existing.payment_info})

        self._orders[order.order_id] = order
        return order

    def apply_update(self, payload: OrderPayload) -> Optional[Order]:
        """Apply an update to a known order; updates for unknown ids are dropped"""
        if self.closed:
            return None

        if isinstance(payload, Order):
            payload = payload.model_dump(exclude_unset=True)

        order_id = payload.get("order_id")
        existing = self._orders.get(str(order_id)) if order_id is not None else None
        if existing is None:
            self.logger.debug(f"Dropping update for unknown order {order_id}")
            return None

        try:
            order = existing.merged_with(payload)
        except pydantic.ValidationError as e:
            self.logger.warning(f"Dropping malformed update for order {order_id}: {e}")
            return None

        self._orders[order.order_id] = order
        return order

    def _coerce(self, payload: OrderPayload) -> Optional[Order]:
        if isinstance(payload, Order):
            return payload
        try:
            return Order.model_validate(payload)
        except pydantic.ValidationError as e:
            self.logger.warning(f"Dropping malformed order {payload.get('order_id')}: {e}")
            return None

    # Owner side

    async def _enrich(self, orders: List[Order]) -> List[Order]:
        """Attach payment info to every order, concurrently and independently"""
        infos = await asyncio.gather(*(self._fetch_payment_info(order.order_id) for order in orders))
        return [
            order.model_copy(update={"payment_info": info})
            for order, info in zip(orders, infos)
        ]

    async def _fetch_payment_info(self, order_id: str) -> Optional[Dict[str, Any]]:
        try:
            info = await self.api.get_payment_id(order_id)
            payment_id = info.get("payment_id")
            if payment_id is None:
                raise ApiError(f"No payment id for order {order_id}")
            details = await self.api.get_payment_details(str(payment_id))
        except ApiError as e:
            self.logger.error(f"Failed to fetch payment details for order {order_id}: {e}")
            return None
        return {**info, **details}

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """Ask the backend to move an order to a new status"""
        if str(order_id) not in self._orders:
            raise ValidationError("Order not found")

        try:
            response = await self.api.update_order_status(order_id, OrderStatus(status).value)
        except ApiError as e:
            self.logger.error(f"Failed to update status of order {order_id}: {e}")
            raise FetchError("Failed to update order status") from e

        return await self._sync_after_write(order_id, response)

    async def update_payment_status(self, order_id: str, status: PaymentStatus) -> Optional[Order]:
        """Ask the backend to mark an order's payment proof verified or rejected"""
        order = self._orders.get(str(order_id))
        if order is None or order.payment_id is None:
            raise ValidationError("Payment information not found")

        try:
            response = await self.api.update_payment_status(
                order_id, order.payment_id, PaymentStatus(status).value
            )
        except ApiError as e:
            self.logger.error(f"Failed to update payment status of order {order_id}: {e}")
            raise FetchError("Failed to update verification status") from e

        return await self._sync_after_write(order_id, response)

    async def _sync_after_write(self, order_id: str, response: Dict[str, Any]) -> Optional[Order]:
        # status is server-authoritative: take the echoed order or pull again
        echoed = response.get("order") if isinstance(response, dict) else None
        if echoed:
            return self.apply_update(echoed)
        await self.load_initial()
        return self.get(order_id)
