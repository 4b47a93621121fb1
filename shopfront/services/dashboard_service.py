# shopfront/services/dashboard_service.py
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set
from ..exceptions import FetchError
from ..models.order import Order
from .live_update_service import LiveEvent, LiveEventType, LiveUpdateService
from .order_service import OrderService

ScopeFilter = Callable[[Dict[str, Any]], bool]

def customer_scope(user_id: str) -> ScopeFilter:
    """Only orders placed by this customer"""
    return lambda order: str(order.get("user_id")) == str(user_id)

def owner_scope(shop_ids: Set[str]) -> ScopeFilter:
    """Only orders of shops this owner runs; no shop list means no filtering"""
    shop_ids = {str(shop_id) for shop_id in shop_ids}
    return lambda order: not shop_ids or str(order.get("shop_id")) in shop_ids

class DashboardNotifier:
    """View callbacks fired after the ledger has changed"""

    async def order_created(self, order: Order):
        pass

    async def order_updated(self, order: Order):
        pass

    async def detail_refreshed(self, order: Order):
        pass

class OrderDashboard:
    """One mounted orders view: a ledger, its push channel and its refresh loop"""

    def __init__(self, ledger: OrderService, channel: Optional[LiveUpdateService] = None,
                 notifier: Optional[DashboardNotifier] = None,
                 scope: Optional[ScopeFilter] = None,
                 refresh_interval: Optional[float] = None):
        self.ledger = ledger
        self.channel = channel
        self.notifier = notifier or DashboardNotifier()
        self.scope = scope
        self.refresh_interval = refresh_interval
        self.detail_order_id: Optional[str] = None
        self.mounted = False
        self._refresh_task: Optional[asyncio.Task] = None
        self._load_tasks: Set[asyncio.Task] = set()
        self.logger = logging.getLogger(__name__)

        if self.channel is not None:
            self.channel.subscribe(LiveEventType.NEW_ORDER, self._on_new_order)
            self.channel.subscribe(LiveEventType.ORDER_UPDATE, self._on_order_update)

    async def mount(self):
        """Open the channel, start periodic refresh and run the initial load"""
        self.mounted = True
        if self.channel is not None:
            self.channel.open()
        if self.refresh_interval:
            self._refresh_task = asyncio.create_task(self._refresh_loop())
        await self.refresh()

    async def refresh(self):
        """Pull the full order list; cancelled if the view unmounts mid-flight"""
        task = asyncio.create_task(self.ledger.load_initial())
        self._load_tasks.add(task)
        try:
            await task
        except asyncio.CancelledError:
            if self.mounted:
                raise
            self.logger.debug("Order load cancelled by unmount")
        finally:
            self._load_tasks.discard(task)

    async def _refresh_loop(self):
        while self.mounted:
            await asyncio.sleep(self.refresh_interval)
            try:
                await self.refresh()
            except FetchError as e:
                self.logger.warning(f"Periodic order refresh failed: {e}")

    async def unmount(self):
        """Tear the view down; runs to completion whatever is still in flight"""
        self.mounted = False
        self.detail_order_id = None
        self.ledger.close()
        try:
            if self.channel is not None:
                await self.channel.close()
        finally:
            tasks = list(self._load_tasks)
            if self._refresh_task is not None:
                tasks.append(self._refresh_task)
                self._refresh_task = None
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            self._load_tasks.clear()

    def open_detail(self, order_id: str) -> Optional[Order]:
        order = self.ledger.get(order_id)
        self.detail_order_id = order.order_id if order else None
        return order

    def close_detail(self):
        self.detail_order_id = None

    def _in_scope(self, event: LiveEvent) -> bool:
        return self.scope is None or self.scope(event.order)

    async def _on_new_order(self, event: LiveEvent):
        if not self.mounted or not self._in_scope(event):
            return
        order = self.ledger.merge_insert(event.order)
        if order is not None:
            await self._notify(self.notifier.order_created, order)
            await self._notify_detail(order)

    async def _on_order_update(self, event: LiveEvent):
        # partial updates may omit user_id/shop_id; the ledger only holds in-scope orders
        if not self.mounted:
            return
        order = self.ledger.apply_update(event.order)
        if order is not None:
            await self._notify(self.notifier.order_updated, order)
            await self._notify_detail(order)

    async def _notify_detail(self, order: Order):
        if self.detail_order_id == order.order_id:
            await self._notify(self.notifier.detail_refreshed, order)

    async def _notify(self, callback: Callable[[Order], Awaitable[None]], order: Order):
        try:
            await callback(order)
        except Exception as e:
            # one failed view update must not hide the others
            self.logger.error(f"Dashboard notification for order {order.order_id} failed: {e}", exc_info=True)

class DashboardRegistry:
    """At most one mounted dashboard per chat"""

    def __init__(self):
        self._dashboards: Dict[int, OrderDashboard] = {}

    def get(self, chat_id: int) -> Optional[OrderDashboard]:
        return self._dashboards.get(chat_id)

    def __len__(self) -> int:
        return len(self._dashboards)

    async def mount(self, chat_id: int, dashboard: OrderDashboard):
        previous = self._dashboards.pop(chat_id, None)
        self._dashboards[chat_id] = dashboard
        if previous is not None:
            await previous.unmount()
        await dashboard.mount()

    async def unmount(self, chat_id: int) -> bool:
        dashboard = self._dashboards.pop(chat_id, None)
        if dashboard is None:
            return False
        await dashboard.unmount()
        return True

    async def close_all(self):
        for chat_id in list(self._dashboards):
            await self.unmount(chat_id)
