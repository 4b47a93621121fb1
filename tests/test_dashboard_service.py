import asyncio

import pytest

from shopfront.models.order import OrderStatus, PaymentStatus
from shopfront.services.dashboard_service import (
    DashboardNotifier, DashboardRegistry, OrderDashboard, customer_scope, owner_scope
)
from shopfront.services.live_update_service import LiveEvent, LiveEventType
from shopfront.services.order_service import OrderService
from conftest import order_payload


class FakeChannel:
    def __init__(self):
        self.subscribers = {event_type: [] for event_type in LiveEventType}
        self.opened = False
        self.closed = False

    def subscribe(self, event_type, callback):
        self.subscribers[LiveEventType(event_type)].append(callback)

    def open(self):
        self.opened = True

    async def close(self):
        self.closed = True

    async def emit(self, event_type, order):
        for callback in self.subscribers[event_type]:
            await callback(LiveEvent(type=event_type, order=order))


class RecordingNotifier(DashboardNotifier):
    def __init__(self):
        self.events = []

    async def order_created(self, order):
        self.events.append(("created", order.order_id))

    async def order_updated(self, order):
        self.events.append(("updated", order.order_id, order.status))

    async def detail_refreshed(self, order):
        self.events.append(("detail", order.order_id, order.status))


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def notifier():
    return RecordingNotifier()


class TestMount:
    async def test_mount_opens_channel_and_loads(self, api, channel):
        api.user_orders = [order_payload("O1")]
        dashboard = OrderDashboard(OrderService(api), channel=channel)

        await dashboard.mount()

        assert dashboard.mounted
        assert channel.opened
        assert [o.order_id for o in dashboard.ledger.orders] == ["O1"]

    async def test_unmount_closes_everything(self, api, channel):
        dashboard = OrderDashboard(OrderService(api), channel=channel, refresh_interval=60)
        await dashboard.mount()
        refresh_task = dashboard._refresh_task

        await dashboard.unmount()

        assert channel.closed
        assert dashboard.ledger.closed
        assert refresh_task.cancelled()
        assert not dashboard.mounted

    async def test_periodic_refresh_pulls_again(self, api):
        dashboard = OrderDashboard(OrderService(api), refresh_interval=0.01)
        await dashboard.mount()

        api.user_orders = [order_payload("O5")]
        for _ in range(100):
            if "O5" in dashboard.ledger:
                break
            await asyncio.sleep(0.01)
        await dashboard.unmount()

        assert api.count("list_user_orders") >= 2

    async def test_load_in_flight_is_cancelled_by_unmount(self, api):
        gate = asyncio.Event()
        original = api.list_user_orders

        async def slow_list():
            await gate.wait()
            return await original()

        api.list_user_orders = slow_list
        api.user_orders = [order_payload("O1")]
        dashboard = OrderDashboard(OrderService(api))
        mount = asyncio.create_task(dashboard.mount())
        await asyncio.sleep(0)

        await dashboard.unmount()
        gate.set()
        await mount

        assert len(dashboard.ledger) == 0


class TestLiveEvents:
    async def test_new_order_is_merged_and_announced(self, api, channel, notifier):
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()

        await channel.emit(LiveEventType.NEW_ORDER, order_payload("O1"))

        assert "O1" in dashboard.ledger
        assert notifier.events == [("created", "O1")]

    async def test_open_detail_is_refreshed_on_update(self, api, channel, notifier):
        api.user_orders = [order_payload("O1")]
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()
        assert dashboard.open_detail("O1").status == OrderStatus.PENDING

        await channel.emit(LiveEventType.ORDER_UPDATE, {"order_id": "O1", "status": "accepted"})

        assert dashboard.ledger.get("O1").status == OrderStatus.ACCEPTED
        assert ("detail", "O1", OrderStatus.ACCEPTED) in notifier.events
        assert ("updated", "O1", OrderStatus.ACCEPTED) in notifier.events

    async def test_closed_detail_is_not_refreshed(self, api, channel, notifier):
        api.user_orders = [order_payload("O1")]
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()
        dashboard.open_detail("O1")
        dashboard.close_detail()

        await channel.emit(LiveEventType.ORDER_UPDATE, {"order_id": "O1", "status": "accepted"})

        assert [e[0] for e in notifier.events] == ["updated"]

    async def test_update_for_unknown_order_is_silent(self, api, channel, notifier):
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()

        await channel.emit(LiveEventType.ORDER_UPDATE, {"order_id": "O9", "status": "accepted"})

        assert notifier.events == []
        assert len(dashboard.ledger) == 0

    async def test_events_outside_scope_are_ignored(self, api, channel, notifier):
        dashboard = OrderDashboard(
            OrderService(api), channel=channel, notifier=notifier, scope=customer_scope("U2")
        )
        await dashboard.mount()

        await channel.emit(LiveEventType.NEW_ORDER, order_payload("O1", user_id="U1"))
        await channel.emit(LiveEventType.NEW_ORDER, order_payload("O2", user_id="U2"))

        assert [o.order_id for o in dashboard.ledger.orders] == ["O2"]

    async def test_events_after_unmount_are_ignored(self, api, channel, notifier):
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()
        await dashboard.unmount()

        await channel.emit(LiveEventType.NEW_ORDER, order_payload("O1"))

        assert notifier.events == []


class TestScopes:
    def test_customer_scope_matches_user(self):
        scope = customer_scope(7)

        assert scope({"user_id": "7"})
        assert not scope({"user_id": "8"})

    def test_owner_scope_matches_shops(self):
        scope = owner_scope({"S1", 2})

        assert scope({"shop_id": "S1"})
        assert scope({"shop_id": 2})
        assert not scope({"shop_id": "S3"})

    def test_owner_scope_without_shops_accepts_all(self):
        assert owner_scope(set())({"shop_id": "anything"})


class TestRegistry:
    async def test_remount_unmounts_previous_dashboard(self, api):
        registry = DashboardRegistry()
        first_channel, second_channel = FakeChannel(), FakeChannel()
        first = OrderDashboard(OrderService(api), channel=first_channel)
        second = OrderDashboard(OrderService(api), channel=second_channel)

        await registry.mount(100, first)
        await registry.mount(100, second)

        assert registry.get(100) is second
        assert len(registry) == 1
        assert first_channel.closed and not first.mounted
        assert second.mounted and not second_channel.closed

    async def test_dashboards_are_per_chat(self, api):
        registry = DashboardRegistry()
        await registry.mount(1, OrderDashboard(OrderService(api)))
        await registry.mount(2, OrderDashboard(OrderService(api)))

        assert len(registry) == 2
        assert await registry.unmount(1)
        assert not await registry.unmount(1)
        assert registry.get(2) is not None

    async def test_close_all(self, api):
        registry = DashboardRegistry()
        dashboard = OrderDashboard(OrderService(api), channel=FakeChannel())
        await registry.mount(1, dashboard)

        await registry.close_all()

        assert len(registry) == 0
        assert not dashboard.mounted


class TestScopedUpdates:
    @pytest.mark.parametrize("scope, update, field, expected", [
        (customer_scope("U1"), {"order_id": "O1", "status": "accepted"}, "status", OrderStatus.ACCEPTED),
        (owner_scope({"S1"}), {"order_id": "O1", "payment_status": "verified"}, "payment_status",
         PaymentStatus.VERIFIED),
    ])
    async def test_partial_update_reaches_scoped_view(self, api, channel, notifier,
                                                      scope, update, field, expected):
        api.user_orders = [order_payload("O1", user_id="U1")]
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier, scope=scope)
        await dashboard.mount()
        dashboard.open_detail("O1")

        await channel.emit(LiveEventType.ORDER_UPDATE, update)

        assert getattr(dashboard.ledger.get("O1"), field) == expected
        assert [e[0] for e in notifier.events] == ["updated", "detail"]

    async def test_new_orders_are_still_scoped(self, api, channel, notifier):
        dashboard = OrderDashboard(
            OrderService(api), channel=channel, notifier=notifier, scope=owner_scope({"S1"})
        )
        await dashboard.mount()

        await channel.emit(LiveEventType.NEW_ORDER, order_payload("O7", shop_id="S9"))

        assert "O7" not in dashboard.ledger
        assert notifier.events == []


class BrokenDetailNotifier(RecordingNotifier):
    async def detail_refreshed(self, order):
        raise RuntimeError("detail message is gone")


class TestNotificationIsolation:
    async def test_failed_detail_refresh_keeps_status_message(self, api, channel):
        notifier = BrokenDetailNotifier()
        api.user_orders = [order_payload("O1")]
        dashboard = OrderDashboard(OrderService(api), channel=channel, notifier=notifier)
        await dashboard.mount()
        dashboard.open_detail("O1")

        await channel.emit(LiveEventType.ORDER_UPDATE, {"order_id": "O1", "status": "accepted"})

        assert notifier.events == [("updated", "O1", OrderStatus.ACCEPTED)]
        assert dashboard.ledger.get("O1").status == OrderStatus.ACCEPTED
