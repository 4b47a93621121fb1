# shopfront/services/live_update_service.py
import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional
import aiohttp
from ..exceptions import ChannelError

class LiveEventType(str, Enum):
    NEW_ORDER = "newOrder"
    ORDER_UPDATE = "orderUpdate"

@dataclass(frozen=True)
class LiveEvent:
    type: LiveEventType
    order: Dict[str, Any]

EventCallback = Callable[[LiveEvent], Awaitable[None]]

class LiveUpdateService:
    """Push subscription delivering order events for one mounted dashboard.

    Frames are JSON objects ``{"event": "newOrder" | "orderUpdate", "data": {...}}``.
    Events are handed to subscribers as they arrive, in arrival order, with no
    buffering. Disconnects are logged and followed by a re-subscribe; the
    dashboard's periodic refresh covers anything missed in between.
    """

    def __init__(self, http_session: aiohttp.ClientSession, url: str,
                 token: Optional[str] = None, reconnect_delay: float = 5):
        self.http = http_session
        self.url = url
        self.token = token
        self.reconnect_delay = reconnect_delay
        self._subscribers: Dict[LiveEventType, List[EventCallback]] = {
            event_type: [] for event_type in LiveEventType
        }
        self._task: Optional[asyncio.Task] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._closed = False
        self.connected = asyncio.Event()
        self.logger = logging.getLogger(__name__)

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._closed

    def subscribe(self, event_type: LiveEventType, callback: EventCallback):
        self._subscribers[LiveEventType(event_type)].append(callback)

    def open(self):
        """Start the subscription in the background"""
        if self._closed:
            raise ChannelError("Channel was closed and cannot be reopened")
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def close(self):
        """Stop the subscription; safe to call at any time, any number of times"""
        self._closed = True
        task, self._task = self._task, None
        ws, self._ws = self._ws, None
        if ws is not None and not ws.closed:
            await ws.close()
        if task is not None and not task.done():
            task.cancel()
            if task is asyncio.current_task():
                return
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.connected.clear()

    async def _run(self):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        while not self._closed:
            try:
                async with self.http.ws_connect(self.url, headers=headers, heartbeat=30) as ws:
                    self._ws = ws
                    self.connected.set()
                    self.logger.info(f"Push channel connected to {self.url}")
                    async for message in ws:
                        if message.type == aiohttp.WSMsgType.TEXT:
                            await self.dispatch(message.data)
                        elif message.type == aiohttp.WSMsgType.ERROR:
                            raise ChannelError(f"Websocket error: {ws.exception()}")
            except (aiohttp.ClientError, ChannelError, asyncio.TimeoutError) as e:
                self.logger.warning(f"Push channel disconnected: {e}")
            finally:
                self._ws = None
                self.connected.clear()

            if not self._closed:
                await asyncio.sleep(self.reconnect_delay)

    async def dispatch(self, raw: str):
        """Decode one frame and hand it to the subscribers of its event type"""
        event = self._decode(raw)
        if event is None or self._closed:
            return

        for callback in list(self._subscribers[event.type]):
            try:
                await callback(event)
            except Exception as e:
                # one failing subscriber must not kill the subscription
                self.logger.error(f"Error handling {event.type.value} event: {e}", exc_info=True)

    def _decode(self, raw: str) -> Optional[LiveEvent]:
        try:
            frame = json.loads(raw)
            event_type = LiveEventType(frame["event"])
            order = frame["data"]
            if not isinstance(order, dict):
                raise ValueError("event data is not an object")
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Ignoring unusable push frame: {e}")
            return None
        return LiveEvent(type=event_type, order=order)
