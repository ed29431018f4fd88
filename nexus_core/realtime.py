"""Supabase Realtime change feed over a websocket.

Implements the subset of the Phoenix channel protocol needed to listen for
``postgres_changes`` events on a table.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

import aiohttp

from .constants import REALTIME_HEARTBEAT_SECONDS, REALTIME_JOIN_TIMEOUT_SECONDS
from .logger import get_logger

if TYPE_CHECKING:
    from .store import StoreGateway

logger = get_logger()

RecordCallback = Callable[[dict[str, Any]], Union[Awaitable[None], None]]
StatusCallback = Callable[["SubscriptionStatus", Optional[Exception]], Union[Awaitable[None], None]]


class SubscriptionStatus(str, Enum):
    SUBSCRIBED = "SUBSCRIBED"
    TIMED_OUT = "TIMED_OUT"
    CHANNEL_ERROR = "CHANNEL_ERROR"
    CLOSED = "CLOSED"


class RealtimeError(Exception):
    """The realtime server rejected or dropped a subscription."""


async def _maybe_await(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


class RealtimeChannel:
    """One Phoenix channel listening for row inserts."""

    def __init__(
        self,
        gateway: StoreGateway,
        name: str,
        *,
        join_timeout: float = REALTIME_JOIN_TIMEOUT_SECONDS,
        heartbeat_interval: float = REALTIME_HEARTBEAT_SECONDS,
    ) -> None:
        self.gateway = gateway
        self.name = name
        self.topic = f"realtime:{name}"
        self.join_timeout = join_timeout
        self.heartbeat_interval = heartbeat_interval
        self._listeners: list[tuple[str, str, str, RecordCallback]] = []
        self._on_status: Optional[StatusCallback] = None
        self._refs = itertools.count(1)
        self._join_ref: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None

    @property
    def websocket_url(self) -> str:
        base = self.gateway.url.replace("https://", "wss://", 1).replace("http://", "ws://", 1)
        return f"{base}/realtime/v1/websocket?apikey={self.gateway.service_key}&vsn=1.0.0"

    def on_insert(self, table: str, callback: RecordCallback, *, schema: str = "public") -> RealtimeChannel:
        self._listeners.append(("INSERT", schema, table, callback))
        return self

    def join_payload(self) -> dict[str, Any]:
        return {
            "config": {
                "broadcast": {"self": False},
                "presence": {"key": ""},
                "postgres_changes": [
                    {"event": event, "schema": schema, "table": table}
                    for event, schema, table, _ in self._listeners
                ],
            },
            "access_token": self.gateway.service_key,
        }

    def _next_ref(self) -> str:
        return str(next(self._refs))

    def subscribe(self, on_status: Optional[StatusCallback] = None) -> asyncio.Task:
        """Start listening in a background task and report status changes."""
        self._on_status = on_status
        self._task = asyncio.create_task(self._run(), name=f"realtime-{self.name}")
        self._task.add_done_callback(self._log_task_failure)
        return self._task

    def _log_task_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Realtime listener for %s stopped: %s", self.topic, exc, exc_info=exc)

    async def unsubscribe(self) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def _emit_status(self, status: SubscriptionStatus, error: Optional[Exception] = None) -> None:
        if self._on_status is None:
            return
        try:
            await _maybe_await(self._on_status(status, error))
        except Exception as e:
            logger.error("Realtime status callback failed for %s: %s", self.topic, e, exc_info=True)

    async def _run(self) -> None:
        try:
            ws = await asyncio.wait_for(
                self.gateway.session.ws_connect(self.websocket_url), timeout=self.join_timeout
            )
        except asyncio.TimeoutError:
            await self._emit_status(SubscriptionStatus.TIMED_OUT)
            return
        except aiohttp.ClientError as e:
            await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, RealtimeError(str(e)))
            return

        self._ws = ws
        heartbeat: Optional[asyncio.Task] = None
        try:
            self._join_ref = self._next_ref()
            await ws.send_json(
                {
                    "topic": self.topic,
                    "event": "phx_join",
                    "payload": self.join_payload(),
                    "ref": self._join_ref,
                    "join_ref": self._join_ref,
                }
            )

            try:
                reply = await asyncio.wait_for(self._await_join_reply(ws), timeout=self.join_timeout)
            except asyncio.TimeoutError:
                await self._emit_status(SubscriptionStatus.TIMED_OUT)
                return

            if reply.get("status") != "ok":
                reason = (reply.get("response") or {}).get("reason", "join rejected")
                await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, RealtimeError(str(reason)))
                return

            await self._emit_status(SubscriptionStatus.SUBSCRIBED)
            heartbeat = asyncio.create_task(self._heartbeat(ws))

            async for message in ws:
                if message.type == aiohttp.WSMsgType.TEXT:
                    if not await self.dispatch(message.json()):
                        return
                elif message.type == aiohttp.WSMsgType.ERROR:
                    await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, ws.exception())
                    return

            await self._emit_status(SubscriptionStatus.CLOSED)
        except (aiohttp.ClientError, ValueError) as e:
            # ValueError: a text frame that is not JSON
            await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, RealtimeError(str(e)))
        except RealtimeError as e:
            await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, e)
        finally:
            if heartbeat is not None:
                heartbeat.cancel()
            if not ws.closed:
                await ws.close()
            self._ws = None

    async def _await_join_reply(self, ws: aiohttp.ClientWebSocketResponse) -> dict[str, Any]:
        async for message in ws:
            if message.type != aiohttp.WSMsgType.TEXT:
                continue
            data = message.json()
            if data.get("event") == "phx_reply" and data.get("ref") == self._join_ref:
                return data.get("payload") or {}
        raise RealtimeError("Websocket closed before join reply")

    async def _heartbeat(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while not ws.closed:
            await asyncio.sleep(self.heartbeat_interval)
            try:
                await ws.send_json({"topic": "phoenix", "event": "heartbeat", "payload": {}, "ref": self._next_ref()})
            except (ConnectionResetError, aiohttp.ClientError) as e:
                logger.warning("Realtime heartbeat for %s failed: %s", self.topic, e)
                return

    async def dispatch(self, message: dict[str, Any]) -> bool:
        """Handle one server message. Returns False once the channel is finished."""
        if message.get("topic") not in (self.topic, None):
            return True

        event = message.get("event")
        payload = message.get("payload") or {}

        if event == "postgres_changes":
            data = payload.get("data") or {}
            for listen_event, schema, table, callback in self._listeners:
                if data.get("type") != listen_event or data.get("table") != table:
                    continue
                if data.get("schema", schema) != schema:
                    continue
                try:
                    await _maybe_await(callback(data.get("record") or {}))
                except Exception as e:
                    logger.error("Realtime callback failed for %s.%s: %s", schema, table, e, exc_info=True)
            return True

        if event == "system" and payload.get("status") == "error":
            await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, RealtimeError(str(payload.get("message"))))
            return False

        if event == "phx_error":
            await self._emit_status(SubscriptionStatus.CHANNEL_ERROR, RealtimeError("channel error"))
            return False

        if event == "phx_close":
            await self._emit_status(SubscriptionStatus.CLOSED)
            return False

        return True
