"""WebSocket connection lifecycle: connect, in-order receive, teardown."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

import websockets
from websockets.exceptions import ConnectionClosed

from figma_bridge.state import ConnectionState
from figma_bridge.state.settings import WebSocketSettings
from figma_bridge.config.websocket import WS_CLOSE_NORMAL_CODE, WS_CLOSE_CLIENT_REASON
from figma_bridge.errors import (
    BridgeError,
    TransportError,
    NotConnectedError,
    ConnectionStateError,
    ConnectionClosedError,
)

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Awaitable[Any]]
FrameHandler = Callable[[str | bytes], None]
CloseHandler = Callable[[BridgeError], None]

_CLOSE_WAIT_S = 5.0


class ConnectionManager:
    """Own one WebSocket and the tasks that drain it.

    Frames travel reader task -> queue -> dispatch task -> ``frame_handler`` in
    arrival order. The close notification is queued behind the last frame, so
    ``close_handler`` runs exactly once per connection and only after every frame
    received before the close has been handled.
    """

    def __init__(
        self,
        settings: WebSocketSettings,
        *,
        frame_handler: FrameHandler,
        close_handler: CloseHandler,
        connect_fn: ConnectFn | None = None,
    ) -> None:
        self._settings = settings
        self._frame_handler = frame_handler
        self._close_handler = close_handler
        self._connect_fn = connect_fn or websockets.connect
        self._state = ConnectionState.DISCONNECTED
        self._ws: Any = None
        self._local_close = False
        # Bumped by connect() and by an aborting disconnect(); a handshake
        # holding a stale number must not install its socket.
        self._attempt = 0
        self._reader_task: asyncio.Task | None = None
        self._dispatch_task: asyncio.Task | None = None

    @property
    def url(self) -> str:
        return self._settings.url

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._ws is not None

    def _ws_options(self) -> dict[str, Any]:
        return {
            "open_timeout": self._settings.open_timeout_s,
            "ping_interval": self._settings.ping_interval_s,
            "max_size": self._settings.max_message_bytes,
        }

    async def connect(self) -> None:
        """Open the WebSocket. Rejects (never no-ops) when not disconnected."""
        if self._state is not ConnectionState.DISCONNECTED:
            raise ConnectionStateError(f"connect() called while {self._state.value}", state=self._state.value)

        self._attempt += 1
        attempt = self._attempt
        self._state = ConnectionState.CONNECTING
        self._local_close = False
        logger.info("connection: connecting url=%s", self.url)
        try:
            ws = await self._connect_fn(self.url, **self._ws_options())
        except Exception as exc:
            if attempt == self._attempt:
                self._state = ConnectionState.DISCONNECTED
            logger.warning("connection: connect failed url=%s: %s", self.url, exc)
            raise TransportError(f"failed to connect to {self.url}: {exc}") from exc

        if attempt != self._attempt:
            # disconnect() ran while the handshake was in flight.
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_NORMAL_CODE, reason=WS_CLOSE_CLIENT_REASON)
            raise ConnectionClosedError("connection closed during connect", code=WS_CLOSE_NORMAL_CODE)

        inbound: asyncio.Queue[str | bytes | BridgeError] = asyncio.Queue(maxsize=self._settings.inbound_queue_max)
        self._ws = ws
        self._state = ConnectionState.CONNECTED
        self._reader_task = asyncio.create_task(self._read_loop(ws, inbound), name="figma-bridge-reader")
        self._dispatch_task = asyncio.create_task(self._dispatch_loop(ws, inbound), name="figma-bridge-dispatch")
        logger.info("connection: connected url=%s", self.url)

    async def send_text(self, text: str) -> None:
        ws = self._ws
        if self._state is not ConnectionState.CONNECTED or ws is None:
            raise NotConnectedError("not connected to the execution host")
        try:
            await ws.send(text)
        except ConnectionClosed as exc:
            raise ConnectionClosedError(f"connection closed: {exc}", code=_close_code(ws)) from exc
        except Exception as exc:
            raise TransportError(f"send failed: {exc}") from exc

    async def disconnect(self) -> None:
        """Close the connection; a no-op when already disconnected."""
        if self._state is ConnectionState.DISCONNECTED:
            return
        if self._state is ConnectionState.CONNECTING:
            self._attempt += 1
            self._state = ConnectionState.DISCONNECTED
            return

        ws = self._ws
        self._local_close = True
        logger.info("connection: disconnecting url=%s", self.url)
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_NORMAL_CODE, reason=WS_CLOSE_CLIENT_REASON)

        tasks = [t for t in (self._reader_task, self._dispatch_task) if t is not None]
        if tasks:
            _done, still_running = await asyncio.wait(tasks, timeout=_CLOSE_WAIT_S)
            for task in still_running:
                task.cancel()
            for task in still_running:
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await task

        # Tasks were cancelled before they could queue the close notification.
        self._teardown(ws, ConnectionClosedError("connection closed by client", code=WS_CLOSE_NORMAL_CODE))

    async def _read_loop(self, ws: Any, inbound: asyncio.Queue[str | bytes | BridgeError]) -> None:
        error: BridgeError
        try:
            async for raw in ws:
                await inbound.put(raw)
        except ConnectionClosed as exc:
            error = self._closed_error(ws, exc)
        except Exception as exc:
            logger.warning("connection: receive failed: %s", exc)
            error = TransportError(f"receive failed: {exc}")
        else:
            error = self._closed_error(ws, None)
        await inbound.put(error)

    async def _dispatch_loop(self, ws: Any, inbound: asyncio.Queue[str | bytes | BridgeError]) -> None:
        while True:
            item = await inbound.get()
            if isinstance(item, BridgeError):
                self._teardown(ws, item)
                return
            try:
                self._frame_handler(item)
            except Exception:
                logger.exception("connection: frame handler failed")

    def _closed_error(self, ws: Any, exc: ConnectionClosed | None) -> ConnectionClosedError:
        code = _close_code(ws)
        reason = getattr(ws, "close_reason", None) or ""
        if self._local_close:
            return ConnectionClosedError("connection closed by client", code=code, reason=reason)
        detail = f": {exc}" if exc is not None else ""
        return ConnectionClosedError(f"connection closed by remote{detail}", code=code, reason=reason)

    def _teardown(self, ws: Any, error: BridgeError) -> None:
        if self._ws is not ws or ws is None:
            return
        self._ws = None
        self._state = ConnectionState.DISCONNECTED
        self._reader_task = None
        self._dispatch_task = None
        logger.info("connection: closed url=%s reason=%s", self.url, error)
        self._close_handler(error)


def _close_code(ws: Any) -> int | None:
    code = getattr(ws, "close_code", None)
    return code if isinstance(code, int) else None


__all__ = ["ConnectionManager"]
