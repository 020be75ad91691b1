"""Request/response correlation over one shared connection."""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Callable

from figma_bridge.state import PendingRequest
from figma_bridge.protocol import Envelope
from figma_bridge.errors import (
    BridgeError,
    TransportError,
    NotConnectedError,
    RequestTimeoutError,
)

if TYPE_CHECKING:
    from .connection import ConnectionManager

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def _new_request_id() -> str:
    return str(uuid.uuid4())


class RequestCorrelator:
    """Own the pending-request table.

    Every id in the table maps to exactly one future and leaves the table exactly
    once: on a matching response, on timer expiry, on teardown via ``fail_all``,
    or when the awaiting caller is cancelled. All mutations happen on the event
    loop thread, so the table needs no lock.
    """

    def __init__(self, transport: ConnectionManager, *, id_factory: IdFactory | None = None) -> None:
        self._transport = transport
        self._new_id = id_factory or _new_request_id
        self._pending: dict[str, PendingRequest] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, request_id: str) -> bool:
        return request_id in self._pending

    async def send(self, envelope: Envelope, *, timeout_s: float) -> asyncio.Future[Any]:
        if not self._transport.is_connected:
            raise NotConnectedError("not connected to the execution host")

        loop = asyncio.get_running_loop()
        request_id = self._new_id()
        while request_id in self._pending:
            request_id = self._new_id()

        future: asyncio.Future[Any] = loop.create_future()
        entry = PendingRequest(request_id=request_id, kind=envelope.kind, future=future, timeout_s=timeout_s)
        entry.timer = loop.call_later(timeout_s, self._expire, request_id)
        self._pending[request_id] = entry
        future.add_done_callback(lambda f: self._forget_cancelled(request_id, f))

        try:
            await self._transport.send_text(envelope.with_request_id(request_id).dumps())
        except asyncio.CancelledError:
            self._pending.pop(request_id, None)
            entry.disarm()
            future.cancel()
            raise
        except BridgeError as exc:
            self._settle(request_id, error=exc)
        except Exception as exc:
            self._settle(request_id, error=TransportError(f"send failed: {exc}"))
        else:
            logger.debug("correlator: sent kind=%s id=%s timeout_s=%.1f", envelope.kind, request_id, timeout_s)
        return future

    async def request(self, envelope: Envelope, *, timeout_s: float) -> Any:
        future = await self.send(envelope, timeout_s=timeout_s)
        return await future

    def resolve(self, request_id: str, result: Any) -> bool:
        return self._settle(request_id, result=result)

    def reject(self, request_id: str, error: BaseException) -> bool:
        return self._settle(request_id, error=error)

    def extend(self, request_id: str, timeout_s: float) -> bool:
        entry = self._pending.get(request_id)
        if entry is None:
            return False
        entry.disarm()
        entry.timeout_s = timeout_s
        entry.last_activity = time.monotonic()
        entry.timer = asyncio.get_running_loop().call_later(timeout_s, self._expire, request_id)
        return True

    def fail_all(self, error: BaseException) -> int:
        entries = list(self._pending.values())
        self._pending.clear()
        for entry in entries:
            entry.disarm()
            if not entry.future.done():
                entry.future.set_exception(error)
        if entries:
            logger.info("correlator: failed %d pending request(s): %s", len(entries), error)
        return len(entries)

    def _settle(self, request_id: str, *, result: Any = None, error: BaseException | None = None) -> bool:
        entry = self._pending.pop(request_id, None)
        if entry is None:
            return False
        entry.disarm()
        if entry.future.done():
            return False
        if error is not None:
            entry.future.set_exception(error)
        else:
            entry.future.set_result(result)
        return True

    def _expire(self, request_id: str) -> None:
        entry = self._pending.get(request_id)
        if entry is None:
            return
        entry.timer = None
        logger.warning("correlator: request id=%s kind=%s timed out after %.1fs", request_id, entry.kind, entry.timeout_s)
        self._settle(
            request_id,
            error=RequestTimeoutError(
                f"request timeout after {entry.timeout_s:g}s",
                request_id=request_id,
                timeout_s=entry.timeout_s,
            ),
        )

    def _forget_cancelled(self, request_id: str, future: asyncio.Future[Any]) -> None:
        if not future.cancelled():
            return
        entry = self._pending.get(request_id)
        if entry is not None and entry.future is future:
            del self._pending[request_id]
            entry.disarm()


__all__ = ["RequestCorrelator"]
