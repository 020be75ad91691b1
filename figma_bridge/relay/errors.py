"""Send helpers for relay frames."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import WebSocket, WebSocketDisconnect

from figma_bridge.protocol import Envelope
from figma_bridge.config.websocket import WS_TYPE_ERROR

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("relay: send failed", exc_info=True)
        return False
    return True


async def safe_send_envelope(ws: WebSocket, envelope: Envelope) -> bool:
    return await safe_send_text(ws, envelope.dumps())


async def broadcast(peers: Iterable[WebSocket], envelope: Envelope) -> int:
    """Send ``envelope`` to every peer; returns how many sends succeeded."""
    text = envelope.dumps()
    delivered = 0
    for peer in peers:
        if await safe_send_text(peer, text):
            delivered += 1
    return delivered


async def send_error(
    ws: WebSocket,
    message: str,
    *,
    request_id: str | None = None,
    channel: str | None = None,
) -> bool:
    return await safe_send_envelope(
        ws,
        Envelope(kind=WS_TYPE_ERROR, request_id=request_id, channel=channel, message=message, error=message),
    )


async def reject_connection(ws: WebSocket, *, message: str, close_code: int) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(ws, message)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["broadcast", "reject_connection", "safe_send_envelope", "safe_send_text", "send_error"]
