"""Relay WebSocket connection orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from figma_bridge.protocol import Envelope
from figma_bridge.config.relay import RELAY_MSG_WELCOME, RELAY_MSG_AT_CAPACITY
from figma_bridge.config.websocket import WS_TYPE_SYSTEM, WS_CLOSE_BUSY_CODE

from .channels import ChannelRegistry
from .errors import reject_connection, safe_send_envelope
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def _prepare_connection(ws: WebSocket, registry: ChannelRegistry) -> bool:
    if not await registry.admit(ws):
        await reject_connection(ws, message=RELAY_MSG_AT_CAPACITY, close_code=WS_CLOSE_BUSY_CODE)
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await registry.remove(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, registry: ChannelRegistry) -> None:
    admitted = False
    try:
        if not await _prepare_connection(ws, registry):
            logger.warning("relay: rejected connection, at capacity")
            return
        admitted = True
        logger.info("relay: connection accepted. Active: %s", registry.client_count())
        await safe_send_envelope(ws, Envelope(kind=WS_TYPE_SYSTEM, message=RELAY_MSG_WELCOME))
        await run_message_loop(ws, registry)
    finally:
        if admitted:
            left = await registry.remove(ws)
            logger.info("relay: connection closed channels=%s. Active: %s", left, registry.client_count())


__all__ = ["handle_websocket_connection"]
