"""Relay message loop and per-kind dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from fastapi import WebSocket, WebSocketDisconnect

from figma_bridge.protocol import Envelope, parse_frame
from figma_bridge.config.relay import (
    RELAY_MSG_PEER_JOINED,
    RELAY_MSG_INVALID_FRAME,
    RELAY_MSG_NOT_IN_CHANNEL,
    RELAY_MSG_CHANNEL_REQUIRED,
)
from figma_bridge.config.websocket import (
    WS_KEY_ID,
    WS_TYPE_JOIN,
    WS_KEY_ERROR,
    WS_KEY_RESULT,
    WS_TYPE_LEAVE,
    WS_KEY_COMMAND,
    WS_TYPE_SYSTEM,
    WS_TYPE_MESSAGE,
    WS_TYPE_PROGRESS,
    WS_CLIENT_TYPE_MCP,
)

from .channels import ChannelRegistry
from .commands import RELAY_COMMANDS
from .errors import broadcast, send_error, safe_send_envelope

logger = logging.getLogger(__name__)

HandlerFn = Callable[[WebSocket, ChannelRegistry, Envelope], Awaitable[None]]


def _ack(channel: str, request_id: str | None, text: str) -> Envelope:
    message: dict[str, str] = {WS_KEY_RESULT: text}
    if request_id is not None:
        message = {WS_KEY_ID: request_id, **message}
    return Envelope(kind=WS_TYPE_SYSTEM, request_id=request_id, channel=channel, message=message)


async def _require_channel(ws: WebSocket, envelope: Envelope) -> str | None:
    if envelope.channel is None:
        await send_error(ws, RELAY_MSG_CHANNEL_REQUIRED, request_id=envelope.request_id)
    return envelope.channel


async def _handle_join(ws: WebSocket, registry: ChannelRegistry, envelope: Envelope) -> None:
    channel = await _require_channel(ws, envelope)
    if channel is None:
        return
    client_type = envelope.client_type or WS_CLIENT_TYPE_MCP
    size = await registry.join(ws, channel, client_type=client_type)
    logger.info("relay: %s client joined channel=%s members=%d", client_type, channel, size)
    await safe_send_envelope(ws, _ack(channel, envelope.request_id, f"Connected to channel: {channel}"))
    await broadcast(
        registry.peers(channel, exclude=ws),
        Envelope(kind=WS_TYPE_SYSTEM, channel=channel, message=RELAY_MSG_PEER_JOINED),
    )


async def _handle_leave(ws: WebSocket, registry: ChannelRegistry, envelope: Envelope) -> None:
    channel = await _require_channel(ws, envelope)
    if channel is None:
        return
    if not await registry.leave(ws, channel):
        await send_error(ws, RELAY_MSG_NOT_IN_CHANNEL, request_id=envelope.request_id, channel=channel)
        return
    logger.info("relay: client left channel=%s", channel)
    await safe_send_envelope(ws, _ack(channel, envelope.request_id, f"Left channel: {channel}"))


async def _answer_locally(ws: WebSocket, registry: ChannelRegistry, envelope: Envelope, command: str) -> None:
    nested_id = envelope.message.get(WS_KEY_ID) if isinstance(envelope.message, dict) else None
    payload: dict[str, object] = {WS_KEY_ID: nested_id or envelope.request_id}
    try:
        payload[WS_KEY_RESULT] = RELAY_COMMANDS[command](registry)
    except Exception as exc:
        logger.exception("relay: %s failed", command)
        payload[WS_KEY_ERROR] = f"{command} failed: {exc}"
    logger.debug("relay: answered %s id=%s", command, envelope.request_id)
    await safe_send_envelope(
        ws,
        Envelope(kind=WS_TYPE_MESSAGE, request_id=envelope.request_id, channel=envelope.channel, message=payload),
    )


async def _handle_message(ws: WebSocket, registry: ChannelRegistry, envelope: Envelope) -> None:
    command = envelope.message.get(WS_KEY_COMMAND) if isinstance(envelope.message, dict) else None
    if isinstance(command, str) and command in RELAY_COMMANDS:
        await _answer_locally(ws, registry, envelope, command)
        return

    channel = await _require_channel(ws, envelope)
    if channel is None:
        return
    if not registry.is_member(ws, channel):
        await send_error(ws, RELAY_MSG_NOT_IN_CHANNEL, request_id=envelope.request_id, channel=channel)
        return
    delivered = await broadcast(registry.peers(channel, exclude=ws), envelope)
    logger.debug("relay: message channel=%s id=%s delivered=%d", channel, envelope.request_id, delivered)


async def _handle_progress(ws: WebSocket, registry: ChannelRegistry, envelope: Envelope) -> None:
    channel = envelope.channel
    if channel is None or not registry.is_member(ws, channel):
        logger.debug("relay: progress from non-member channel=%s", channel)
        return
    await broadcast(registry.peers(channel, exclude=ws), envelope)


HANDLERS: dict[str, HandlerFn] = {
    WS_TYPE_JOIN: _handle_join,
    WS_TYPE_LEAVE: _handle_leave,
    WS_TYPE_MESSAGE: _handle_message,
    WS_TYPE_PROGRESS: _handle_progress,
}


async def _receive_frame(ws: WebSocket) -> str | bytes:
    """Next text or binary frame; raises ``WebSocketDisconnect`` on close."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    return message.get("bytes") or b""


async def run_message_loop(ws: WebSocket, registry: ChannelRegistry) -> None:
    try:
        while True:
            raw = await _receive_frame(ws)
            try:
                envelope = parse_frame(raw)
            except ValueError as exc:
                logger.debug("relay: invalid frame: %s", exc)
                await send_error(ws, f"{RELAY_MSG_INVALID_FRAME}: {exc}")
                continue

            handler = HANDLERS.get(envelope.kind)
            if handler is None:
                await send_error(
                    ws,
                    f"message type '{envelope.kind}' is not supported",
                    request_id=envelope.request_id,
                    channel=envelope.channel,
                )
                continue
            await handler(ws, registry, envelope)
    except WebSocketDisconnect:
        return


__all__ = ["run_message_loop"]
