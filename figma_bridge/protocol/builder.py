"""Outbound envelope construction."""

from __future__ import annotations

from typing import Any

from figma_bridge.config.websocket import (
    WS_KEY_PARAMS,
    WS_TYPE_JOIN,
    WS_KEY_COMMAND,
    WS_TYPE_MESSAGE,
    WS_CLIENT_TYPE_MCP,
)

from .envelope import Envelope


def build_join(channel: str, client_type: str | None = WS_CLIENT_TYPE_MCP) -> Envelope:
    return Envelope(kind=WS_TYPE_JOIN, channel=channel, client_type=client_type)


def build_command(channel: str, command: str, params: dict[str, Any] | None = None) -> Envelope:
    command = (command or "").strip()
    if not command:
        raise ValueError("command name must be a non-empty string")
    # Unset parameters are dropped rather than sent as null.
    cleaned = {k: v for k, v in (params or {}).items() if v is not None}
    return Envelope(
        kind=WS_TYPE_MESSAGE,
        channel=channel,
        message={WS_KEY_COMMAND: command, WS_KEY_PARAMS: cleaned},
    )


__all__ = ["build_command", "build_join"]
