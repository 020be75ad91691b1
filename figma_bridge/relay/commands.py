"""Commands answered by the relay itself rather than forwarded to the plugin."""

from __future__ import annotations

from typing import Any
from collections.abc import Callable

from figma_bridge.config.websocket import WS_CLIENT_TYPE_MCP, WS_CLIENT_TYPE_FIGMA
from figma_bridge.config.relay import (
    RELAY_CMD_DIAGNOSTICS,
    RELAY_MSG_NO_CHANNELS,
    RELAY_MSG_PLUGIN_MISSING,
    RELAY_CMD_ACTIVE_CHANNELS,
    RELAY_MSG_PLUGIN_CONNECTED,
)

from .channels import ChannelRegistry

CommandFn = Callable[[ChannelRegistry], Any]


def active_channels(registry: ChannelRegistry) -> str:
    names = registry.channel_names()
    if not names:
        return RELAY_MSG_NO_CHANNELS
    return f"Active channels ({len(names)}): {', '.join(names)}"


def connection_diagnostics(registry: ChannelRegistry) -> dict[str, Any]:
    names = registry.channel_names()
    counts = registry.client_type_counts()
    return {
        "webSocketServer": {
            "status": "running",
            "port": registry.port,
            "uptime": registry.uptime_ms(),
            "activeChannels": names,
            "channelCount": len(names),
            "clientCount": registry.client_count(),
            "mcpClientCount": counts[WS_CLIENT_TYPE_MCP],
            "figmaClientCount": counts[WS_CLIENT_TYPE_FIGMA],
        },
        "figmaPlugin": {
            "connected": bool(names),
            "message": RELAY_MSG_PLUGIN_CONNECTED if names else RELAY_MSG_PLUGIN_MISSING,
        },
    }


RELAY_COMMANDS: dict[str, CommandFn] = {
    RELAY_CMD_ACTIVE_CHANNELS: active_channels,
    RELAY_CMD_DIAGNOSTICS: connection_diagnostics,
}


__all__ = ["RELAY_COMMANDS", "active_channels", "connection_diagnostics"]
