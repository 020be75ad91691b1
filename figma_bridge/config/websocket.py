"""WebSocket protocol configuration and constants."""

from __future__ import annotations

# Envelope keys
WS_KEY_ID = "id"
WS_KEY_TYPE = "type"
WS_KEY_ERROR = "error"
WS_KEY_RESULT = "result"
WS_KEY_CHANNEL = "channel"
WS_KEY_MESSAGE = "message"
WS_KEY_CLIENT_TYPE = "clientType"

# Keys inside an outbound command payload
WS_KEY_COMMAND = "command"
WS_KEY_PARAMS = "params"

# Frame kinds
WS_TYPE_JOIN = "join"
WS_TYPE_LEAVE = "leave"
WS_TYPE_ERROR = "error"
WS_TYPE_SYSTEM = "system"
WS_TYPE_MESSAGE = "message"
WS_TYPE_PROGRESS = "progress_update"

# Join roles, counted by the relay
WS_CLIENT_TYPE_MCP = "mcp"
WS_CLIENT_TYPE_FIGMA = "figma"
WS_CLIENT_TYPE_UNKNOWN = "unknown"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_BUSY_CODE = 4002

WS_CLOSE_CLIENT_REASON = "client disconnect"

# Environment
ENV_FIGMA_WS_URL = "FIGMA_WS_URL"
ENV_WS_OPEN_TIMEOUT_S = "FIGMA_WS_OPEN_TIMEOUT_S"
ENV_WS_PING_INTERVAL_S = "FIGMA_WS_PING_INTERVAL_S"
ENV_WS_MAX_MESSAGE_BYTES = "FIGMA_WS_MAX_MESSAGE_BYTES"
ENV_WS_INBOUND_QUEUE_MAX = "FIGMA_WS_INBOUND_QUEUE_MAX"

DEFAULT_FIGMA_WS_URL = "ws://localhost:3055"
DEFAULT_WS_OPEN_TIMEOUT_S = 10.0
DEFAULT_WS_PING_INTERVAL_S = 20.0
# Plugin responses can carry exported images; keep well above the library default.
DEFAULT_WS_MAX_MESSAGE_BYTES = 32 * 1024 * 1024
DEFAULT_WS_INBOUND_QUEUE_MAX = 1024

__all__ = [
    "WS_KEY_ID",
    "WS_KEY_TYPE",
    "WS_KEY_ERROR",
    "WS_KEY_RESULT",
    "WS_KEY_CHANNEL",
    "WS_KEY_MESSAGE",
    "WS_KEY_CLIENT_TYPE",
    "WS_KEY_COMMAND",
    "WS_KEY_PARAMS",
    "WS_TYPE_JOIN",
    "WS_TYPE_LEAVE",
    "WS_TYPE_ERROR",
    "WS_TYPE_SYSTEM",
    "WS_TYPE_MESSAGE",
    "WS_TYPE_PROGRESS",
    "WS_CLIENT_TYPE_MCP",
    "WS_CLIENT_TYPE_FIGMA",
    "WS_CLIENT_TYPE_UNKNOWN",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REASON",
    "ENV_FIGMA_WS_URL",
    "ENV_WS_OPEN_TIMEOUT_S",
    "ENV_WS_PING_INTERVAL_S",
    "ENV_WS_MAX_MESSAGE_BYTES",
    "ENV_WS_INBOUND_QUEUE_MAX",
    "DEFAULT_FIGMA_WS_URL",
    "DEFAULT_WS_OPEN_TIMEOUT_S",
    "DEFAULT_WS_PING_INTERVAL_S",
    "DEFAULT_WS_MAX_MESSAGE_BYTES",
    "DEFAULT_WS_INBOUND_QUEUE_MAX",
]
