"""Channel relay configuration (env names and defaults only)."""

from __future__ import annotations

ENV_RELAY_HOST = "FIGMA_RELAY_HOST"
ENV_RELAY_PORT = "FIGMA_RELAY_PORT"
ENV_RELAY_MAX_CONNECTIONS = "FIGMA_RELAY_MAX_CONNECTIONS"

DEFAULT_RELAY_HOST = "127.0.0.1"
DEFAULT_RELAY_PORT = 3055
DEFAULT_RELAY_MAX_CONNECTIONS = 100

RELAY_WS_PATH = "/"

# Relay reply texts
RELAY_MSG_INVALID_FRAME = "Invalid message format"
RELAY_MSG_CHANNEL_REQUIRED = "Channel name is required"
RELAY_MSG_NOT_IN_CHANNEL = "You must join the channel first"
RELAY_MSG_AT_CAPACITY = "Relay cannot accept new connections. Please try again later."
RELAY_MSG_PEER_JOINED = "A new user has joined the channel"
RELAY_MSG_WELCOME = "Please join a channel to start chatting"
RELAY_MSG_NO_CHANNELS = "No active channels found. Make sure Figma plugin is running and connected."
RELAY_MSG_PLUGIN_CONNECTED = "Figma plugin is connected and ready"
RELAY_MSG_PLUGIN_MISSING = "No Figma plugin connected. Open TalkToFigma plugin in Figma."

# Commands the relay answers itself instead of forwarding to the plugin
RELAY_CMD_ACTIVE_CHANNELS = "get_active_channels"
RELAY_CMD_DIAGNOSTICS = "connection_diagnostics"

__all__ = [
    "ENV_RELAY_HOST",
    "ENV_RELAY_PORT",
    "ENV_RELAY_MAX_CONNECTIONS",
    "DEFAULT_RELAY_HOST",
    "DEFAULT_RELAY_PORT",
    "DEFAULT_RELAY_MAX_CONNECTIONS",
    "RELAY_WS_PATH",
    "RELAY_MSG_INVALID_FRAME",
    "RELAY_MSG_CHANNEL_REQUIRED",
    "RELAY_MSG_NOT_IN_CHANNEL",
    "RELAY_MSG_AT_CAPACITY",
    "RELAY_MSG_PEER_JOINED",
    "RELAY_MSG_WELCOME",
    "RELAY_MSG_NO_CHANNELS",
    "RELAY_MSG_PLUGIN_CONNECTED",
    "RELAY_MSG_PLUGIN_MISSING",
    "RELAY_CMD_ACTIVE_CHANNELS",
    "RELAY_CMD_DIAGNOSTICS",
]
