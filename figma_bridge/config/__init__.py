"""Configuration module exports (env names and defaults only)."""

from .relay import RELAY_WS_PATH
from .websocket import DEFAULT_FIGMA_WS_URL
from .timeouts import DEFAULT_MAX_ATTEMPTS, DEFAULT_COMMAND_TIMEOUT_S

__all__ = [
    "DEFAULT_COMMAND_TIMEOUT_S",
    "DEFAULT_FIGMA_WS_URL",
    "DEFAULT_MAX_ATTEMPTS",
    "RELAY_WS_PATH",
]
