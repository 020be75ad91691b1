"""Connection lifecycle states."""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


__all__ = ["ConnectionState"]
