"""Remote-command execution bridge to a Figma plugin over a WebSocket channel relay."""

from .client import FigmaBridge
from .state import CommandResult, ConnectionState
from .errors import (
    BridgeError,
    NotJoinedError,
    TransportError,
    ChannelStateError,
    NotConnectedError,
    RemoteCommandError,
    RequestTimeoutError,
    ConnectionStateError,
    ConnectionClosedError,
)

__version__ = "0.1.0"

__all__ = [
    "BridgeError",
    "ChannelStateError",
    "CommandResult",
    "ConnectionClosedError",
    "ConnectionState",
    "ConnectionStateError",
    "FigmaBridge",
    "NotConnectedError",
    "NotJoinedError",
    "RemoteCommandError",
    "RequestTimeoutError",
    "TransportError",
]
