"""Error types for the Figma execution bridge (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class BridgeError(Exception):
    """Base for every failure the bridge reports to callers."""

    message: str

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass(eq=False)
class TransportError(BridgeError):
    """The WebSocket could not be opened or a frame could not be written."""


@dataclass(eq=False)
class ConnectionClosedError(TransportError):
    """The connection closed; terminal for every request still pending on it."""

    code: int | None = None
    reason: str = ""


@dataclass(eq=False)
class NotConnectedError(BridgeError):
    pass


@dataclass(eq=False)
class ConnectionStateError(BridgeError):
    """connect() was called while a connection is already opening or open."""

    state: str = ""


@dataclass(eq=False)
class RequestTimeoutError(BridgeError):
    """No response arrived for one request within its allotted time."""

    request_id: str = ""
    timeout_s: float = 0.0


@dataclass(eq=False)
class RemoteCommandError(BridgeError):
    """The remote side answered a request with an explicit error."""

    request_id: str = ""


@dataclass(eq=False)
class NotJoinedError(BridgeError):
    pass


@dataclass(eq=False)
class ChannelStateError(BridgeError):
    channel: str | None = None


__all__ = [
    "BridgeError",
    "ChannelStateError",
    "ConnectionClosedError",
    "ConnectionStateError",
    "NotConnectedError",
    "NotJoinedError",
    "RemoteCommandError",
    "RequestTimeoutError",
    "TransportError",
]
