"""Bridge settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    url: str
    open_timeout_s: float
    ping_interval_s: float | None
    max_message_bytes: int
    inbound_queue_max: int


@dataclass(frozen=True, slots=True)
class ChannelSettings:
    name: str | None
    join_timeout_s: float


@dataclass(frozen=True, slots=True)
class RequestSettings:
    timeout_s: float
    progress_timeout_s: float


@dataclass(frozen=True, slots=True)
class RetrySettings:
    max_attempts: int
    backoff_base_s: float
    retry_remote_errors: bool


@dataclass(frozen=True, slots=True)
class RelaySettings:
    host: str
    port: int
    max_connections: int


@dataclass(frozen=True, slots=True)
class BridgeSettings:
    websocket: WebSocketSettings
    channel: ChannelSettings
    request: RequestSettings
    retry: RetrySettings
    relay: RelaySettings


__all__ = [
    "BridgeSettings",
    "ChannelSettings",
    "RelaySettings",
    "RequestSettings",
    "RetrySettings",
    "WebSocketSettings",
]
