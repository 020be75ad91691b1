"""Environment parsing for bridge settings.

Env names and defaults live in `figma_bridge/config/*`; this module resolves them
into the frozen dataclasses the rest of the package consumes.
"""

from __future__ import annotations

import os

from figma_bridge.state.settings import (
    RelaySettings,
    RetrySettings,
    BridgeSettings,
    ChannelSettings,
    RequestSettings,
    WebSocketSettings,
)
from figma_bridge.config.relay import (
    ENV_RELAY_HOST,
    ENV_RELAY_PORT,
    DEFAULT_RELAY_HOST,
    DEFAULT_RELAY_PORT,
    ENV_RELAY_MAX_CONNECTIONS,
    DEFAULT_RELAY_MAX_CONNECTIONS,
)
from figma_bridge.config.timeouts import (
    ENV_MAX_ATTEMPTS,
    ENV_FIGMA_CHANNEL,
    ENV_BACKOFF_BASE_S,
    ENV_JOIN_TIMEOUT_S,
    DEFAULT_MAX_ATTEMPTS,
    ENV_COMMAND_TIMEOUT_S,
    ENV_PROGRESS_TIMEOUT_S,
    DEFAULT_BACKOFF_BASE_S,
    DEFAULT_JOIN_TIMEOUT_S,
    ENV_RETRY_REMOTE_ERRORS,
    DEFAULT_COMMAND_TIMEOUT_S,
    DEFAULT_PROGRESS_TIMEOUT_S,
    DEFAULT_RETRY_REMOTE_ERRORS,
)
from figma_bridge.config.websocket import (
    ENV_FIGMA_WS_URL,
    DEFAULT_FIGMA_WS_URL,
    ENV_WS_OPEN_TIMEOUT_S,
    ENV_WS_PING_INTERVAL_S,
    ENV_WS_INBOUND_QUEUE_MAX,
    ENV_WS_MAX_MESSAGE_BYTES,
    DEFAULT_WS_OPEN_TIMEOUT_S,
    DEFAULT_WS_PING_INTERVAL_S,
    DEFAULT_WS_INBOUND_QUEUE_MAX,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
)

_DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off"}
_WS_SCHEMES = ("ws://", "wss://")


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _optional_str_env(name: str) -> str | None:
    raw = (os.getenv(name) or "").strip()
    return raw or None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _optional_float_env(name: str, default: float | None) -> float | None:
    raw = (os.getenv(name) or "").strip()
    if raw.lower() in _DISABLED_VALUES:
        return None
    if not raw:
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _validate_ws_url(url: str) -> str:
    if not url.startswith(_WS_SCHEMES):
        raise ValueError(f"{ENV_FIGMA_WS_URL} must start with ws:// or wss://, got {url!r}")
    return url


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        url=_validate_ws_url(_str_env(ENV_FIGMA_WS_URL, DEFAULT_FIGMA_WS_URL)),
        open_timeout_s=_positive(
            _float_env(ENV_WS_OPEN_TIMEOUT_S, DEFAULT_WS_OPEN_TIMEOUT_S), DEFAULT_WS_OPEN_TIMEOUT_S
        ),
        ping_interval_s=_optional_float_env(ENV_WS_PING_INTERVAL_S, DEFAULT_WS_PING_INTERVAL_S),
        max_message_bytes=max(1, _int_env(ENV_WS_MAX_MESSAGE_BYTES, DEFAULT_WS_MAX_MESSAGE_BYTES)),
        inbound_queue_max=max(0, _int_env(ENV_WS_INBOUND_QUEUE_MAX, DEFAULT_WS_INBOUND_QUEUE_MAX)),
    )


def _load_channel_settings() -> ChannelSettings:
    return ChannelSettings(
        name=_optional_str_env(ENV_FIGMA_CHANNEL),
        join_timeout_s=_positive(_float_env(ENV_JOIN_TIMEOUT_S, DEFAULT_JOIN_TIMEOUT_S), DEFAULT_JOIN_TIMEOUT_S),
    )


def _load_request_settings() -> RequestSettings:
    return RequestSettings(
        timeout_s=_positive(_float_env(ENV_COMMAND_TIMEOUT_S, DEFAULT_COMMAND_TIMEOUT_S), DEFAULT_COMMAND_TIMEOUT_S),
        progress_timeout_s=_positive(
            _float_env(ENV_PROGRESS_TIMEOUT_S, DEFAULT_PROGRESS_TIMEOUT_S), DEFAULT_PROGRESS_TIMEOUT_S
        ),
    )


def _load_retry_settings() -> RetrySettings:
    return RetrySettings(
        max_attempts=max(1, _int_env(ENV_MAX_ATTEMPTS, DEFAULT_MAX_ATTEMPTS)),
        backoff_base_s=max(0.0, _float_env(ENV_BACKOFF_BASE_S, DEFAULT_BACKOFF_BASE_S)),
        retry_remote_errors=_bool_env(ENV_RETRY_REMOTE_ERRORS, DEFAULT_RETRY_REMOTE_ERRORS),
    )


def _load_relay_settings() -> RelaySettings:
    port = _int_env(ENV_RELAY_PORT, DEFAULT_RELAY_PORT)
    if not 0 < port < 65536:
        raise ValueError(f"{ENV_RELAY_PORT} must be between 1 and 65535, got {port}")
    return RelaySettings(
        host=_str_env(ENV_RELAY_HOST, DEFAULT_RELAY_HOST),
        port=port,
        max_connections=max(1, _int_env(ENV_RELAY_MAX_CONNECTIONS, DEFAULT_RELAY_MAX_CONNECTIONS)),
    )


def load_settings() -> BridgeSettings:
    return BridgeSettings(
        websocket=_load_websocket_settings(),
        channel=_load_channel_settings(),
        request=_load_request_settings(),
        retry=_load_retry_settings(),
        relay=_load_relay_settings(),
    )


__all__ = ["load_settings"]
