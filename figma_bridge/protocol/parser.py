"""Inbound frame parsing/validation for the relay envelope."""

from __future__ import annotations

from typing import Any

import orjson

from figma_bridge.config.websocket import (
    WS_KEY_ID,
    WS_KEY_TYPE,
    WS_KEY_ERROR,
    WS_KEY_RESULT,
    WS_KEY_CHANNEL,
    WS_KEY_MESSAGE,
    WS_KEY_CLIENT_TYPE,
)

from .envelope import Envelope


def _normalize_error(value: Any) -> str | None:
    if value is None or value is False:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        text = value.get("message") or value.get("error")
        if isinstance(text, str) and text:
            return text
    return orjson.dumps(value).decode("utf-8")


def _optional_str(value: Any) -> str | None:
    """Best-effort text for optional fields; unusable values read as absent."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def parse_frame(raw: str | bytes) -> Envelope:
    """Parse one inbound frame into an :class:`Envelope`.

    Responses nested inside ``message`` (``{"message": {"id", "result"}}``) are
    lifted so that the id, result and error always sit on the envelope itself.
    Raises ``ValueError`` when the frame is not a JSON object with a ``type``;
    a bad optional field is dropped rather than failing the whole frame.
    """
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("frame must be a JSON object")

    kind = msg.get(WS_KEY_TYPE)
    if not isinstance(kind, str) or not kind.strip():
        raise ValueError("frame missing non-empty 'type'")

    request_id = _optional_str(msg.get(WS_KEY_ID))
    channel = _optional_str(msg.get(WS_KEY_CHANNEL))
    message = msg.get(WS_KEY_MESSAGE)
    has_result = WS_KEY_RESULT in msg
    result = msg.get(WS_KEY_RESULT)
    error = _normalize_error(msg.get(WS_KEY_ERROR))

    if isinstance(message, dict) and (WS_KEY_RESULT in message or WS_KEY_ERROR in message):
        if request_id is None:
            request_id = _optional_str(message.get(WS_KEY_ID))
        if result is None and error is None:
            has_result = has_result or WS_KEY_RESULT in message
            result = message.get(WS_KEY_RESULT)
            error = _normalize_error(message.get(WS_KEY_ERROR))

    return Envelope(
        kind=kind.strip(),
        request_id=request_id,
        channel=channel,
        message=message,
        result=result,
        error=error,
        client_type=_optional_str(msg.get(WS_KEY_CLIENT_TYPE)),
        has_result=has_result,
    )


__all__ = ["parse_frame"]
