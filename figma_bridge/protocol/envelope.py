"""The JSON envelope exchanged with the channel relay."""

from __future__ import annotations

import dataclasses
from typing import Any
from dataclasses import dataclass

import orjson

from figma_bridge.config.websocket import (
    WS_KEY_ID,
    WS_KEY_TYPE,
    WS_KEY_ERROR,
    WS_KEY_RESULT,
    WS_KEY_CHANNEL,
    WS_KEY_COMMAND,
    WS_KEY_MESSAGE,
    WS_KEY_CLIENT_TYPE,
)


@dataclass(slots=True)
class Envelope:
    kind: str
    request_id: str | None = None
    channel: str | None = None
    message: Any = None
    result: Any = None
    error: str | None = None
    client_type: str | None = None
    # A ``"result": null`` answer is still a result.
    has_result: bool = False

    @property
    def is_response(self) -> bool:
        return self.has_result or self.result is not None or self.error is not None

    @property
    def is_echo(self) -> bool:
        """True for a relayed copy of an outbound command rather than its answer."""
        if self.is_response:
            return False
        return isinstance(self.message, dict) and WS_KEY_COMMAND in self.message

    def with_request_id(self, request_id: str) -> Envelope:
        message = self.message
        if isinstance(message, dict):
            message = {WS_KEY_ID: request_id, **{k: v for k, v in message.items() if k != WS_KEY_ID}}
        return dataclasses.replace(self, request_id=request_id, message=message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {WS_KEY_TYPE: self.kind}
        if self.request_id is not None:
            data[WS_KEY_ID] = self.request_id
        if self.channel is not None:
            data[WS_KEY_CHANNEL] = self.channel
        if self.message is not None:
            data[WS_KEY_MESSAGE] = self.message
        if self.result is not None:
            data[WS_KEY_RESULT] = self.result
        if self.error is not None:
            data[WS_KEY_ERROR] = self.error
        if self.client_type is not None:
            data[WS_KEY_CLIENT_TYPE] = self.client_type
        return data

    def dumps(self) -> str:
        return orjson.dumps(self.to_dict()).decode("utf-8")


__all__ = ["Envelope"]
