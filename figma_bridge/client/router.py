"""Inbound frame classification and dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Callable

from figma_bridge.state import RouterStats
from figma_bridge.errors import RemoteCommandError
from figma_bridge.protocol import Envelope, parse_frame
from figma_bridge.config.websocket import WS_KEY_ID, WS_TYPE_ERROR, WS_TYPE_SYSTEM, WS_TYPE_PROGRESS

if TYPE_CHECKING:
    from .correlator import RequestCorrelator

logger = logging.getLogger(__name__)

NotificationSink = Callable[[Envelope], Any]


class MessageRouter:
    """Route each inbound frame to the correlator or the notification sink.

    Order of precedence: progress updates for a pending id, responses for a
    pending id, ``system`` notices, ``error`` notices, everything else dropped.
    """

    def __init__(
        self,
        correlator: RequestCorrelator,
        *,
        progress_timeout_s: float,
        on_notification: NotificationSink | None = None,
    ) -> None:
        self._correlator = correlator
        self._progress_timeout_s = progress_timeout_s
        self._on_notification = on_notification
        self.stats = RouterStats()

    def route(self, raw: str | bytes) -> None:
        self.stats.frames += 1
        try:
            envelope = parse_frame(raw)
        except ValueError as exc:
            self.stats.malformed += 1
            logger.warning("router: dropping malformed frame: %s", exc)
            return

        if envelope.kind == WS_TYPE_PROGRESS:
            self._on_progress(envelope)
            return

        request_id = envelope.request_id
        if request_id is not None and not envelope.is_echo and self._correlator.is_pending(request_id):
            self._on_response(request_id, envelope)
            return

        if envelope.kind == WS_TYPE_SYSTEM:
            self.stats.system += 1
            logger.info("router: system channel=%s message=%s", envelope.channel, envelope.message)
            self._notify(envelope)
            return

        if envelope.kind == WS_TYPE_ERROR:
            self.stats.errors += 1
            logger.warning("router: error frame channel=%s error=%s", envelope.channel, envelope.error or envelope.message)
            self._notify(envelope)
            return

        if request_id is not None and envelope.is_response:
            self.stats.unmatched += 1
            logger.debug("router: no pending request for id=%s", request_id)
            return

        self.stats.dropped += 1
        logger.debug("router: dropped kind=%s id=%s", envelope.kind, request_id)

    def _on_progress(self, envelope: Envelope) -> None:
        request_id = envelope.request_id
        if request_id is None and isinstance(envelope.message, dict):
            nested = envelope.message.get(WS_KEY_ID)
            request_id = str(nested) if isinstance(nested, (str, int)) and not isinstance(nested, bool) else None
        if request_id is None or not self._correlator.extend(request_id, self._progress_timeout_s):
            self.stats.dropped += 1
            logger.debug("router: progress for unknown id=%s", request_id)
            return
        self.stats.progress += 1
        logger.debug("router: progress id=%s timeout_s=%.1f", request_id, self._progress_timeout_s)

    def _on_response(self, request_id: str, envelope: Envelope) -> None:
        if envelope.error is not None:
            self.stats.rejected += 1
            logger.info("router: remote error id=%s error=%s", request_id, envelope.error)
            self._correlator.reject(request_id, RemoteCommandError(envelope.error, request_id=request_id))
            return
        # Bare acknowledgements carry their text in ``message`` with no result key.
        result = envelope.result if envelope.has_result else envelope.message
        self.stats.resolved += 1
        self._correlator.resolve(request_id, result)

    def _notify(self, envelope: Envelope) -> None:
        if self._on_notification is None:
            return
        try:
            self._on_notification(envelope)
        except Exception:
            logger.exception("router: notification sink failed")


__all__ = ["MessageRouter"]
