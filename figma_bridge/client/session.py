"""Channel membership for one connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from figma_bridge.protocol import build_join
from figma_bridge.errors import NotJoinedError, ChannelStateError, NotConnectedError

if TYPE_CHECKING:
    from .connection import ConnectionManager
    from .correlator import RequestCorrelator

logger = logging.getLogger(__name__)


class ChannelSession:
    """Track the joined channel and gate command traffic on it."""

    def __init__(
        self,
        connection: ConnectionManager,
        correlator: RequestCorrelator,
        *,
        join_timeout_s: float,
    ) -> None:
        self._connection = connection
        self._correlator = correlator
        self._join_timeout_s = join_timeout_s
        self._channel: str | None = None
        self._joining: str | None = None

    @property
    def is_joined(self) -> bool:
        return self._channel is not None

    @property
    def current_channel(self) -> str | None:
        return self._channel

    async def join(self, channel: str) -> Any:
        """Join ``channel`` and return the relay's acknowledgement payload."""
        name = (channel or "").strip() if isinstance(channel, str) else ""
        if not name:
            raise ValueError("channel name must be a non-empty string")
        if not self._connection.is_connected:
            raise NotConnectedError("not connected to the execution host")
        if self._channel is not None:
            raise ChannelStateError(f"already joined channel {self._channel!r}", channel=self._channel)
        if self._joining is not None:
            raise ChannelStateError(f"join of channel {self._joining!r} already in progress", channel=self._joining)

        self._joining = name
        logger.info("session: joining channel=%s", name)
        try:
            ack = await self._correlator.request(build_join(name), timeout_s=self._join_timeout_s)
        except BaseException:
            logger.warning("session: join failed channel=%s", name)
            raise
        finally:
            self._joining = None

        # A close during the handshake clears the session; do not resurrect it.
        if not self._connection.is_connected:
            raise NotConnectedError("connection closed while joining")
        self._channel = name
        logger.info("session: joined channel=%s", name)
        return ack

    def require_joined(self) -> str:
        if self._channel is None:
            raise NotJoinedError("not joined to a channel; call join() first")
        return self._channel

    def clear(self) -> None:
        if self._channel is not None:
            logger.info("session: left channel=%s", self._channel)
        self._channel = None


__all__ = ["ChannelSession"]
