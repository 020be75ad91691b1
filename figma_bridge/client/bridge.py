"""Facade wiring connection, correlator, session, router and executor."""

from __future__ import annotations

import logging
from typing import Any

from figma_bridge.errors import BridgeError
from figma_bridge.state import CommandResult, ConnectionState
from figma_bridge.runtime import load_settings
from figma_bridge.state.settings import BridgeSettings
from figma_bridge.config.timeouts import ENV_FIGMA_CHANNEL
from figma_bridge.protocol import EXECUTE_CODE_COMMAND, wrap_code

from .router import MessageRouter, NotificationSink
from .session import ChannelSession
from .executor import SleepFn, CommandExecutor
from .connection import ConnectFn, ConnectionManager
from .correlator import IdFactory, RequestCorrelator

logger = logging.getLogger(__name__)


class FigmaBridge:
    """One connection to the relay, one channel, many concurrent commands.

    Usage::

        async with FigmaBridge() as bridge:
            await bridge.join("my-channel")
            result = await bridge.execute("get_document_info")
    """

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        *,
        connect_fn: ConnectFn | None = None,
        on_notification: NotificationSink | None = None,
        sleep_fn: SleepFn | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._connection = ConnectionManager(
            self.settings.websocket,
            frame_handler=self._on_frame,
            close_handler=self._on_close,
            connect_fn=connect_fn,
        )
        self._correlator = RequestCorrelator(self._connection, id_factory=id_factory)
        self._session = ChannelSession(
            self._connection,
            self._correlator,
            join_timeout_s=self.settings.channel.join_timeout_s,
        )
        self._router = MessageRouter(
            self._correlator,
            progress_timeout_s=self.settings.request.progress_timeout_s,
            on_notification=on_notification,
        )
        self._executor = CommandExecutor(
            self._session,
            self._correlator,
            policy=self.settings.retry,
            default_timeout_s=self.settings.request.timeout_s,
            sleep_fn=sleep_fn,
        )

    # Queries
    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def is_joined(self) -> bool:
        return self._session.is_joined

    @property
    def current_channel(self) -> str | None:
        return self._session.current_channel

    @property
    def pending_count(self) -> int:
        return self._correlator.pending_count

    @property
    def stats(self) -> dict[str, int]:
        return self._router.stats.snapshot()

    # Lifecycle
    async def connect(self) -> None:
        await self._connection.connect()

    def _channel_name(self, channel: str | None) -> str:
        name = channel or self.settings.channel.name
        if not name:
            raise ValueError(f"no channel given and {ENV_FIGMA_CHANNEL} is unset")
        return name

    async def join(self, channel: str | None = None) -> Any:
        return await self._session.join(self._channel_name(channel))

    async def open(self, channel: str | None = None) -> None:
        """Connect and join in one step; disconnects again if the join fails."""
        name = self._channel_name(channel)
        await self.connect()
        try:
            await self.join(name)
        except BaseException:
            await self.disconnect()
            raise

    async def disconnect(self) -> None:
        await self._connection.disconnect()

    # Commands
    async def send_command(self, command: str, params: dict[str, Any] | None = None, *, timeout_s: float | None = None) -> Any:
        return await self._executor.send(command, params, timeout_s=timeout_s)

    async def execute(
        self,
        command: str,
        params: dict[str, Any] | None = None,
        *,
        timeout_s: float | None = None,
        max_attempts: int | None = None,
    ) -> CommandResult:
        return await self._executor.execute(command, params, timeout_s=timeout_s, max_attempts=max_attempts)

    async def execute_code(self, code: str, *, timeout_s: float | None = None, max_attempts: int | None = None) -> CommandResult:
        return await self.execute(
            EXECUTE_CODE_COMMAND,
            {"code": wrap_code(code)},
            timeout_s=timeout_s,
            max_attempts=max_attempts,
        )

    async def __aenter__(self) -> FigmaBridge:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    # Connection callbacks
    def _on_frame(self, raw: str | bytes) -> None:
        self._router.route(raw)

    def _on_close(self, error: BridgeError) -> None:
        self._session.clear()
        failed = self._correlator.fail_all(error)
        logger.info("bridge: connection closed, failed %d pending request(s)", failed)


__all__ = ["FigmaBridge"]
