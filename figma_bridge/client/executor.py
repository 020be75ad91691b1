"""Bounded retry around one correlated command."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Callable, Awaitable

from figma_bridge.protocol import build_command
from figma_bridge.state import CommandResult
from figma_bridge.state.settings import RetrySettings
from figma_bridge.errors import BridgeError, NotJoinedError, RemoteCommandError

if TYPE_CHECKING:
    from .session import ChannelSession
    from .correlator import RequestCorrelator

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class CommandExecutor:
    """Send commands on the joined channel with timeout and linear backoff.

    ``send`` raises on failure; ``execute`` never raises for bridge failures and
    always returns a :class:`CommandResult`.
    """

    def __init__(
        self,
        session: ChannelSession,
        correlator: RequestCorrelator,
        *,
        policy: RetrySettings,
        default_timeout_s: float,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self._session = session
        self._correlator = correlator
        self._policy = policy
        self._default_timeout_s = default_timeout_s
        self._sleep = sleep_fn or asyncio.sleep

    async def send(
        self,
        command: str,
        params: dict[str, Any] | None = None,
        *,
        timeout_s: float | None = None,
    ) -> Any:
        channel = self._session.require_joined()
        envelope = build_command(channel, command, params)
        if timeout_s is None:
            timeout_s = self._default_timeout_s
        return await self._correlator.request(envelope, timeout_s=timeout_s)

    async def execute(
        self,
        command: str,
        params: dict[str, Any] | None = None,
        *,
        timeout_s: float | None = None,
        max_attempts: int | None = None,
    ) -> CommandResult:
        if not self._session.is_joined:
            return CommandResult(success=False, error="not joined to a channel; call join() first", attempts=0)

        attempts_allowed = max(1, max_attempts if max_attempts is not None else self._policy.max_attempts)
        last_error: BridgeError | None = None
        attempt = 0
        while attempt < attempts_allowed:
            attempt += 1
            try:
                data = await self.send(command, params, timeout_s=timeout_s)
            except NotJoinedError as exc:
                # The connection closed between attempts and took the session with it.
                last_error = exc
                break
            except RemoteCommandError as exc:
                last_error = exc
                logger.info("executor: %s failed remotely attempt=%d: %s", command, attempt, exc)
                if not self._policy.retry_remote_errors:
                    break
            except BridgeError as exc:
                last_error = exc
                logger.warning("executor: %s attempt=%d/%d failed: %s", command, attempt, attempts_allowed, exc)
            else:
                if attempt > 1:
                    logger.info("executor: %s succeeded attempt=%d", command, attempt)
                return CommandResult(success=True, data=data, attempts=attempt)

            if attempt < attempts_allowed:
                await self._sleep(self._policy.backoff_base_s * attempt)

        message = str(last_error) if last_error is not None else "command failed"
        logger.warning("executor: %s giving up after %d attempt(s): %s", command, attempt, message)
        return CommandResult(success=False, error=message, attempts=attempt)


__all__ = ["CommandExecutor"]
