"""Connection admission and channel membership for the relay."""

from __future__ import annotations

import time
import asyncio
from typing import Any

from figma_bridge.config.websocket import WS_CLIENT_TYPE_MCP, WS_CLIENT_TYPE_FIGMA, WS_CLIENT_TYPE_UNKNOWN


class ChannelRegistry:
    def __init__(self, *, max_connections: int, port: int | None = None) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._clients: dict[int, Any] = {}
        self._client_types: dict[int, str] = {}
        self._channels: dict[str, dict[int, Any]] = {}
        self.port = port
        self.started_at = time.monotonic()

    async def admit(self, ws: Any) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        async with self._lock:
            if len(self._clients) >= self._max:
                return False
            self._clients[id(ws)] = ws
            self._client_types[id(ws)] = WS_CLIENT_TYPE_UNKNOWN
            return True

    async def remove(self, ws: Any) -> list[str]:
        """Forget ``ws`` entirely; returns the channels it was still in."""
        key = id(ws)
        left: list[str] = []
        async with self._lock:
            self._clients.pop(key, None)
            self._client_types.pop(key, None)
            for name in list(self._channels):
                members = self._channels[name]
                if members.pop(key, None) is not None:
                    left.append(name)
                if not members:
                    del self._channels[name]
        return left

    async def join(self, ws: Any, channel: str, *, client_type: str = WS_CLIENT_TYPE_MCP) -> int:
        async with self._lock:
            if id(ws) in self._clients:
                self._client_types[id(ws)] = client_type
            members = self._channels.setdefault(channel, {})
            members[id(ws)] = ws
            return len(members)

    async def leave(self, ws: Any, channel: str) -> bool:
        async with self._lock:
            members = self._channels.get(channel)
            if members is None or members.pop(id(ws), None) is None:
                return False
            if not members:
                del self._channels[channel]
            return True

    def is_member(self, ws: Any, channel: str) -> bool:
        return id(ws) in self._channels.get(channel, {})

    def peers(self, channel: str, *, exclude: Any = None) -> list[Any]:
        skip = id(exclude) if exclude is not None else None
        return [ws for key, ws in self._channels.get(channel, {}).items() if key != skip]

    def channel_names(self) -> list[str]:
        return sorted(self._channels)

    def client_count(self) -> int:
        return len(self._clients)

    def client_type_counts(self) -> dict[str, int]:
        counts = {WS_CLIENT_TYPE_MCP: 0, WS_CLIENT_TYPE_FIGMA: 0, WS_CLIENT_TYPE_UNKNOWN: 0}
        for client_type in self._client_types.values():
            key = client_type if client_type in counts else WS_CLIENT_TYPE_UNKNOWN
            counts[key] += 1
        return counts

    def uptime_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)


__all__ = ["ChannelRegistry"]
