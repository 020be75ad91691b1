"""In-flight request bookkeeping owned by the request correlator."""

from __future__ import annotations

import time
import asyncio
from typing import Any
from dataclasses import field, dataclass


@dataclass(slots=True)
class PendingRequest:
    request_id: str
    kind: str
    future: asyncio.Future[Any]
    timeout_s: float
    timer: asyncio.TimerHandle | None = None
    created_at: float = field(default_factory=time.monotonic)
    last_activity: float = field(default_factory=time.monotonic)

    def disarm(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


__all__ = ["PendingRequest"]
