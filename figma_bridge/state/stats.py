"""Counters kept by the message router."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(slots=True)
class RouterStats:
    frames: int = 0
    resolved: int = 0
    rejected: int = 0
    progress: int = 0
    system: int = 0
    errors: int = 0
    malformed: int = 0
    unmatched: int = 0
    dropped: int = 0

    def snapshot(self) -> dict[str, int]:
        return asdict(self)


__all__ = ["RouterStats"]
