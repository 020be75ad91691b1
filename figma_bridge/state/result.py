"""Uniform outcome of a retried command."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    success: bool
    data: Any = None
    error: str | None = None
    attempts: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        return out


__all__ = ["CommandResult"]
