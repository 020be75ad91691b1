"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT = os.getenv("LOG_FORMAT") or "%(asctime)s %(levelname)s %(name)s: %(message)s"

__all__ = ["LOG_LEVEL", "LOG_FORMAT"]
