"""Request timeout and retry policy defaults."""

from __future__ import annotations

ENV_FIGMA_CHANNEL = "FIGMA_CHANNEL"
ENV_JOIN_TIMEOUT_S = "FIGMA_JOIN_TIMEOUT_S"
ENV_COMMAND_TIMEOUT_S = "FIGMA_COMMAND_TIMEOUT_S"
ENV_PROGRESS_TIMEOUT_S = "FIGMA_PROGRESS_TIMEOUT_S"
ENV_MAX_ATTEMPTS = "FIGMA_MAX_ATTEMPTS"
ENV_BACKOFF_BASE_S = "FIGMA_BACKOFF_BASE_S"
ENV_RETRY_REMOTE_ERRORS = "FIGMA_RETRY_REMOTE_ERRORS"

DEFAULT_JOIN_TIMEOUT_S = 10.0
DEFAULT_COMMAND_TIMEOUT_S = 30.0
# A progress update re-arms the request timer with this budget.
DEFAULT_PROGRESS_TIMEOUT_S = 60.0
DEFAULT_MAX_ATTEMPTS = 3
# Linear: attempt n waits base * n before attempt n + 1.
DEFAULT_BACKOFF_BASE_S = 1.0
DEFAULT_RETRY_REMOTE_ERRORS = False

__all__ = [
    "ENV_FIGMA_CHANNEL",
    "ENV_JOIN_TIMEOUT_S",
    "ENV_COMMAND_TIMEOUT_S",
    "ENV_PROGRESS_TIMEOUT_S",
    "ENV_MAX_ATTEMPTS",
    "ENV_BACKOFF_BASE_S",
    "ENV_RETRY_REMOTE_ERRORS",
    "DEFAULT_JOIN_TIMEOUT_S",
    "DEFAULT_COMMAND_TIMEOUT_S",
    "DEFAULT_PROGRESS_TIMEOUT_S",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_BACKOFF_BASE_S",
    "DEFAULT_RETRY_REMOTE_ERRORS",
]
