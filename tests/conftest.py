from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Keep `import figma_bridge...` and `import tests.fakes` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


@pytest.fixture(autouse=True)
def _clean_bridge_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FIGMA_WS_URL",
        "FIGMA_CHANNEL",
        "FIGMA_JOIN_TIMEOUT_S",
        "FIGMA_COMMAND_TIMEOUT_S",
        "FIGMA_PROGRESS_TIMEOUT_S",
        "FIGMA_MAX_ATTEMPTS",
        "FIGMA_BACKOFF_BASE_S",
        "FIGMA_RETRY_REMOTE_ERRORS",
        "FIGMA_WS_PING_INTERVAL_S",
        "FIGMA_RELAY_PORT",
        "FIGMA_RELAY_MAX_CONNECTIONS",
    ):
        monkeypatch.delenv(name, raising=False)
