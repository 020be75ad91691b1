from __future__ import annotations

import asyncio
import itertools

import pytest

from tests.fakes import FakeTransport
from figma_bridge.protocol import build_command
from figma_bridge.client import RequestCorrelator
from figma_bridge.errors import (
    TransportError,
    NotConnectedError,
    RemoteCommandError,
    RequestTimeoutError,
    ConnectionClosedError,
)


def _sequential_ids() -> RequestCorrelator:
    counter = itertools.count(1)
    return RequestCorrelator(FakeTransport(), id_factory=lambda: f"req-{next(counter)}")


@pytest.mark.asyncio
async def test_send_refuses_when_not_connected_without_pending_entry() -> None:
    transport = FakeTransport(connected=False)
    correlator = RequestCorrelator(transport)

    with pytest.raises(NotConnectedError):
        await correlator.send(build_command("c", "ping"), timeout_s=1.0)
    assert correlator.pending_count == 0
    assert transport.sent == []


@pytest.mark.asyncio
async def test_send_attaches_fresh_id_and_resolves_once() -> None:
    correlator = _sequential_ids()
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)

    assert correlator.is_pending("req-1")
    assert correlator.resolve("req-1", {"pong": True}) is True
    assert await future == {"pong": True}

    # Second resolution attempts for the same id are ignored.
    assert correlator.resolve("req-1", "again") is False
    assert correlator.reject("req-1", RemoteCommandError("late")) is False
    assert correlator.pending_count == 0


@pytest.mark.asyncio
async def test_unknown_id_does_not_touch_other_requests() -> None:
    correlator = _sequential_ids()
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)

    assert correlator.resolve("nope", 1) is False
    assert correlator.reject("nope", RemoteCommandError("x")) is False
    assert not future.done()
    assert correlator.pending_count == 1

    correlator.resolve("req-1", "ok")
    assert await future == "ok"


@pytest.mark.asyncio
async def test_reject_delivers_remote_error() -> None:
    correlator = _sequential_ids()
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)
    correlator.reject("req-1", RemoteCommandError("boom", request_id="req-1"))

    with pytest.raises(RemoteCommandError) as exc:
        await future
    assert exc.value.request_id == "req-1"


@pytest.mark.asyncio
async def test_timeout_fails_request_and_clears_entry() -> None:
    correlator = _sequential_ids()

    with pytest.raises(RequestTimeoutError) as exc:
        await correlator.request(build_command("c", "slow"), timeout_s=0.05)
    assert "timeout" in str(exc.value)
    assert exc.value.request_id == "req-1"
    assert correlator.pending_count == 0
    # A response arriving after expiry has nothing to resolve.
    assert correlator.resolve("req-1", "late") is False


@pytest.mark.asyncio
async def test_extend_rearms_timer() -> None:
    correlator = _sequential_ids()
    future = await correlator.send(build_command("c", "long"), timeout_s=0.05)

    await asyncio.sleep(0.03)
    assert correlator.extend("req-1", 0.2) is True
    await asyncio.sleep(0.05)
    assert not future.done()

    correlator.resolve("req-1", "done")
    assert await future == "done"
    assert correlator.extend("req-1", 1.0) is False


@pytest.mark.asyncio
async def test_send_failure_settles_future_with_transport_error() -> None:
    transport = FakeTransport()
    transport.error = OSError("broken pipe")
    correlator = RequestCorrelator(transport)

    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)
    with pytest.raises(TransportError):
        await future
    assert correlator.pending_count == 0


@pytest.mark.asyncio
async def test_fail_all_rejects_every_pending_request() -> None:
    correlator = _sequential_ids()
    futures = [await correlator.send(build_command("c", f"cmd{i}"), timeout_s=1.0) for i in range(3)]

    assert correlator.fail_all(ConnectionClosedError("closed")) == 3
    assert correlator.pending_count == 0
    for future in futures:
        with pytest.raises(ConnectionClosedError):
            await future


@pytest.mark.asyncio
async def test_cancelled_caller_removes_entry() -> None:
    correlator = _sequential_ids()
    task = asyncio.create_task(correlator.request(build_command("c", "ping"), timeout_s=5.0))
    await asyncio.sleep(0)
    assert correlator.pending_count == 1

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert correlator.pending_count == 0


@pytest.mark.asyncio
async def test_responses_in_reverse_order_reach_their_own_callers() -> None:
    correlator = _sequential_ids()
    first = asyncio.create_task(correlator.request(build_command("c", "a"), timeout_s=1.0))
    second = asyncio.create_task(correlator.request(build_command("c", "b"), timeout_s=1.0))
    await asyncio.sleep(0)

    correlator.resolve("req-2", "result-b")
    correlator.resolve("req-1", "result-a")

    assert await first == "result-a"
    assert await second == "result-b"
