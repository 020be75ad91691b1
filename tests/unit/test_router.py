from __future__ import annotations

import json
import asyncio

import pytest

from tests.fakes import FakeTransport
from figma_bridge.protocol import Envelope, build_command
from figma_bridge.errors import RemoteCommandError
from figma_bridge.client import MessageRouter, RequestCorrelator


def _wire(correlator_ids: list[str]) -> tuple[RequestCorrelator, MessageRouter, list[Envelope]]:
    ids = iter(correlator_ids)
    correlator = RequestCorrelator(FakeTransport(), id_factory=lambda: next(ids))
    notices: list[Envelope] = []
    router = MessageRouter(correlator, progress_timeout_s=0.2, on_notification=notices.append)
    return correlator, router, notices


@pytest.mark.asyncio
async def test_nested_response_resolves_pending_request() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "get_selection"), timeout_s=1.0)

    router.route(json.dumps({"type": "message", "channel": "c", "message": {"id": "r1", "result": [1, 2]}}))

    assert await future == [1, 2]
    assert router.stats.resolved == 1


@pytest.mark.asyncio
async def test_error_response_rejects_with_remote_error() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "delete_node"), timeout_s=1.0)

    router.route(json.dumps({"type": "message", "id": "r1", "error": "Node not found"}))

    with pytest.raises(RemoteCommandError) as exc:
        await future
    assert str(exc.value) == "Node not found"
    assert router.stats.rejected == 1


@pytest.mark.asyncio
async def test_join_reply_without_result_falls_back_to_message() -> None:
    correlator, router, notices = _wire(["r1"])
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)

    router.route(json.dumps({"type": "system", "id": "r1", "message": "Joined channel: c"}))

    assert await future == "Joined channel: c"
    assert notices == []


@pytest.mark.asyncio
async def test_null_result_resolves_to_none() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "delete_node"), timeout_s=1.0)

    router.route(json.dumps({"type": "message", "channel": "c", "message": {"id": "r1", "result": None}}))

    assert await future is None
    assert router.stats.resolved == 1


def test_error_notice_with_numeric_id_reaches_sink() -> None:
    _, router, notices = _wire([])

    router.route(json.dumps({"type": "error", "id": 42, "message": "relay restarting"}))

    assert [n.request_id for n in notices] == ["42"]
    assert router.stats.errors == 1
    assert router.stats.malformed == 0


@pytest.mark.asyncio
async def test_echo_of_own_command_does_not_resolve() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)

    router.route(json.dumps({"type": "message", "id": "r1", "message": {"id": "r1", "command": "ping", "params": {}}}))

    assert not future.done()
    assert router.stats.dropped == 1
    correlator.resolve("r1", None)


@pytest.mark.asyncio
async def test_unmatched_response_is_counted_and_harmless() -> None:
    correlator, router, notices = _wire(["r1"])
    future = await correlator.send(build_command("c", "ping"), timeout_s=1.0)

    router.route(json.dumps({"type": "message", "id": "other", "result": "x"}))

    assert not future.done()
    assert correlator.pending_count == 1
    assert router.stats.unmatched == 1
    assert notices == []
    correlator.resolve("r1", None)


def test_system_and_error_frames_reach_notification_sink() -> None:
    _, router, notices = _wire([])

    router.route(json.dumps({"type": "system", "channel": "c", "message": "A new user has joined the channel"}))
    router.route(json.dumps({"type": "error", "message": "You must join the channel first"}))

    assert [n.kind for n in notices] == ["system", "error"]
    assert router.stats.system == 1
    assert router.stats.errors == 1


def test_malformed_and_unknown_frames_are_dropped() -> None:
    _, router, notices = _wire([])

    router.route("{not json")
    router.route(json.dumps({"type": "broadcast", "message": "hi"}))

    assert notices == []
    assert router.stats.malformed == 1
    assert router.stats.dropped == 1
    assert router.stats.frames == 2


def test_notification_sink_failure_is_contained() -> None:
    correlator = RequestCorrelator(FakeTransport())

    def broken(_envelope: Envelope) -> None:
        raise RuntimeError("sink bug")

    router = MessageRouter(correlator, progress_timeout_s=1.0, on_notification=broken)
    router.route(json.dumps({"type": "system", "message": "hello"}))
    assert router.stats.system == 1


@pytest.mark.asyncio
async def test_progress_update_extends_pending_timeout() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "scan_text_nodes"), timeout_s=0.05)

    await asyncio.sleep(0.03)
    router.route(json.dumps({"type": "progress_update", "id": "r1", "message": {"data": {"progress": 50}}}))
    await asyncio.sleep(0.05)

    assert not future.done()
    assert router.stats.progress == 1
    router.route(json.dumps({"type": "message", "id": "r1", "result": "scanned"}))
    assert await future == "scanned"


@pytest.mark.asyncio
async def test_progress_update_with_nested_id() -> None:
    correlator, router, _ = _wire(["r1"])
    future = await correlator.send(build_command("c", "scan_text_nodes"), timeout_s=1.0)

    router.route(json.dumps({"type": "progress_update", "message": {"id": "r1", "data": {"progress": 10}}}))

    assert router.stats.progress == 1
    assert not future.done()
    correlator.resolve("r1", None)
