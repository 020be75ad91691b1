from __future__ import annotations

import json

import orjson
import pytest

from figma_bridge.protocol import Envelope, wrap_code, build_join, parse_frame, build_command


def test_parse_frame_top_level_response() -> None:
    env = parse_frame(json.dumps({"type": "message", "id": "r1", "channel": "c", "result": {"ok": 1}}))
    assert env.kind == "message"
    assert env.request_id == "r1"
    assert env.channel == "c"
    assert env.result == {"ok": 1}
    assert env.error is None
    assert env.is_response


def test_parse_frame_lifts_nested_response() -> None:
    raw = json.dumps({"type": "system", "channel": "c", "message": {"id": "r2", "result": "Connected to channel: c"}})
    env = parse_frame(raw)
    assert env.request_id == "r2"
    assert env.result == "Connected to channel: c"


def test_parse_frame_nested_error_object_uses_message_text() -> None:
    raw = json.dumps({"type": "message", "message": {"id": "r3", "error": {"message": "node not found"}}})
    env = parse_frame(raw)
    assert env.request_id == "r3"
    assert env.error == "node not found"


def test_parse_frame_top_level_id_wins_over_nested() -> None:
    raw = json.dumps({"type": "message", "id": "outer", "message": {"id": "inner", "result": 1}})
    assert parse_frame(raw).request_id == "outer"


def test_parse_frame_null_result_is_still_a_result() -> None:
    env = parse_frame(json.dumps({"type": "message", "message": {"id": "r4", "result": None}}))
    assert env.request_id == "r4"
    assert env.result is None
    assert env.has_result
    assert env.is_response
    assert not env.is_echo


def test_parse_frame_keeps_frames_with_unusable_optional_fields() -> None:
    numeric = parse_frame(json.dumps({"type": "error", "id": 7, "channel": "", "message": "boom"}))
    assert numeric.kind == "error"
    assert numeric.request_id == "7"
    assert numeric.channel is None

    odd = parse_frame(json.dumps({"type": "system", "id": True, "channel": ["c"], "clientType": 3, "message": "hi"}))
    assert odd.request_id is None
    assert odd.channel is None
    assert odd.client_type is None
    assert odd.message == "hi"


def test_parse_frame_reads_client_type() -> None:
    env = parse_frame(json.dumps({"type": "join", "channel": "c", "clientType": "figma"}))
    assert env.client_type == "figma"


@pytest.mark.parametrize("error", [None, False, ""])
def test_parse_frame_falsy_error_is_not_an_error(error: object) -> None:
    env = parse_frame(json.dumps({"type": "message", "id": "r", "result": 1, "error": error}))
    assert env.error is None


def test_parse_frame_accepts_bytes() -> None:
    env = parse_frame(b'{"type": "system", "message": "hello"}')
    assert env.kind == "system"
    assert env.message == "hello"
    assert not env.is_response


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps([]),
        json.dumps({"id": "r"}),
        json.dumps({"type": ""}),
    ],
)
def test_parse_frame_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_frame(raw)


def test_echo_of_outbound_command_is_not_a_response() -> None:
    env = parse_frame(json.dumps({"type": "message", "id": "r", "message": {"id": "r", "command": "x", "params": {}}}))
    assert env.is_echo
    assert not env.is_response


def test_build_command_drops_unset_params_and_attaches_id() -> None:
    env = build_command("c", "create_rectangle", {"x": 0, "name": None})
    wire = orjson.loads(env.with_request_id("abc").dumps())
    assert wire == {
        "type": "message",
        "id": "abc",
        "channel": "c",
        "message": {"id": "abc", "command": "create_rectangle", "params": {"x": 0}},
    }


def test_build_command_rejects_empty_name() -> None:
    with pytest.raises(ValueError):
        build_command("c", "  ")


def test_build_join_omits_unset_fields() -> None:
    assert orjson.loads(build_join("c").dumps()) == {"type": "join", "channel": "c", "clientType": "mcp"}
    assert orjson.loads(build_join("c", client_type=None).dumps()) == {"type": "join", "channel": "c"}
    assert Envelope(kind="join").to_dict() == {"type": "join"}


def test_wrap_code_wraps_plain_code_in_async_iife() -> None:
    wrapped = wrap_code("return figma.currentPage.name;")
    assert wrapped.startswith("(async () => {")
    assert "    return figma.currentPage.name;" in wrapped
    assert "catch (error)" in wrapped


def test_wrap_code_leaves_async_code_alone() -> None:
    code = "(async () => { return 1; })()"
    assert wrap_code(code) == code


def test_wrap_code_rejects_empty() -> None:
    with pytest.raises(ValueError):
        wrap_code("   ")
