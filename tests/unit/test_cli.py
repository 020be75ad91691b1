from __future__ import annotations

import orjson
import pytest

from figma_bridge.cli import run_exec, parse_args, run_connect


def test_exec_arguments() -> None:
    args = parse_args(["exec", "get_node_info", "--params", '{"nodeId": "1:2"}', "--timeout", "5", "--attempts", "2"])

    assert args.action == "exec"
    assert args.command == "get_node_info"
    assert args.params == '{"nodeId": "1:2"}'
    assert args.timeout == 5.0
    assert args.attempts == 2


def test_connect_arguments() -> None:
    args = parse_args(["--log-level", "debug", "connect", "--url", "ws://127.0.0.1:4000", "--channel", "design"])

    assert args.action == "connect"
    assert args.log_level == "debug"
    assert args.url == "ws://127.0.0.1:4000"
    assert args.channel == "design"


def test_relay_arguments() -> None:
    args = parse_args(["relay", "--port", "4000"])

    assert args.action == "relay"
    assert args.port == 4000
    assert args.host is None


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.asyncio
async def test_connect_without_channel_reports_error(capsys: pytest.CaptureFixture[str]) -> None:
    code = await run_connect(parse_args(["connect", "--url", "ws://127.0.0.1:1"]))

    assert code == 1
    assert "FIGMA_CHANNEL" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_exec_without_channel_prints_failed_result(capsys: pytest.CaptureFixture[str]) -> None:
    code = await run_exec(parse_args(["exec", "get_selection", "--url", "ws://127.0.0.1:1"]))

    assert code == 1
    assert orjson.loads(capsys.readouterr().out) == {
        "success": False,
        "error": "no channel given and FIGMA_CHANNEL is unset",
    }
