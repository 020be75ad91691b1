"""Command-line entry point: `figma-bridge connect | exec | relay`."""

from __future__ import annotations

import sys
import asyncio
import logging
import argparse
import dataclasses
from typing import Any

import orjson
import uvicorn

from figma_bridge.relay import create_app
from figma_bridge.protocol import Envelope
from figma_bridge.client import FigmaBridge
from figma_bridge.errors import BridgeError
from figma_bridge.state.settings import BridgeSettings
from figma_bridge.runtime import load_settings, configure_logging

logger = logging.getLogger(__name__)

_ATTACHED_POLL_S = 1.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="figma-bridge", description="Figma plugin execution bridge")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    sub = parser.add_subparsers(dest="action", required=True)

    def add_client_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--url", default=None, help="Relay WebSocket URL (overrides FIGMA_WS_URL)")
        p.add_argument("--channel", default=None, help="Channel to join (overrides FIGMA_CHANNEL)")

    connect = sub.add_parser("connect", help="Connect, join a channel and stay attached until interrupted")
    add_client_args(connect)

    execute = sub.add_parser("exec", help="Run one command or code snippet and print the JSON result")
    add_client_args(execute)
    execute.add_argument("command", nargs="?", default=None, help="Command name, e.g. get_document_info")
    execute.add_argument("--params", default=None, help="Command parameters as a JSON object")
    execute.add_argument("--code", default=None, help="Plugin code to run via execute_code")
    execute.add_argument("--code-file", default=None, help="File holding plugin code to run via execute_code")
    execute.add_argument("--timeout", type=float, default=None, help="Per-attempt timeout in seconds")
    execute.add_argument("--attempts", type=int, default=None, help="Maximum number of attempts")

    relay = sub.add_parser("relay", help="Serve the channel relay")
    relay.add_argument("--host", default=None, help="Bind host (overrides FIGMA_RELAY_HOST)")
    relay.add_argument("--port", type=int, default=None, help="Bind port (overrides FIGMA_RELAY_PORT)")

    return parser.parse_args(argv)


def _client_settings(args: argparse.Namespace) -> BridgeSettings:
    settings = load_settings()
    if args.url:
        settings = dataclasses.replace(settings, websocket=dataclasses.replace(settings.websocket, url=args.url))
    if args.channel:
        settings = dataclasses.replace(settings, channel=dataclasses.replace(settings.channel, name=args.channel))
    return settings


def _parse_params(raw: str | None) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        params = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise SystemExit(f"--params is not valid JSON: {exc}") from exc
    if not isinstance(params, dict):
        raise SystemExit("--params must be a JSON object")
    return params


def _read_code(args: argparse.Namespace) -> str | None:
    if args.code_file:
        with open(args.code_file, encoding="utf-8") as fh:
            return fh.read()
    return args.code


def _print_notice(envelope: Envelope) -> None:
    print(f"[{envelope.kind}] {envelope.channel or '-'}: {envelope.error or envelope.message}", file=sys.stderr)


async def run_connect(args: argparse.Namespace) -> int:
    bridge = FigmaBridge(_client_settings(args), on_notification=_print_notice)
    try:
        await bridge.open()
    except (BridgeError, ValueError) as exc:
        print(f"connect failed: {exc}", file=sys.stderr)
        return 1
    print(f"joined channel {bridge.current_channel} at {bridge.settings.websocket.url}", file=sys.stderr)
    try:
        while bridge.is_connected:
            await asyncio.sleep(_ATTACHED_POLL_S)
    finally:
        await bridge.disconnect()
    print("connection closed", file=sys.stderr)
    return 0


async def run_exec(args: argparse.Namespace) -> int:
    code = _read_code(args)
    if code is None and not args.command:
        raise SystemExit("exec needs a command name, --code or --code-file")
    params = _parse_params(args.params)

    bridge = FigmaBridge(_client_settings(args))
    try:
        await bridge.open()
    except (BridgeError, ValueError) as exc:
        print(orjson.dumps({"success": False, "error": str(exc)}).decode("utf-8"))
        return 1
    try:
        if code is not None:
            result = await bridge.execute_code(code, timeout_s=args.timeout, max_attempts=args.attempts)
        else:
            result = await bridge.execute(args.command, params, timeout_s=args.timeout, max_attempts=args.attempts)
    finally:
        await bridge.disconnect()

    print(orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8"))
    return 0 if result.success else 1


def run_relay(args: argparse.Namespace) -> int:
    relay_settings = load_settings().relay
    if args.host:
        relay_settings = dataclasses.replace(relay_settings, host=args.host)
    if args.port:
        relay_settings = dataclasses.replace(relay_settings, port=args.port)
    uvicorn.run(
        create_app(relay_settings),
        host=relay_settings.host,
        port=relay_settings.port,
        log_level=logging.getLevelName(logging.getLogger().level).lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        if args.action == "relay":
            return run_relay(args)
        if args.action == "connect":
            return asyncio.run(run_connect(args))
        return asyncio.run(run_exec(args))
    except KeyboardInterrupt:
        return 130


__all__ = ["main", "parse_args"]
