"""FastAPI channel relay between bridge clients and the Figma plugin."""

from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from figma_bridge.config.relay import RELAY_WS_PATH
from figma_bridge.runtime import load_settings
from figma_bridge.state.settings import RelaySettings

from .channels import ChannelRegistry
from .manager import handle_websocket_connection

logger = logging.getLogger(__name__)


def create_app(settings: RelaySettings | None = None) -> FastAPI:
    relay_settings = settings or load_settings().relay
    app = FastAPI(default_response_class=ORJSONResponse)
    app.state.registry = ChannelRegistry(max_connections=relay_settings.max_connections, port=relay_settings.port)

    @app.get("/health")
    async def health() -> dict[str, object]:
        registry: ChannelRegistry = app.state.registry
        return {
            "status": "ok",
            "clients": registry.client_count(),
            "channels": registry.channel_names(),
        }

    @app.websocket(RELAY_WS_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, app.state.registry)

    logger.info("relay: app created max_connections=%d", relay_settings.max_connections)
    return app


__all__ = ["create_app"]
