"""API server: uvicorn inside the running asyncio loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


async def run_api_server(host: str | None = None, port: int | None = None) -> None:
    from src.api.app import create_app

    host = host or settings.api_host
    port = port or settings.api_port
    config = uvicorn.Config(
        app=create_app(),
        host=host,
        port=port,
        log_level="warning",
        loop="none",
    )
    server = uvicorn.Server(config)
    logger.info(f"Analysis API starting on http://{host}:{port}")
    await server.serve()
