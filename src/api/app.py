"""FastAPI application factory for the analysis API."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.analysis.pipeline import AnalysisPipeline
from src.api.middleware import SecurityHeadersMiddleware


def create_app(pipeline: AnalysisPipeline | None = None) -> FastAPI:
    """Build the app. Without an injected pipeline one is wired from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned: AnalysisPipeline | None = None
        if getattr(app.state, "pipeline", None) is None:
            from config.settings import settings
            from src.analysis.factory import build_pipeline

            owned = build_pipeline(settings)
            app.state.pipeline = owned
            logger.info("[API] Pipeline built from settings")
        yield
        if owned is not None:
            await owned.close()

    app = FastAPI(
        title="Token Risk API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/docs" if os.getenv("API_DEBUG") else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if os.getenv("API_DEBUG") else None,
    )
    app.state.pipeline = pipeline

    from src.api.routers.analysis import limiter
    from src.api.routers.analysis import router as analysis_router
    from src.api.routers.health import router as health_router

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(health_router)
    app.include_router(analysis_router)
    return app
