"""Main FastAPI application for the chat proxy."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes import chat, forecast, health
from .config_loader import ProxySettings, load_settings
from .logging import setup_logging

logger = logging.getLogger("chatbridge")


def _static_directory(settings: ProxySettings) -> Optional[Path]:
    if not settings.static_dir:
        return None
    path = Path(settings.static_dir)
    if not path.is_dir():
        logger.warning("Static directory %s does not exist; not serving static files", path)
        return None
    return path


def create_app(
    settings: Optional[ProxySettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the proxy application.

    Args:
        settings: Resolved settings; loaded from config and environment when omitted.
        transport: Optional httpx transport for upstream calls (tests use
            ``httpx.MockTransport``).

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()
    setup_logging(settings.log_level, secrets=[settings.api_key])

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Chat proxy starting up on %s:%s", settings.host, settings.port)
        logger.info("Upstream provider: %s (model %s)", settings.provider, settings.model_name)
        if not settings.api_key:
            logger.error("API key is not configured; /api/chat will answer 500")
        yield
        logger.info("Chat proxy shut down")

    app = FastAPI(title="chatbridge", lifespan=lifespan)
    app.state.settings = settings
    app.state.upstream_transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Register routes
    app.post("/api/chat")(chat)
    app.post("/api/forecast")(forecast)
    app.get("/health")(health)

    # Static files last so they never shadow the API
    static_dir = _static_directory(settings)
    if static_dir is not None:
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("Serving static files from %s", static_dir)

    return app


__all__ = ["create_app"]
