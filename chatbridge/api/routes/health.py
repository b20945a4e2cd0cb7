"""Liveness endpoint."""

from fastapi import Request


async def health(request: Request) -> dict[str, str]:
    """Report the configured upstream without touching it.

    GET /health
    """
    settings = request.app.state.settings
    return {
        "status": "ok",
        "provider": settings.provider,
        "model": settings.model_name,
    }
