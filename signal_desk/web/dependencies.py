import httpx
from fastapi import HTTPException, Request

from signal_desk.config import Settings

NO_STORE = {"Cache-Control": "no-store"}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream(request: Request) -> httpx.AsyncClient:
    client = request.app.state.upstream
    if client is None:
        raise HTTPException(status_code=503, detail="API_BASE is not configured")
    return client


def get_health_upstream(request: Request) -> httpx.AsyncClient:
    """Like get_upstream, but the 503 is marked non-cacheable too."""
    client = request.app.state.upstream
    if client is None:
        raise HTTPException(
            status_code=503, detail="API_BASE is not configured", headers=NO_STORE
        )
    return client
