"""Server-side relay: forwards to the upstream and injects the API key.

Status code and body are passed through verbatim. The upstream content type
is kept, falling back to application/json when it sends none.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from signal_desk.config import Settings
from signal_desk.upstream.base import auth_headers
from signal_desk.upstream.signals import signal_path
from signal_desk.web.dependencies import (
    NO_STORE,
    get_health_upstream,
    get_settings,
    get_upstream,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


async def _forward(
    client: httpx.AsyncClient,
    path: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    extra_headers: dict[str, str] | None = None,
) -> Response:
    try:
        resp = await client.get(path, params=params, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("Relay %s failed: %s", path, exc)
        return JSONResponse(
            {"detail": "Upstream unreachable"}, status_code=502, headers=extra_headers
        )

    logger.debug("Relay %s -> %d", path, resp.status_code)
    # Set content-type directly; media_type would append a charset to text/*
    headers = {"content-type": resp.headers.get("content-type") or "application/json"}
    headers.update(extra_headers or {})
    return Response(content=resp.content, status_code=resp.status_code, headers=headers)


@router.get("/health")
async def relay_health(client: httpx.AsyncClient = Depends(get_health_upstream)):
    return await _forward(client, "/health", extra_headers=NO_STORE)


@router.get("/search")
async def relay_search(
    q: str = Query(""),
    client: httpx.AsyncClient = Depends(get_upstream),
    config: Settings = Depends(get_settings),
):
    return await _forward(
        client, "/search", params={"q": q}, headers=auth_headers(config)
    )


# :path keeps symbols containing "/" (sent as %2F) in one route
@router.get("/signal/{symbol:path}")
async def relay_signal(
    symbol: str,
    client: httpx.AsyncClient = Depends(get_upstream),
    config: Settings = Depends(get_settings),
):
    return await _forward(client, signal_path(symbol), headers=auth_headers(config))


@router.get("/lucky")
async def relay_lucky(
    client: httpx.AsyncClient = Depends(get_upstream),
    config: Settings = Depends(get_settings),
):
    return await _forward(client, "/lucky", headers=auth_headers(config))
