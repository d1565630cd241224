"""Shared HTTP plumbing for the upstream signal service.

Every request goes through :func:`fetch_json`, which maps the three ways a
call can go wrong onto the error taxonomy: non-2xx status, transport
failure and an unparseable body.
"""

import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from signal_desk.config import Settings, settings as default_settings
from signal_desk.errors import (
    ConfigurationError,
    MalformedResponse,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Api-Key"

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_client(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an AsyncClient bound to the configured upstream base URL."""
    config = config or default_settings
    if not config.upstream_base:
        raise ConfigurationError("Missing API_BASE. Set it in .env or the environment.")
    return httpx.AsyncClient(
        base_url=config.upstream_base,
        timeout=config.request_timeout_seconds,
        transport=transport,
    )


def auth_headers(config: Settings | None = None) -> dict[str, str]:
    """API key header for authenticated endpoints, empty when no key is set."""
    config = config or default_settings
    if not config.api_key:
        return {}
    return {API_KEY_HEADER: config.api_key}


async def fetch_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET ``path`` and return the decoded JSON body.

    Raises UpstreamError on non-2xx (body left unparsed), TransportError on
    network failures and timeouts, MalformedResponse when the body is not JSON.
    """
    try:
        resp = await client.get(path, params=params, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Upstream request %s failed: %s", path, exc)
        raise TransportError(f"{path}: {exc}") from exc

    if not resp.is_success:
        logger.warning("Upstream %s returned HTTP %d", path, resp.status_code)
        raise UpstreamError(resp.status_code, path)

    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Upstream %s returned a non-JSON body: %s", path, exc)
        raise MalformedResponse(f"{path}: body is not valid JSON") from exc


def parse_body(model: type[ModelT], data: Any, path: str) -> ModelT:
    """Validate a decoded body against ``model`` or raise MalformedResponse."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning("Upstream %s body failed validation: %s", path, exc)
        raise MalformedResponse(f"{path}: {exc.error_count()} invalid field(s)") from exc
