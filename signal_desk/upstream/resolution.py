"""Search endpoint: classify a normalized query as ticker or company."""

import logging

import httpx

from signal_desk.upstream.base import auth_headers, fetch_json, parse_body
from signal_desk.upstream.models import SearchResult

logger = logging.getLogger(__name__)


async def resolve(query: str, client: httpx.AsyncClient) -> SearchResult:
    """Send an already-normalized query to ``/search``.

    Raises UpstreamError, TransportError or MalformedResponse.
    """
    data = await fetch_json(
        client, "/search", params={"q": query}, headers=auth_headers()
    )
    result = parse_body(SearchResult, data, "/search")
    logger.info(
        "Resolved %r as %s -> %s (%d suggestions)",
        query,
        result.type,
        result.normalized,
        len(result.suggestions),
    )
    return result
