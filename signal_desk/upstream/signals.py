"""Signal and lucky-pick endpoints."""

import logging
from urllib.parse import quote

import httpx

from signal_desk.upstream.base import auth_headers, fetch_json, parse_body
from signal_desk.upstream.models import LuckyResponse, Signal

logger = logging.getLogger(__name__)


def signal_path(symbol: str) -> str:
    # Escape everything, including "/", so the symbol stays one path segment
    return f"/signal/{quote(symbol, safe='')}"


async def get_signal(symbol: str, client: httpx.AsyncClient) -> Signal:
    """Fetch the BUY/SELL/HOLD signal for one symbol."""
    if not symbol:
        raise ValueError("symbol must be non-empty")

    path = signal_path(symbol)
    data = await fetch_json(client, path, headers=auth_headers())
    signal = parse_body(Signal, data, path)
    logger.info("Signal for %s: %s (score=%s)", signal.symbol, signal.action, signal.score)
    return signal


async def get_lucky(client: httpx.AsyncClient) -> LuckyResponse:
    """Fetch a batch of randomly chosen signals."""
    data = await fetch_json(client, "/lucky", headers=auth_headers())
    lucky = parse_body(LuckyResponse, data, "/lucky")
    logger.info("Lucky picks: %s", ", ".join(p.symbol for p in lucky.picks) or "(none)")
    return lucky
