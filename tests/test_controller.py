import asyncio

import httpx
import pytest

from signal_desk.errors import InvalidCharacters, TransportError
from signal_desk.session.controller import (
    LUCKY_FAILED,
    SEARCH_FAILED,
    SIGNAL_FAILED,
    Interaction,
)
from signal_desk.session.state import Phase

TESLA = {"query": "TESLA", "normalized": "TSLA", "type": "company", "suggestions": ["TSLA"]}
AAPL = {"query": "AAPL", "normalized": "AAPL", "type": "ticker", "suggestions": []}
TSLA_SIGNAL = {"symbol": "TSLA", "action": "HOLD", "score": 0, "reasons": ["demo"]}
LUCKY = {
    "picks": [
        {"symbol": "NVDA", "action": "BUY", "score": 0.9, "reasons": ["momentum"]},
        {"symbol": "F", "action": "SELL", "score": -0.4, "reasons": ["weak margins"]},
    ],
    "note": "Demo only.",
}


def _router(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/search":
        q = request.url.params["q"]
        return httpx.Response(200, json=TESLA if q == "TESLA" else AAPL)
    if path.startswith("/signal/"):
        symbol = path.rsplit("/", 1)[-1]
        return httpx.Response(200, json={**TSLA_SIGNAL, "symbol": symbol})
    if path == "/lucky":
        return httpx.Response(200, json=LUCKY)
    return httpx.Response(404)


@pytest.mark.asyncio
async def test_company_query_end_to_end(make_upstream):
    client, upstream = make_upstream(_router)
    interaction = Interaction(client)

    state = await interaction.search("  tesla  ")
    assert state.phase is Phase.RESOLVED
    assert state.query == "TESLA"
    assert state.result.model_dump() == TESLA

    state = await interaction.fetch_signal()
    assert state.phase is Phase.DISPLAYING
    assert state.symbol == "TSLA"
    assert state.signal.model_dump() == {**TSLA_SIGNAL, "score": 0.0}
    assert state.error is None
    assert upstream.paths == ["/search", "/signal/TSLA"]
    assert upstream.requests[0].url.params["q"] == "TESLA"


@pytest.mark.asyncio
async def test_invalid_query_makes_no_request(make_upstream):
    client, upstream = make_upstream(_router)
    interaction = Interaction(client)

    state = await interaction.search("AAPL$")

    assert state.phase is Phase.FAILED
    assert state.error == "Query contains invalid characters."
    assert isinstance(state.failure, InvalidCharacters)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_signal_without_resolved_query_is_a_noop(make_upstream):
    client, upstream = make_upstream(_router)
    interaction = Interaction(client)

    state = await interaction.fetch_signal()

    assert state.phase is Phase.IDLE
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_new_search_clears_displayed_signal_before_result(make_upstream):
    client, _ = make_upstream(_router)
    seen = []
    interaction = Interaction(client, on_change=seen.append)
    await interaction.search("tesla")
    await interaction.fetch_signal()
    assert interaction.state.signal is not None

    seen.clear()
    await interaction.search("aapl")

    searching, resolved = seen
    assert searching.phase is Phase.SEARCHING
    assert searching.signal is None and searching.result is None and searching.error is None
    assert resolved.result.normalized == "AAPL"
    assert resolved.signal is None


@pytest.mark.asyncio
async def test_loading_is_set_during_fetch_and_released_after(make_upstream):
    client, _ = make_upstream(_router)
    seen = []
    interaction = Interaction(client, on_change=seen.append)
    await interaction.search("tesla")

    seen.clear()
    await interaction.fetch_signal()

    assert [s.loading for s in seen] == [True, False]


@pytest.mark.asyncio
async def test_search_failure_keeps_status_for_diagnostics(make_upstream):
    client, _ = make_upstream(lambda r: httpx.Response(502, text="bad gateway"))
    interaction = Interaction(client)

    state = await interaction.search("aapl")

    assert state.phase is Phase.FAILED
    assert state.error == SEARCH_FAILED
    assert state.status_code == 502
    assert state.result is None
    assert not state.loading


@pytest.mark.asyncio
async def test_signal_failure_keeps_search_result(make_upstream):
    def handler(request):
        if request.url.path == "/search":
            return httpx.Response(200, json=TESLA)
        raise httpx.ConnectError("reset", request=request)

    client, _ = make_upstream(handler)
    interaction = Interaction(client)
    await interaction.search("tesla")

    state = await interaction.fetch_signal()

    assert state.phase is Phase.FAILED
    assert state.error == SIGNAL_FAILED
    assert isinstance(state.failure, TransportError)
    assert state.result.normalized == "TSLA"
    assert not state.loading


@pytest.mark.asyncio
async def test_lucky_bypasses_resolution_and_replaces_signal(make_upstream):
    client, upstream = make_upstream(_router)
    interaction = Interaction(client)
    await interaction.search("tesla")
    await interaction.fetch_signal()

    state = await interaction.feeling_lucky()

    assert state.phase is Phase.DISPLAYING
    assert state.signal is None
    assert state.result is None
    assert [p.symbol for p in state.lucky.picks] == ["NVDA", "F"]
    assert upstream.paths[-1] == "/lucky"


@pytest.mark.asyncio
async def test_signal_replaces_lucky(make_upstream):
    client, _ = make_upstream(_router)
    interaction = Interaction(client)
    await interaction.search("aapl")
    await interaction.feeling_lucky()
    await interaction.search("aapl")

    state = await interaction.fetch_signal()

    assert state.lucky is None
    assert state.signal.symbol == "AAPL"


@pytest.mark.asyncio
async def test_lucky_failure(make_upstream):
    client, _ = make_upstream(lambda r: httpx.Response(500))
    interaction = Interaction(client)

    state = await interaction.feeling_lucky()

    assert state.error == LUCKY_FAILED
    assert state.lucky is None
    assert not state.loading


@pytest.mark.asyncio
async def test_new_operation_clears_previous_error(make_upstream):
    client, _ = make_upstream(_router)
    interaction = Interaction(client)
    await interaction.search("")
    assert interaction.state.error == "Query cannot be empty."

    state = await interaction.feeling_lucky()

    assert state.error is None


@pytest.mark.asyncio
async def test_late_search_response_is_dropped(make_upstream):
    started = asyncio.Event()
    release = asyncio.Event()

    async def handler(request):
        if request.url.path == "/search":
            started.set()
            await release.wait()
        return _router(request)

    client, _ = make_upstream(handler)
    interaction = Interaction(client)

    slow_search = asyncio.create_task(interaction.search("tesla"))
    await started.wait()
    await interaction.feeling_lucky()
    release.set()
    await slow_search

    state = interaction.state
    assert state.lucky is not None
    assert state.result is None
    assert state.phase is Phase.DISPLAYING


@pytest.mark.asyncio
async def test_cancelled_fetch_does_not_leave_loading_set(make_upstream):
    started = asyncio.Event()

    async def handler(request):
        if request.url.path.startswith("/signal/"):
            started.set()
            await asyncio.sleep(5)
        return _router(request)

    client, _ = make_upstream(handler)
    interaction = Interaction(client)
    await interaction.search("tesla")

    fetch = asyncio.create_task(interaction.fetch_signal())
    await started.wait()
    fetch.cancel()
    with pytest.raises(asyncio.CancelledError):
        await fetch

    assert not interaction.state.loading
    assert interaction.state.error == SIGNAL_FAILED


@pytest.mark.asyncio
async def test_signal_for_result_without_usable_symbol_is_a_noop(make_upstream):
    blank = {"query": "X", "normalized": "", "type": "ticker", "suggestions": []}

    def handler(request):
        if request.url.path == "/search":
            return httpx.Response(200, json=blank)
        return _router(request)

    client, upstream = make_upstream(handler)
    interaction = Interaction(client)
    resolved = await interaction.search("x")

    state = await interaction.fetch_signal()

    assert state is resolved
    assert state.phase is Phase.RESOLVED
    assert upstream.paths == ["/search"]
