from typing import Callable

import httpx
import pytest

from signal_desk.config import settings

UPSTREAM = "http://upstream.test"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    # Never let a developer's .env leak into tests
    monkeypatch.setattr(settings, "api_base", UPSTREAM)
    monkeypatch.setattr(settings, "api_key", "")
    monkeypatch.setattr(settings, "health_timeout_seconds", 10.0)
    monkeypatch.setattr(settings, "request_timeout_seconds", 15.0)
    yield


class Recorder:
    """MockTransport handler wrapper that remembers every request."""

    def __init__(self, handler: Callable) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def make_upstream():
    """Build (client, recorder) pairs backed by a fake upstream."""
    def _make(handler: Callable) -> tuple[httpx.AsyncClient, Recorder]:
        recorder = Recorder(handler)
        client = httpx.AsyncClient(
            base_url=UPSTREAM, transport=httpx.MockTransport(recorder)
        )
        return client, recorder

    return _make
