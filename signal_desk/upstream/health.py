"""Startup reachability check against the upstream ``/health`` endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from signal_desk.config import settings
from signal_desk.errors import MalformedResponse, SignalDeskError, TransportError
from signal_desk.upstream.base import fetch_json
from signal_desk.upstream.models import HealthState

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Unable to reach API."


async def check_health(
    client: httpx.AsyncClient, timeout: float | None = None
) -> HealthState:
    """GET ``/health`` within ``timeout`` seconds.

    A timeout is reported as TransportError. A missing status field is not an
    error; it reads as ``"unknown"``.
    """
    timeout = settings.health_timeout_seconds if timeout is None else timeout
    try:
        data = await asyncio.wait_for(fetch_json(client, "/health"), timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Health check timed out after %.1fs", timeout)
        raise TransportError(f"/health: no response within {timeout}s") from exc

    if not isinstance(data, dict):
        raise MalformedResponse("/health: expected a JSON object")

    return HealthState(
        status=str(data.get("status") or "unknown"),
        server_time=_optional_str(data.get("server_time")),
        version=_optional_str(data.get("version")),
    )


def _optional_str(value) -> str | None:
    return None if value is None else str(value)


class HealthMonitor:
    """Run :func:`check_health` once in the background.

    ``close()`` aborts an in-flight check; once closed the monitor never
    publishes a result, even if the response was already on its way.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float | None = None,
        on_update: Callable[[HealthMonitor], None] | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._on_update = on_update
        self._task: asyncio.Task | None = None
        self._closed = False
        self.state: HealthState | None = None
        self.error: str | None = None
        self.failure: SignalDeskError | None = None

    @property
    def checking(self) -> bool:
        """True until the check has produced a state or an error."""
        return self.state is None and self.error is None

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="health-check")
        return self._task

    async def wait(self) -> None:
        task = self.start()
        try:
            await task
        except asyncio.CancelledError:
            if not self._closed:
                raise

    async def close(self) -> None:
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.debug("Health check cancelled on teardown")

    async def _run(self) -> None:
        try:
            state = await check_health(self._client, self._timeout)
        except SignalDeskError as exc:
            logger.error("Health check failed: %s", exc)
            self._publish(error=exc)
            return
        logger.info("Upstream health: %s (version=%s)", state.status, state.version)
        self._publish(state=state)

    def _publish(
        self,
        state: HealthState | None = None,
        error: SignalDeskError | None = None,
    ) -> None:
        if self._closed:
            return
        if error is not None:
            self.failure = error
            self.error = UNREACHABLE_MESSAGE
        else:
            self.state = state
        if self._on_update is not None:
            self._on_update(self)
