"""The four client-facing operations, each ending in a new InteractionState.

Nothing here raises to the caller: every failure is caught at the operation
boundary, logged, and turned into the state's single error slot.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

import httpx

from signal_desk.errors import QueryValidationError, SignalDeskError
from signal_desk.query.normalizer import validate_and_normalize
from signal_desk.query.selector import select_symbol
from signal_desk.session.state import InteractionState
from signal_desk.upstream.resolution import resolve
from signal_desk.upstream.signals import get_lucky, get_signal

logger = logging.getLogger(__name__)

SEARCH_FAILED = "Search failed. Please try again."
SIGNAL_FAILED = "Failed to fetch signal."
LUCKY_FAILED = "Failed to fetch lucky picks."

T = TypeVar("T")


class Interaction:
    """Owns the single live interaction against one upstream client.

    Each operation bumps a generation counter when it starts; a response
    that arrives after a newer operation began is dropped.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        on_change: Callable[[InteractionState], None] | None = None,
    ) -> None:
        self._client = client
        self._on_change = on_change
        self._state = InteractionState()
        self._generation = 0

    @property
    def state(self) -> InteractionState:
        return self._state

    async def search(self, raw: str) -> InteractionState:
        try:
            query = validate_and_normalize(raw)
        except QueryValidationError as exc:
            logger.info("Rejected query %r: %s", raw, exc)
            self._generation += 1
            self._set(self._state.rejected(str(exc), exc))
            return self._state

        return await self._run(
            self._state.searching(query),
            lambda: resolve(query, self._client),
            InteractionState.resolved,
            SEARCH_FAILED,
        )

    async def fetch_signal(self) -> InteractionState:
        result = self._state.result
        if result is None:
            logger.debug("Signal requested with no resolved query; ignoring")
            return self._state

        symbol = select_symbol(result)
        if not symbol:
            logger.warning("Search result for %r has no usable symbol", result.query)
            return self._state

        return await self._run(
            self._state.fetching_signal(symbol),
            lambda: get_signal(symbol, self._client),
            InteractionState.showing_signal,
            SIGNAL_FAILED,
        )

    async def feeling_lucky(self) -> InteractionState:
        return await self._run(
            self._state.fetching_lucky(),
            lambda: get_lucky(self._client),
            InteractionState.showing_lucky,
            LUCKY_FAILED,
        )

    async def _run(
        self,
        start: InteractionState,
        call: Callable[[], Awaitable[T]],
        on_success: Callable[[InteractionState, T], InteractionState],
        failure_message: str,
    ) -> InteractionState:
        self._generation += 1
        generation = self._generation
        self._set(start)
        try:
            value = await call()
        except SignalDeskError as exc:
            logger.warning("%s (%s)", failure_message, exc)
            self._finish(generation, lambda s: s.failed(failure_message, exc))
        except Exception as exc:
            logger.exception("Unexpected error: %s", failure_message)
            self._finish(generation, lambda s: s.failed(failure_message, exc))
        else:
            self._finish(generation, lambda s: on_success(s, value))
        finally:
            # Cancellation must not leave the view stuck in a loading phase
            if generation == self._generation and self._state.loading:
                self._set(self._state.failed(failure_message))
        return self._state

    def _finish(
        self,
        generation: int,
        transition: Callable[[InteractionState], InteractionState],
    ) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale response (generation %d)", generation)
            return
        self._set(transition(self._state))

    def _set(self, state: InteractionState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
