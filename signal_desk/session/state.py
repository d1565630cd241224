"""Immutable snapshot of the single active user interaction.

Every transition returns a new :class:`InteractionState`; nothing is cleared
piecemeal, so a half-reset view (old signal next to a new error) cannot exist.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from signal_desk.upstream.models import LuckyResponse, SearchResult, Signal


class Phase(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESOLVED = "resolved"
    FETCHING = "fetching"
    DISPLAYING = "displaying"
    FAILED = "failed"


@dataclass(frozen=True)
class InteractionState:
    phase: Phase = Phase.IDLE
    query: str | None = None  # normalized query last sent upstream
    result: SearchResult | None = None
    symbol: str | None = None  # symbol the current signal request was made for
    signal: Signal | None = None
    lucky: LuckyResponse | None = None
    error: str | None = None
    failure: Exception | None = None  # underlying error, for diagnostics

    @property
    def loading(self) -> bool:
        return self.phase in (Phase.SEARCHING, Phase.FETCHING)

    @property
    def status_code(self) -> int | None:
        """HTTP status of the last upstream failure, if there was one."""
        return getattr(self.failure, "status", None)

    # --- transitions ---

    def rejected(self, message: str, failure: Exception | None = None) -> InteractionState:
        """Input failed local validation; nothing was sent."""
        return InteractionState(phase=Phase.FAILED, error=message, failure=failure)

    def searching(self, query: str) -> InteractionState:
        return InteractionState(phase=Phase.SEARCHING, query=query)

    def resolved(self, result: SearchResult) -> InteractionState:
        return InteractionState(phase=Phase.RESOLVED, query=self.query, result=result)

    def fetching_signal(self, symbol: str) -> InteractionState:
        # The search result survives so the same symbol can be asked for again
        return InteractionState(
            phase=Phase.FETCHING, query=self.query, result=self.result, symbol=symbol
        )

    def fetching_lucky(self) -> InteractionState:
        return InteractionState(phase=Phase.FETCHING)

    def showing_signal(self, signal: Signal) -> InteractionState:
        return replace(self, phase=Phase.DISPLAYING, signal=signal, lucky=None)

    def showing_lucky(self, lucky: LuckyResponse) -> InteractionState:
        return replace(self, phase=Phase.DISPLAYING, lucky=lucky, signal=None)

    def failed(self, message: str, failure: Exception | None = None) -> InteractionState:
        return replace(
            self,
            phase=Phase.FAILED,
            signal=None,
            lucky=None,
            error=message,
            failure=failure,
        )
