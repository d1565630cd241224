"""Pydantic models for the upstream signal service payloads."""

from typing import Literal

from pydantic import BaseModel, field_validator


class SearchResult(BaseModel):
    """How the upstream interpreted a search query."""

    query: str  # exactly what was sent upstream
    normalized: str
    type: Literal["ticker", "company"]
    suggestions: list[str] = []  # best match first; upstream omits it for tickers

    @field_validator("suggestions", mode="before")
    @classmethod
    def _null_suggestions(cls, value):
        return [] if value is None else value


class Signal(BaseModel):
    symbol: str
    action: Literal["BUY", "SELL", "HOLD"]
    score: float  # upstream-defined scale
    reasons: list[str]


class LuckyResponse(BaseModel):
    """A batch of signals. Duplicate symbols are the upstream's problem."""

    picks: list[Signal]
    note: str


class HealthState(BaseModel):
    status: str | None = None
    server_time: str | None = None
    version: str | None = None
