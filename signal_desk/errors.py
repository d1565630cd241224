"""Error taxonomy shared by the query, upstream and session layers."""


class SignalDeskError(Exception):
    """Base class for every failure the interaction layer knows how to display."""


# --- Local validation (never reaches the network) ---

class QueryValidationError(SignalDeskError):
    message = "Invalid query."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class EmptyQuery(QueryValidationError):
    message = "Query cannot be empty."


class QueryTooLong(QueryValidationError):
    message = "Query too long."


class InvalidCharacters(QueryValidationError):
    message = "Query contains invalid characters."


# --- Upstream ---

class UpstreamFailure(SignalDeskError):
    """Any failure talking to the signal service."""


class UpstreamError(UpstreamFailure):
    """The upstream answered with a non-2xx status."""

    def __init__(self, status: int, path: str = "") -> None:
        self.status = status
        self.path = path
        super().__init__(f"HTTP {status}" + (f" from {path}" if path else ""))


class TransportError(UpstreamFailure):
    """Network unreachable, connection reset or timeout."""


class MalformedResponse(UpstreamFailure):
    """2xx response whose body does not match the expected schema."""


class ConfigurationError(SignalDeskError):
    """Required setting missing (e.g. API_BASE)."""
