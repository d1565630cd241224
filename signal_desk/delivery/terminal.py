"""Plain-text rendering of interaction and health state for the terminal."""

from datetime import datetime, timezone

from signal_desk.session.state import InteractionState
from signal_desk.upstream.health import HealthMonitor
from signal_desk.upstream.models import Signal

_ACTION_MARK = {"BUY": "▲", "SELL": "▼", "HOLD": "●"}


def format_utc(value: str) -> str:
    """Render an ISO timestamp as e.g. ``Oct 19, 2026, 2:05 PM UTC``.

    Naive timestamps are taken to be UTC. Anything unparseable is returned as-is.
    """
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year}, {hour}:{dt:%M} {dt:%p} UTC"


def render_health(monitor: HealthMonitor) -> str:
    if monitor.error:
        return f"Error: {monitor.error}"
    if monitor.state is None:
        return "Checking…"

    lines = [f"Health: {monitor.state.status}"]
    if monitor.state.server_time:
        meta = f"Server time: {format_utc(monitor.state.server_time)}"
        if monitor.state.version:
            meta += f" • API v{monitor.state.version}"
        lines.append(meta)
    return "\n".join(lines)


def render_signal(signal: Signal) -> str:
    mark = _ACTION_MARK.get(signal.action, "?")
    lines = [f"{mark} {signal.symbol}: {signal.action} (score {signal.score:g})"]
    lines.extend(f"  - {reason}" for reason in signal.reasons)
    return "\n".join(lines)


def render_state(state: InteractionState) -> str:
    lines: list[str] = []
    if state.loading:
        lines.append("Loading…")

    if state.result is not None:
        r = state.result
        lines.append(f"Resolved {r.query!r} as {r.type}: {r.normalized}")
        if r.suggestions:
            lines.append("Suggestions: " + ", ".join(r.suggestions))

    if state.signal is not None:
        lines.append(render_signal(state.signal))

    if state.lucky is not None:
        lines.append("Lucky picks:")
        lines.extend(render_signal(pick) for pick in state.lucky.picks)
        if state.lucky.note:
            lines.append(f"Note: {state.lucky.note}")

    if state.error:
        lines.append(f"Error: {state.error}")

    return "\n".join(lines)
