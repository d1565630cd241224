"""Terminal front-end.

Usage:
    signal-desk health
    signal-desk search "tesla" --signal
    signal-desk lucky
    signal-desk serve
"""

import argparse
import asyncio
import logging

from signal_desk.delivery.terminal import render_health, render_state
from signal_desk.errors import ConfigurationError
from signal_desk.session.controller import Interaction
from signal_desk.session.state import InteractionState, Phase
from signal_desk.upstream.base import create_client
from signal_desk.upstream.health import HealthMonitor
from signal_desk.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="signal-desk", description="Search + signals demo")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="check upstream reachability")

    search = sub.add_parser("search", help="resolve a ticker or company name")
    search.add_argument("query", nargs="+")
    search.add_argument("--signal", action="store_true", help="also fetch the signal")

    sub.add_parser("lucky", help="fetch lucky picks")
    sub.add_parser("serve", help="run the API relay")
    return parser


async def _health() -> int:
    async with create_client() as client:
        monitor = HealthMonitor(client)
        await monitor.wait()
    print(render_health(monitor))
    return 0 if monitor.state is not None else 1


async def _interact(command: str, query: str = "", with_signal: bool = False) -> int:
    async with create_client() as client:
        monitor = HealthMonitor(client)
        monitor.start()
        interaction = Interaction(client)
        try:
            if command == "lucky":
                state = await interaction.feeling_lucky()
            else:
                state = await interaction.search(query)
                if with_signal and state.result is not None:
                    state = await interaction.fetch_signal()
        finally:
            await monitor.close()

    if not monitor.checking:
        print(render_health(monitor))
    print(render_state(state))
    return _exit_code(state)


def _exit_code(state: InteractionState) -> int:
    return 1 if state.phase is Phase.FAILED else 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "serve":
        from signal_desk.main import run_server

        run_server()
        return 0

    try:
        if args.command == "health":
            return asyncio.run(_health())
        return asyncio.run(
            _interact(
                args.command,
                " ".join(getattr(args, "query", [])),
                getattr(args, "signal", False),
            )
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
