from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from signal_desk import __version__
from signal_desk.config import Settings, settings as default_settings
from signal_desk.upstream.base import create_client
from signal_desk.web.routes import router


def create_app(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if app.state.upstream is not None:
            await app.state.upstream.aclose()

    app = FastAPI(title="Signal Desk Relay", version=__version__, lifespan=lifespan)
    app.state.settings = config
    app.state.upstream = (
        create_client(config, transport=transport) if config.upstream_base else None
    )
    app.include_router(router)
    return app
