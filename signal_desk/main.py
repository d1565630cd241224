import logging

import uvicorn

from signal_desk.config import settings
from signal_desk.utils.logging import setup_logging
from signal_desk.web.app import create_app

logger = logging.getLogger(__name__)


def run_server() -> None:
    setup_logging()
    if not settings.upstream_base:
        logger.warning("API_BASE not set; relay will answer 503 until configured")
    logger.info(
        "Starting relay on %s:%d -> %s",
        settings.web_host,
        settings.web_port,
        settings.upstream_base or "(none)",
    )
    uvicorn.run(
        create_app(),
        host=settings.web_host,
        port=settings.web_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
