"""Process-wide logging setup."""

import logging
import sys

from signal_desk.config import settings

_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once. Safe to call repeatedly."""
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    # Prevent duplicate handlers on repeated calls
    if not any(getattr(h, "_signal_desk", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        handler._signal_desk = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
