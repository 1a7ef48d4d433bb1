from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s:     %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # uvicorn only configures its own loggers
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("metgen").setLevel(level.upper())
    logging.getLogger("httpx").setLevel(logging.WARNING)
