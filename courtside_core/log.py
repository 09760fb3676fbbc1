from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
PACKAGE_LOGGERS = ("courtside_core", "courtside_store", "courtside_web", "courtside_reports")

_handler: logging.Handler | None = None


def configure_logging(level: str | int = "INFO") -> None:
    global _handler
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        for name in PACKAGE_LOGGERS:
            logging.getLogger(name).addHandler(_handler)
    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(level)
