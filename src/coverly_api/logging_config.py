"""Logging setup for the gateway process."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)s: %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handlers installed by setup_logging, removed again on the next call
_installed_handlers: list[logging.Handler] = []


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger with a console handler and an optional file handler.

    Calling it again replaces the handlers installed by a previous call,
    so the lifespan can run more than once in tests.

    Args:
        level: Log level name for the root logger (e.g. "INFO", "DEBUG")
        log_file: Optional path of a rotating log file
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    while _installed_handlers:
        handler = _installed_handlers.pop()
        logger.removeHandler(handler)
        handler.close()

    # Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    # File Handler
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    logging.getLogger(__name__).info(
        "Logging initialized (level=%s, file=%s)", level.upper(), log_file or "-"
    )
