"""Logging configuration for the wallet packages."""

from __future__ import annotations

import logging
import sys

from wallet_config.settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "asyncpg")


def configure_logging(settings: Settings) -> None:
    """Configure application logging.

    Sets up console logging with timestamps and module names, applies the
    configured level to the wallet packages and keeps noisy third-party
    loggers at WARNING.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger("wallet_identity").setLevel(log_level)
    logging.getLogger("wallet_config").setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
