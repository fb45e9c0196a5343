"""Runtime configuration for bussnote.

Values come from environment variables so the CLI and tests can point the
application at a different database or log level without code changes.
"""

import logging
import logging.config
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

DB_PATH_ENV = "BUSSNOTE_DB_PATH"
LOG_LEVEL_ENV = "BUSSNOTE_LOG_LEVEL"

DEFAULT_DB_DIR = Path.home() / ".bussnote"
DEFAULT_DB_NAME = "bussnote.db"

HOME_CURRENCY = "INR"
CURRENCIES = ("INR", "USD", "EUR", "GBP", "AED", "CAD")
TERMS_OPTIONS = ("Days", "Days Fix", "Days D/A", "Days B/D", "Days A/D")

# Draft defaults
DEFAULT_DUE_DAYS = 15
DEFAULT_TERMS = "Days"
DEFAULT_BROKERAGE_RATE = Decimal("0.75")
DEFAULT_EXCHANGE_RATE = Decimal("1.00")

INVOICE_NUMBER_PREFIX = "INV"
INVOICE_NUMBER_WIDTH = 4

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": LOG_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "bussnote": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def default_database_path() -> str:
    """Return the database path from BUSSNOTE_DB_PATH or the home default."""
    path = os.environ.get(DB_PATH_ENV)
    if path:
        return path
    DEFAULT_DB_DIR.mkdir(exist_ok=True)
    return str(DEFAULT_DB_DIR / DEFAULT_DB_NAME)


def configure_logging(level: Optional[str] = None) -> None:
    """Apply LOGGING_CONFIG with the requested level.

    Args:
        level: Level name such as "INFO". Falls back to BUSSNOTE_LOG_LEVEL,
            then WARNING.

    Raises:
        ValueError: If the level name is not a logging level
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ValueError(f"Unknown log level '{level_name}'")

    config = dict(LOGGING_CONFIG)
    config["loggers"] = {"bussnote": {**LOGGING_CONFIG["loggers"]["bussnote"], "level": level_name}}
    logging.config.dictConfig(config)
