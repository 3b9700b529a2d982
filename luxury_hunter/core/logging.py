"""
Logging configuration for Luxury Hunter.

Modules log through get_logger("fusion.engine") -> "luxury_hunter.fusion.engine".
Nothing is configured at import time; the entry point calls setup_logging()
once with the configured level.
"""
import logging
import sys
from typing import Optional, TextIO

from luxury_hunter.core.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# httpx logs every model-service request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _parse_level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return value


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Setup application logging."""
    numeric_level = _parse_level(level)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(stream or sys.stdout)
        ]
    )

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger("luxury_hunter")
    logger.setLevel(numeric_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance."""
    if name:
        return logging.getLogger(f"luxury_hunter.{name}")
    return logging.getLogger("luxury_hunter")
