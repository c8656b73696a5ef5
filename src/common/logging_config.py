"""
Structured logging configuration.
JSON lines by default, plain text on request, with scrape ID support.
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Dict, Optional

from src.common.correlation import ScrapeFilter

TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_defaults: Dict[str, str] = {"level": "INFO", "format": "json"}
_configured: set = set()


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging with scrape tracking"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        # Injected by ScrapeFilter
        scrape_id = getattr(record, 'scrape_id', None)
        if scrape_id:
            log_data['scrape_id'] = scrape_id

        if hasattr(record, 'entity'):
            log_data['entity'] = record.entity

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt.lower() == "text":
        return logging.Formatter(TEXT_FORMAT)
    return JSONFormatter()


def setup_logging(
    name: str,
    level: Optional[str] = None,
    fmt: Optional[str] = None
) -> logging.Logger:
    """
    Configure structured logging for a component.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Output format, "json" or "text"

    Returns:
        Configured logger instance with scrape filter
    """
    level = level or _defaults["level"]
    fmt = fmt or _defaults["format"]

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(fmt))
    logger.addHandler(handler)

    if not any(isinstance(f, ScrapeFilter) for f in logger.filters):
        logger.addFilter(ScrapeFilter())

    logger.propagate = False
    _configured.add(name)

    return logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger with optional level override.

    Args:
        name: Logger name
        level: Optional log level override

    Returns:
        Logger instance with scrape filter
    """
    if level:
        return setup_logging(name, level)

    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logging(name)

    if not any(isinstance(f, ScrapeFilter) for f in logger.filters):
        logger.addFilter(ScrapeFilter())

    return logger


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Apply level and format to every logger created so far and make them
    the defaults for loggers created later.

    Raises:
        ValueError: If level is not a known logging level name
    """
    if not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"Unknown log level: {level}")

    _defaults["level"] = level.upper()
    _defaults["format"] = fmt
    for name in list(_configured):
        setup_logging(name)
