"""
Scrape ID management for log correlation.
Every scrape gets its own ID so the log lines of one fetch/parse/emit
sequence can be told apart from the next.
"""
import uuid
import logging
from typing import Optional
from contextvars import ContextVar

_scrape_id_var: ContextVar[Optional[str]] = ContextVar(
    'scrape_id', default=None
)


def generate_scrape_id() -> str:
    """
    Generate a new unique scrape ID.

    Returns:
        UUID4 string (e.g., "a1b2c3d4-e5f6-7890-abcd-ef1234567890")
    """
    return str(uuid.uuid4())


def set_scrape_id(scrape_id: str) -> None:
    _scrape_id_var.set(scrape_id)


def get_scrape_id() -> Optional[str]:
    return _scrape_id_var.get()


def clear_scrape_id() -> None:
    _scrape_id_var.set(None)


class ScrapeFilter(logging.Filter):
    """
    Logging filter that injects scrape_id into log records.
    Reads from ContextVar, so every log statement made while a scrape is
    running carries its ID without explicit passing.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.scrape_id = get_scrape_id() or ""
        return True


class ScrapeContext:
    """
    Context manager that sets a scrape ID for the duration of one scrape.
    Restores the previous ID on exit.

    Usage:
        with ScrapeContext() as ctx:
            logger.info("fetching")   # carries ctx.scrape_id
    """

    def __init__(self, scrape_id: Optional[str] = None):
        self.scrape_id = scrape_id or generate_scrape_id()
        self._previous_id: Optional[str] = None

    def __enter__(self) -> 'ScrapeContext':
        self._previous_id = get_scrape_id()
        set_scrape_id(self.scrape_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._previous_id is not None:
            set_scrape_id(self._previous_id)
        else:
            clear_scrape_id()
