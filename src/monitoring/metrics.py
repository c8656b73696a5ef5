"""
Exporter self-metrics.

Counters, a histogram and build info describing the exporter's own scrape
activity. They live in the default registry next to the process and
platform collectors that prometheus_client installs on import.

Usage:
    from src.monitoring.metrics import get_exporter_metrics

    metrics = get_exporter_metrics()
    with metrics.scrape_timer():
        ...
    metrics.inc_scrape_error("fetch")
"""
import threading
from typing import Optional

from prometheus_client import Counter, Histogram, Info

from src import __version__

# ---------------------------------------------------------------------------
# Prometheus metric definitions (module-level singletons)
# ---------------------------------------------------------------------------

SCRAPE_STAGES = ("fetch", "parse", "header", "data_row")
SKIP_REASONS = ("out_of_bounds", "invalid_hex")

# -- Counters --
SCRAPES_TOTAL = Counter(
    "panasonic_exporter_scrapes_total",
    "Total number of breaker box scrapes attempted",
)

SCRAPE_ERRORS_TOTAL = Counter(
    "panasonic_exporter_scrape_errors_total",
    "Total number of scrapes that produced no readings, by failing stage",
    ["stage"],
)

READINGS_SKIPPED_TOTAL = Counter(
    "panasonic_exporter_readings_skipped_total",
    "Total number of mapping entries skipped during a scrape, by reason",
    ["reason"],
)

# -- Histograms --
SCRAPE_DURATION = Histogram(
    "panasonic_exporter_scrape_duration_seconds",
    "Duration of a breaker box fetch/parse/emit sequence in seconds",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# -- Info --
BUILD_INFO = Info(
    "panasonic_exporter_build",
    "Panasonic exporter build / version info",
)

# Pre-create label children so every series is exported from the start
for _stage in SCRAPE_STAGES:
    SCRAPE_ERRORS_TOTAL.labels(stage=_stage)
for _reason in SKIP_REASONS:
    READINGS_SKIPPED_TOTAL.labels(reason=_reason)


class ExporterMetrics:
    """
    Convenience wrapper around the self-metrics.

    All methods are thread-safe (Prometheus client handles it).
    """

    def __init__(self) -> None:
        BUILD_INFO.info({
            "version": __version__,
            "component": "panasonic_exporter",
        })

    def inc_scrapes(self) -> None:
        SCRAPES_TOTAL.inc()

    def inc_scrape_error(self, stage: str) -> None:
        """
        Count a scrape that yielded no readings.

        Args:
            stage: one of "fetch", "parse", "header", "data_row"
        """
        SCRAPE_ERRORS_TOTAL.labels(stage=stage).inc()

    def inc_skipped(self, reason: str) -> None:
        """
        Count a skipped mapping entry.

        Args:
            reason: one of "out_of_bounds", "invalid_hex"
        """
        READINGS_SKIPPED_TOTAL.labels(reason=reason).inc()

    def scrape_timer(self):
        """
        Return a context-manager that measures scrape duration.

        Usage:
            with metrics.scrape_timer():
                collector.scrape()
        """
        return SCRAPE_DURATION.time()

    # -- Accessors for testing ----------------------------------------------

    @staticmethod
    def get_scrapes_total() -> float:
        return SCRAPES_TOTAL._value.get()

    @staticmethod
    def get_scrape_errors(stage: str) -> float:
        return SCRAPE_ERRORS_TOTAL.labels(stage=stage)._value.get()

    @staticmethod
    def get_skipped(reason: str) -> float:
        return READINGS_SKIPPED_TOTAL.labels(reason=reason)._value.get()


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

_exporter_metrics: Optional[ExporterMetrics] = None
_metrics_lock = threading.Lock()


def get_exporter_metrics() -> ExporterMetrics:
    """
    Return the singleton ``ExporterMetrics`` instance.
    Creates one on first call (thread-safe).
    """
    global _exporter_metrics
    if _exporter_metrics is None:
        with _metrics_lock:
            if _exporter_metrics is None:
                _exporter_metrics = ExporterMetrics()
    return _exporter_metrics


def reset_metrics() -> None:
    """
    Reset all self-metric counters to zero.
    Useful in test suites to get deterministic values.
    """
    global _exporter_metrics
    SCRAPES_TOTAL._value.set(0)
    for stage in SCRAPE_STAGES:
        SCRAPE_ERRORS_TOTAL.labels(stage=stage)._value.set(0)
    for reason in SKIP_REASONS:
        READINGS_SKIPPED_TOTAL.labels(reason=reason)._value.set(0)

    _exporter_metrics = None
