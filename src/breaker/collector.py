"""
Prometheus collector for the Panasonic breaker box.

Every scrape of /metrics triggers one fetch of the device CSV, which is
parsed and turned into one ``panasonic_power_watts`` sample per configured
circuit. Nothing is cached between scrapes, and a failing scrape yields an
empty family instead of an HTTP error.
"""
import threading
from typing import Iterator, List, Mapping, Optional

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from src.breaker.client import BreakerBoxClient
from src.breaker.readings import PowerReading, extract_readings
from src.breaker.snapshot import parse_snapshot, select_data_row
from src.common.correlation import ScrapeContext
from src.common.exceptions import (
    ColumnOutOfRangeError,
    DataRowMissingError,
    FetchError,
    HeaderNotFoundError,
    ReadingError,
    SnapshotParseError,
)
from src.common.logging_config import get_logger
from src.monitoring.metrics import ExporterMetrics, get_exporter_metrics

logger = get_logger(__name__)

NAMESPACE = "panasonic"
POWER_METRIC = f"{NAMESPACE}_power_watts"
POWER_HELP = "Current power consumption in Watts."
POWER_LABELS = ["entity", "friendly_name"]


class PanasonicCollector(Collector):
    """
    Custom collector that reads the breaker box on demand.

    Scrapes are serialized: a scrape arriving while another one is running
    waits for it to finish, so fetch/parse/emit sequences never interleave.

    Usage:
        collector = PanasonicCollector(client, settings.panasonic.mappings)
        REGISTRY.register(collector)
    """

    def __init__(
        self,
        client: BreakerBoxClient,
        mappings: Mapping[str, int],
        metrics: Optional[ExporterMetrics] = None
    ):
        """
        Initialize collector.

        Args:
            client: Breaker box HTTP client
            mappings: Entity name -> CSV column index (read-only)
            metrics: Self-metrics sink (defaults to the process singleton)
        """
        self.client = client
        self.mappings = mappings
        self.metrics = metrics or get_exporter_metrics()
        self._lock = threading.Lock()

    def describe(self) -> Iterator[GaugeMetricFamily]:
        # Registration must not hit the device
        yield GaugeMetricFamily(POWER_METRIC, POWER_HELP, labels=POWER_LABELS)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        family = GaugeMetricFamily(POWER_METRIC, POWER_HELP, labels=POWER_LABELS)
        for reading in self.scrape():
            family.add_metric([reading.entity, reading.friendly_name], reading.watts)
        yield family

    def scrape(self) -> List[PowerReading]:
        """
        Run one fetch/parse/extract sequence.

        Returns:
            Readings for every mapping entry that could be decoded; empty
            when the device could not be read or the body is unusable
        """
        with self._lock, ScrapeContext() as ctx:
            self.metrics.inc_scrapes()
            with self.metrics.scrape_timer():
                readings = self._scrape_locked()
            logger.debug(
                f"Scrape {ctx.scrape_id} produced {len(readings)}/"
                f"{len(self.mappings)} readings"
            )
            return readings

    def _scrape_locked(self) -> List[PowerReading]:
        try:
            body = self.client.fetch()
        except FetchError as e:
            logger.error(str(e))
            self.metrics.inc_scrape_error("fetch")
            return []

        try:
            rows = parse_snapshot(body)
            data_row = select_data_row(rows)
        except HeaderNotFoundError as e:
            logger.error(str(e))
            self.metrics.inc_scrape_error("header")
            return []
        except DataRowMissingError as e:
            logger.error(str(e))
            self.metrics.inc_scrape_error("data_row")
            return []
        except SnapshotParseError as e:
            logger.error(str(e))
            self.metrics.inc_scrape_error("parse")
            return []

        return extract_readings(data_row, self.mappings, on_skip=self._record_skip)

    def _record_skip(self, error: ReadingError) -> None:
        if isinstance(error, ColumnOutOfRangeError):
            self.metrics.inc_skipped("out_of_bounds")
        else:
            self.metrics.inc_skipped("invalid_hex")
