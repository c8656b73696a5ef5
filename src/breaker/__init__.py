"""
Breaker box module - fetches the device CSV and turns it into power readings.
"""
from src.breaker.client import BreakerBoxClient
from src.breaker.collector import PanasonicCollector
from src.breaker.readings import PowerReading, extract_readings, friendly_name
from src.breaker.snapshot import HEADER_MARKER, parse_snapshot, select_data_row

__all__ = [
    "BreakerBoxClient",
    "PanasonicCollector",
    "PowerReading",
    "extract_readings",
    "friendly_name",
    "HEADER_MARKER",
    "parse_snapshot",
    "select_data_row",
]
