"""
Monitoring module - exporter self-metrics.
"""
from src.monitoring.metrics import (
    ExporterMetrics,
    get_exporter_metrics,
    reset_metrics,
)

__all__ = [
    "ExporterMetrics",
    "get_exporter_metrics",
    "reset_metrics",
]
