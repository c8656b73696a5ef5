"""Prometheus exporter for Panasonic breaker box energy data."""

__version__ = "1.0.0"
