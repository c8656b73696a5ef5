#!/usr/bin/env python3
"""
Panasonic Exporter - Prometheus exporter for Panasonic breaker box energy data.
Reads the breaker box CSV on every scrape and republishes the configured
circuits as panasonic_power_watts gauges.
"""
import sys
import argparse
from typing import List, Optional, Tuple

from prometheus_client import REGISTRY

from config.settings import Settings, load_settings
from src.breaker.client import BreakerBoxClient
from src.breaker.collector import PanasonicCollector
from src.common.exceptions import ConfigurationError
from src.common.http_server import ExporterServer
from src.common.logging_config import configure_logging, get_logger
from src.common.shutdown import ShutdownManager

logger = get_logger("exporter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Panasonic Exporter - expose breaker box power readings to Prometheus"
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file (default: ./.env if present)"
    )
    parser.add_argument(
        "--listen-address",
        default=None,
        help="Bind address (default: PANASONIC_LISTEN_ADDRESS or 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (default: PANASONIC_LISTEN_PORT or 9190)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)"
    )
    return parser


def create_collector(settings: Settings) -> Tuple[BreakerBoxClient, PanasonicCollector]:
    """Build the breaker box client and the collector that owns it."""
    client = BreakerBoxClient(
        url=settings.panasonic.url,
        timeout=settings.panasonic.timeout_seconds
    )
    collector = PanasonicCollector(client, settings.panasonic.mappings)
    return client, collector


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.env_file)
        configure_logging(
            args.log_level or settings.logging.level,
            settings.logging.format
        )
    except (ConfigurationError, ValueError) as e:
        logger.critical(f"Error: {e}")
        sys.exit(1)

    client, collector = create_collector(settings)
    REGISTRY.register(collector)

    server = ExporterServer(
        address=args.listen_address or settings.panasonic.listen_address,
        port=args.port if args.port is not None else settings.panasonic.listen_port,
        registry=REGISTRY
    )
    try:
        server.start()
    except OSError as e:
        logger.critical(f"Error: Could not start HTTP server: {e}")
        client.close()
        sys.exit(1)

    shutdown = ShutdownManager()
    shutdown.register(server.stop, priority=0, name="http")
    shutdown.register(client.close, priority=10, name="breaker-box-session")
    shutdown.install_signal_handlers()

    logger.info(
        f"Exporter starting. Tracking {len(settings.panasonic.mappings)} circuits "
        f"from {settings.panasonic.url}"
    )
    shutdown.wait_for_shutdown()

    logger.info("Exporter terminated")
    sys.exit(0)


if __name__ == "__main__":
    main()
