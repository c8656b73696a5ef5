"""
HTTP server for the exporter endpoints.
Runs in a separate thread; every request is handled on its own thread.

Endpoints:
    GET /metrics - Prometheus exposition of the registry (always 200)
    GET /health  - Liveness: process is alive
    GET <other>  - Static landing page linking to /metrics
"""
import json
import threading
import time
from datetime import datetime, timezone
from http.server import ThreadingHTTPServer, BaseHTTPRequestHandler
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from prometheus_client import REGISTRY, CollectorRegistry
from prometheus_client.exposition import choose_encoder

from src.common.logging_config import get_logger

logger = get_logger(__name__)

LANDING_PAGE = b"""<html>
<head><title>Panasonic Exporter</title></head>
<body>
<h1>Panasonic Breaker Box Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


class ExporterHTTPHandler(BaseHTTPRequestHandler):
    """HTTP request handler for exporter endpoints."""

    # Class-level references (set by ExporterServer)
    registry: CollectorRegistry = REGISTRY
    start_time: float = 0.0

    def do_GET(self):
        path = urlparse(self.path).path

        if path == "/metrics":
            self._send_metrics()

        elif path == "/health":
            self._send_json(200, {
                "status": "alive",
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
            })

        else:
            self._send(200, "text/html; charset=utf-8", LANDING_PAGE)

    def _send_metrics(self):
        encoder, content_type = choose_encoder(self.headers.get("Accept", ""))
        self._send(200, content_type, encoder(self.registry))

    def _send_json(self, status_code: int, data: Dict[str, Any]):
        body = json.dumps(data, indent=2).encode("utf-8")
        self._send(status_code, "application/json", body)

    def _send(self, status_code: int, content_type: str, body: bytes):
        self.send_response(status_code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


class ExporterServer:
    """
    Threaded HTTP server for the exporter.
    Serves from a daemon thread so it doesn't block shutdown.

    Usage:
        server = ExporterServer(port=9190)
        server.start()
        # ... wait for shutdown ...
        server.stop()
    """

    def __init__(
        self,
        address: str = "0.0.0.0",
        port: int = 9190,
        registry: CollectorRegistry = REGISTRY
    ):
        """
        Initialize exporter server.

        Args:
            address: Bind address
            port: HTTP port to listen on (0 picks a free port)
            registry: Registry exposed on /metrics
        """
        self.address = address
        self.port = port
        self.registry = registry
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """
        Bind and start serving in a daemon thread.

        Raises:
            OSError: If the address cannot be bound
        """
        handler = type(
            'BoundExporterHandler',
            (ExporterHTTPHandler,),
            {'registry': self.registry, 'start_time': time.time()}
        )

        self._server = ThreadingHTTPServer((self.address, self.port), handler)
        self._server.daemon_threads = True
        self.port = self._server.server_address[1]
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            name="exporter-http",
            daemon=True
        )
        self._thread.start()
        logger.info(f"Exporter listening on {self.address}:{self.port}")

    def stop(self) -> None:
        """Stop serving and release the socket."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            logger.info("Exporter HTTP server stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
