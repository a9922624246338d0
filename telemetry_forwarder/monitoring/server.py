"""
HTTP listener for /metrics and /healthz.

Runs in a daemon thread next to the asyncio publish loop and never touches
broker sessions; it only reads HealthState and the Prometheus registry.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import make_wsgi_app

from telemetry_forwarder.core.exceptions import ConfigurationError

from .health import HealthState
from .metrics import TelemetryMetrics

logger = logging.getLogger(__name__)


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class ObservabilityServer:
    """Serves Prometheus metrics and the liveness probe."""

    def __init__(self, health: HealthState, metrics: TelemetryMetrics,
                 host: str = "0.0.0.0", port: int = 8080):
        self.health = health
        self.metrics = metrics
        self.host = host
        self.port = port
        self._metrics_app = make_wsgi_app(metrics.registry)
        self._server: Optional[WSGIServer] = None
        self._thread: Optional[threading.Thread] = None

    def __call__(self, environ, start_response):
        path = environ.get("PATH_INFO", "/")
        if path == "/metrics":
            return self._metrics_app(environ, start_response)
        if path == "/healthz":
            if self.health.healthy:
                start_response("200 OK", [("Content-Type", "text/plain")])
                return [b"OK"]
            start_response("500 Internal Server Error", [("Content-Type", "text/plain")])
            return [b""]
        start_response("404 Not Found", [("Content-Type", "text/plain")])
        return [b"not found"]

    def start(self) -> None:
        if self._thread is not None:
            logger.warning("Observability server already running")
            return
        try:
            self._server = make_server(self.host, self.port, self, handler_class=_QuietHandler)
        except OSError as e:
            raise ConfigurationError(
                f"cannot listen on {self.host}:{self.port}: {e}"
            ) from e
        self.port = self._server.server_port
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="observability-http", daemon=True
        )
        self._thread.start()
        logger.info(f"Serving /metrics and /healthz on {self.host}:{self.port}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
        logger.info("Observability server stopped")
