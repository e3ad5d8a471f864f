"""Health check and metrics endpoints for the driver."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from prometheus_client import make_wsgi_app
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Response

logger = logging.getLogger(__name__)


def create_combined_wsgi_app(ready: Callable[[], bool] | None = None) -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Args:
        ready: Optional readiness probe; ``/readyz`` answers 503 while it
            returns False

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> Any:
        """Route /healthz and /readyz, delegate everything else to prometheus."""
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        if path == "/readyz":
            if ready is not None and not ready():
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            else:
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app


def start_http_server(port: int, ready: Callable[[], bool] | None = None) -> BaseWSGIServer:
    """Serve health and metrics endpoints on ``port`` in a daemon thread.

    Returns:
        The running server; call ``shutdown()`` to stop it
    """
    server = make_server("", port, create_combined_wsgi_app(ready), threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="health-server", daemon=True)
    thread.start()
    logger.info(f"Serving /metrics, /healthz and /readyz on port {port}")
    return server
