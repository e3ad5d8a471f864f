"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

from s3_cosi_driver import metrics  # noqa: F401  registers the driver metrics
from s3_cosi_driver.health import create_combined_wsgi_app


def _environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "SERVER_PROTOCOL": "HTTP/1.1",
        "QUERY_STRING": "",
        "wsgi.url_scheme": "http",
        "wsgi.input": MagicMock(),
    }


class TestCombinedWsgiApp:
    """Test cases for create_combined_wsgi_app."""

    def test_healthz(self):
        start_response = MagicMock()
        body = b"".join(create_combined_wsgi_app()(_environ("/healthz"), start_response))

        assert b'"status":"ok"' in body
        assert "200" in start_response.call_args[0][0]

    def test_readyz(self):
        start_response = MagicMock()
        body = b"".join(create_combined_wsgi_app()(_environ("/readyz"), start_response))

        assert b'"status":"ready"' in body
        assert "200" in start_response.call_args[0][0]

    def test_readyz_not_ready(self):
        start_response = MagicMock()
        app = create_combined_wsgi_app(ready=lambda: False)
        body = b"".join(app(_environ("/readyz"), start_response))

        assert b"not ready" in body
        assert "503" in start_response.call_args[0][0]

    def test_metrics(self):
        start_response = MagicMock()
        body = b"".join(create_combined_wsgi_app()(_environ("/metrics"), start_response))

        assert "200" in start_response.call_args[0][0]
        assert b"s3_cosi_driver_request_total" in body
