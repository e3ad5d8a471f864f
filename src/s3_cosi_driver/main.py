"""Main entry point for the S3 COSI driver."""

from __future__ import annotations

import logging
import os
import signal
import threading
from typing import Any

from kubernetes import client

from . import health
from . import logging as structured_logging
from .builders.provider import create_core_v1_api
from .constants import DEFAULT_DRIVER_NAME, KEY_LOCK_SIZE
from .provisioner import ProvisionerServer
from .tracing import initialize_tracing
from .utils.keylock import KeyMutexLock
from .utils.secrets import KubernetesSecretSource

logger = logging.getLogger(__name__)


def build_provisioner(api: client.CoreV1Api | None = None) -> ProvisionerServer:
    """Wire the provisioner from environment configuration.

    Environment Variables:
        DRIVER_NAME: Name reported to the control plane (default: cosi.huawei.com)
        KUBECONFIG_PATH: Kubeconfig file; empty means in-cluster configuration
        KEY_LOCK_SIZE: Number of bucket locks (default: 100)

    Args:
        api: Kubernetes core API client; built from KUBECONFIG_PATH if omitted
    """
    driver_name = os.getenv("DRIVER_NAME", DEFAULT_DRIVER_NAME)
    lock_size = int(os.getenv("KEY_LOCK_SIZE", str(KEY_LOCK_SIZE)))

    if api is None:
        api = create_core_v1_api(os.getenv("KUBECONFIG_PATH", ""))

    return ProvisionerServer(
        driver_name=driver_name,
        credentials=KubernetesSecretSource(api),
        key_lock=KeyMutexLock(lock_size),
    )


def main() -> None:
    """Start the driver and block until SIGTERM or SIGINT."""
    structured_logging.setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))
    initialize_tracing()

    ready = threading.Event()

    # Start metrics HTTP server with health check endpoints
    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    server = health.start_http_server(metrics_port, ready=ready.is_set)

    provisioner = build_provisioner()
    ready.set()

    stop = threading.Event()

    def _handle_signal(signum: int, _frame: Any) -> None:
        logger.info(f"Received signal {signal.Signals(signum).name}, shutting down")
        stop.set()

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    logger.info(f"Driver {provisioner.driver_get_info().name} started")
    stop.wait()
    server.shutdown()


if __name__ == "__main__":
    main()
