"""Base handler class with common functionality for all driver operations."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..exceptions import ProvisionerError, RequestValidationError
from ..logging import log_request_event
from ..utils.errors import sanitize_exception

T = TypeVar("T")


class BaseHandler:
    """Base class for driver operation handlers."""

    def __init__(self, operation: str):
        """Initialize base handler.

        Args:
            operation: Operation name used in logs and metric labels
        """
        self.operation = operation
        self.logger = logging.getLogger(type(self).__module__)

    def log_info(self, message: str, event: str = "info", **kwargs: Any) -> None:
        """Log an info-level structured log message."""
        log_request_event(self.logger, self.operation, event, message, **kwargs)

    def log_error(
        self,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__

        log_request_event(self.logger, self.operation, event, message, level=logging.ERROR, **log_data)

    def require(self, condition: Any, message: str) -> None:
        """Reject the request with ``message`` unless ``condition`` holds.

        Raises:
            RequestValidationError: If ``condition`` is falsy
        """
        if not condition:
            raise RequestValidationError(message)

    def run_with_metrics(self, fn: Callable[[], T]) -> T:
        """Execute an operation with metrics and error handling.

        Any failure is logged with a sanitized message and re-raised as
        :class:`ProvisionerError`.

        Args:
            fn: Operation body

        Returns:
            Result of ``fn``
        """
        metrics.request_total.labels(operation=self.operation, result="started").inc()
        start_time = time.time()
        try:
            result = fn()
        except Exception as e:
            sanitized_error = sanitize_exception(e)
            metrics.error_total.labels(operation=self.operation, error_type=type(e).__name__).inc()
            metrics.request_total.labels(operation=self.operation, result="error").inc()
            self.log_error(f"{self.operation} failed", error=e, event="failed")
            if isinstance(e, ProvisionerError):
                raise
            raise ProvisionerError(f"{self.operation} failed: {sanitized_error}") from e
        finally:
            duration = time.time() - start_time
            metrics.request_duration_seconds.labels(operation=self.operation).observe(duration)

        metrics.request_total.labels(operation=self.operation, result="success").inc()
        return result
