"""Structured logging configuration for the S3 COSI driver."""

import json
import logging
import sys
from typing import Any

from .constants import CONTROLLER
from .utils.context import get_context_dict
from .utils.errors import sanitize_dict


def setup_structured_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on stdout.

    Args:
        level: Root log level name; unknown names fall back to INFO
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # botocore logs request bodies at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_request_event(
    logger: logging.Logger,
    operation: str,
    event: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured request event as one JSON object.

    The correlation id of the current request is added automatically and
    extra fields are sanitized.
    """
    log_data = {
        "controller": CONTROLLER,
        "operation": operation,
        "event": event,
        "message": message,
    }
    log_data.update(get_context_dict())
    log_data.update(sanitize_secrets(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Remove secret fields from log data."""
    return sanitize_dict(log_data)
