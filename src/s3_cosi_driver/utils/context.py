"""Request correlation ids and trace context."""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace

# Context variable for storing correlation ID
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str | None:
    """Get the correlation ID from the current context.

    Returns:
        Correlation ID if set, None otherwise
    """
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str | None = None) -> Iterator[str]:
    """Context manager to set a correlation ID for the duration of a block.

    Args:
        corr_id: Correlation ID to use; a new one is generated if omitted

    Yields:
        The correlation ID
    """
    if corr_id is None:
        corr_id = new_correlation_id()
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get a dictionary of context values.

    Args:
        additional: Additional key-value pairs to include

    Returns:
        Dictionary with context values including correlation_id, trace_id and span_id
    """
    ctx: dict[str, Any] = {}

    corr_id = get_correlation_id()
    if corr_id:
        ctx["correlation_id"] = corr_id

    trace_ctx = propagate_trace_context()
    if trace_ctx:
        ctx["trace_id"] = trace_ctx["trace_id"]
        ctx["span_id"] = trace_ctx["span_id"]

    if additional:
        ctx.update(additional)

    return ctx


def propagate_trace_context() -> dict[str, Any] | None:
    """Get OpenTelemetry trace context of the current span.

    Returns:
        Dictionary with trace context if a span is recording, None otherwise
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        span_context = span.get_span_context()
        if span_context.is_valid:
            return {
                "trace_id": format(span_context.trace_id, "032x"),
                "span_id": format(span_context.span_id, "016x"),
                "trace_flags": int(span_context.trace_flags),
            }
    return None
