"""Utility functions for the S3 COSI driver."""

from .context import (
    get_context_dict,
    get_correlation_id,
    propagate_trace_context,
    with_correlation_id,
)
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .keylock import KeyMutexLock, slot_for
from .resource_id import ResourceIdentifier, decode_resource_id, encode_resource_id
from .secrets import CredentialSource, KubernetesSecretSource
from .tls import TLSConfig, TLSMode

__all__ = [
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
    "propagate_trace_context",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
    "KeyMutexLock",
    "slot_for",
    "ResourceIdentifier",
    "encode_resource_id",
    "decode_resource_id",
    "CredentialSource",
    "KubernetesSecretSource",
    "TLSConfig",
    "TLSMode",
]
