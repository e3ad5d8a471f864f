"""Bucket policy model."""

from .document import (
    ALLOWED_READ_ACTIONS,
    ALLOWED_READ_WRITE_ACTIONS,
    Effect,
    PolicyDocument,
    PolicyStatement,
    StatementBuilder,
)

__all__ = [
    "ALLOWED_READ_ACTIONS",
    "ALLOWED_READ_WRITE_ACTIONS",
    "Effect",
    "PolicyDocument",
    "PolicyStatement",
    "StatementBuilder",
]
