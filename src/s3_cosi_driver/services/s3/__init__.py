"""Object-storage provider interface."""

from .base import S3Provider
from .errors import (
    MISSING_BUCKET,
    MISSING_BUCKET_OR_POLICY,
    MISSING_POLICY,
    NO_TOLERATED,
    S3ErrorCode,
)

__all__ = [
    "S3Provider",
    "S3ErrorCode",
    "NO_TOLERATED",
    "MISSING_BUCKET",
    "MISSING_POLICY",
    "MISSING_BUCKET_OR_POLICY",
]
