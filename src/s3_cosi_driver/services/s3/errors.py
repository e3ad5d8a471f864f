"""Object-storage error codes that callers may choose to tolerate."""

from __future__ import annotations

import enum

from botocore.exceptions import ClientError


class S3ErrorCode(str, enum.Enum):
    """Backend error codes meaning that a bucket or policy is absent."""

    NO_SUCH_BUCKET = "NoSuchBucket"
    NO_SUCH_BUCKET_POLICY = "NoSuchBucketPolicy"


NO_TOLERATED: frozenset[S3ErrorCode] = frozenset()
MISSING_POLICY: frozenset[S3ErrorCode] = frozenset({S3ErrorCode.NO_SUCH_BUCKET_POLICY})
MISSING_BUCKET: frozenset[S3ErrorCode] = frozenset({S3ErrorCode.NO_SUCH_BUCKET})
MISSING_BUCKET_OR_POLICY: frozenset[S3ErrorCode] = MISSING_BUCKET | MISSING_POLICY


def error_code(error: ClientError) -> str:
    """Return the backend error code carried by a botocore error."""
    return error.response.get("Error", {}).get("Code", "")


def is_tolerated(error: ClientError, tolerate: frozenset[S3ErrorCode]) -> bool:
    """Check whether ``error`` carries one of the tolerated codes."""
    code = error_code(error)
    return any(code == c.value for c in tolerate)
