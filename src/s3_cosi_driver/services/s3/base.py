"""Base S3 provider interface."""

from __future__ import annotations

from typing import Protocol

from ...policy import PolicyDocument
from .errors import S3ErrorCode


class S3Provider(Protocol):
    """Protocol defining the object-storage operations the driver uses.

    ``tolerate`` names backend error codes that are treated as success (or as
    "absent" for reads) for that call only.
    """

    def create_bucket(self, name: str, acl: str | None = None, location: str | None = None) -> None:
        """Create a bucket."""
        ...

    def delete_bucket(self, name: str, tolerate: frozenset[S3ErrorCode] = frozenset()) -> None:
        """Delete a bucket."""
        ...

    def bucket_exists(self, name: str) -> bool:
        """Check if a bucket exists."""
        ...

    def get_bucket_policy(
        self, name: str, tolerate: frozenset[S3ErrorCode] = frozenset()
    ) -> PolicyDocument | None:
        """Get bucket policy, or None when absent and tolerated."""
        ...

    def put_bucket_policy(
        self, name: str, policy: PolicyDocument, tolerate: frozenset[S3ErrorCode] = frozenset()
    ) -> None:
        """Set bucket policy."""
        ...

    def delete_bucket_policy(self, name: str, tolerate: frozenset[S3ErrorCode] = frozenset()) -> None:
        """Delete bucket policy."""
        ...
