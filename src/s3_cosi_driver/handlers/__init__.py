"""Driver operation handlers."""

from .bucket import CreateBucketHandler, DeleteBucketHandler
from .bucket_access import GrantBucketAccessHandler, RevokeBucketAccessHandler
from .user import UserRemovalResult, ensure_user, remove_user

__all__ = [
    "CreateBucketHandler",
    "DeleteBucketHandler",
    "GrantBucketAccessHandler",
    "RevokeBucketAccessHandler",
    "UserRemovalResult",
    "ensure_user",
    "remove_user",
]
