"""User-management provider interface."""

from .base import AccessKeyRecord, UserProvider, UserRecord

__all__ = ["AccessKeyRecord", "UserProvider", "UserRecord"]
