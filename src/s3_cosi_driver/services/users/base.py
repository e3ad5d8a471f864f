"""Base user-management interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class UserRecord:
    """A storage user as reported by the backend."""

    user_name: str
    user_id: str
    arn: str


@dataclass(frozen=True)
class AccessKeyRecord:
    """A newly created access key pair."""

    access_key_id: str
    secret_access_key: str = field(repr=False)


class UserProvider(Protocol):
    """Protocol defining the user-management operations the driver uses.

    Deletes treat an already absent user or key as success, and reads return
    an empty result for an absent user.
    """

    def create_user(self, name: str) -> UserRecord:
        """Create a user."""
        ...

    def get_user(self, name: str) -> UserRecord | None:
        """Get a user, or None if it does not exist."""
        ...

    def delete_user(self, name: str) -> None:
        """Delete a user."""
        ...

    def create_access_key(self, name: str) -> AccessKeyRecord:
        """Create an access key for a user."""
        ...

    def delete_access_key(self, name: str, access_key_id: str) -> None:
        """Delete one access key of a user."""
        ...

    def list_access_keys(self, name: str) -> list[str]:
        """List the access key ids of a user."""
        ...

    def close(self) -> None:
        """Release transport resources."""
        ...
