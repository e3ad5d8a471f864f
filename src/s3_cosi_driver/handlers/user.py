"""Provisioning and deprovisioning of backend users."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..models import UserInfo
from ..services.users import UserProvider
from ..tracing import trace_span

logger = logging.getLogger(__name__)


@dataclass
class UserRemovalResult:
    """Outcome of :func:`remove_user`.

    When ``complete`` is False, ``error`` holds the failure that stopped the
    sequence and ``remaining_access_keys`` the keys still present. Every step
    tolerates already absent keys and users, so calling ``remove_user`` again
    resumes where this attempt stopped.
    """

    user_name: str
    deleted_access_keys: list[str] = field(default_factory=list)
    remaining_access_keys: list[str] = field(default_factory=list)
    user_deleted: bool = False
    error: Exception | None = None

    @property
    def complete(self) -> bool:
        return self.error is None and self.user_deleted


def ensure_user(client: UserProvider, name: str) -> UserInfo:
    """Make sure user ``name`` exists and mint a fresh access key for it.

    The user is reused when it already exists. A new key is created on every
    call, so repeated grants each return distinct credentials.

    Args:
        client: User-management client
        name: User name

    Returns:
        The user's principal and the new key pair
    """
    with trace_span("ensure_user", attributes={"user.name": name}):
        user = client.get_user(name)
        if user is None:
            logger.info(f"User {name} not found, creating it")
            user = client.create_user(name)
        else:
            logger.info(f"Reusing existing user {name}")

        key = client.create_access_key(name)
        return UserInfo(
            principal=user.arn,
            access_key_id=key.access_key_id,
            secret_access_key=key.secret_access_key,
        )


def remove_user(client: UserProvider, name: str) -> UserRemovalResult:
    """Delete all access keys of user ``name`` and then the user.

    The sequence stops at the first failing step. The failure is not raised
    but reported in the returned result together with what was already
    removed.
    """
    result = UserRemovalResult(user_name=name)

    with trace_span("remove_user", attributes={"user.name": name}):
        try:
            key_ids = client.list_access_keys(name)
        except Exception as e:
            logger.error(f"Failed to list access keys of user {name}: {e}")
            result.error = e
            return result

        pending = list(key_ids)
        while pending:
            key_id = pending[0]
            try:
                client.delete_access_key(name, key_id)
            except Exception as e:
                logger.error(f"Failed to delete access key {key_id} of user {name}: {e}")
                result.error = e
                result.remaining_access_keys = pending
                return result
            result.deleted_access_keys.append(pending.pop(0))

        try:
            client.delete_user(name)
        except Exception as e:
            logger.error(f"Failed to delete user {name}: {e}")
            result.error = e
            return result

        result.user_deleted = True
        logger.info(f"Removed user {name} and {len(result.deleted_access_keys)} access keys")
        return result
