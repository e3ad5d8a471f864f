"""Signed-request user-management client."""

from .client import PoeClient
from .errors import PoeConfigError, PoeError, PoeErrorCode, PoeResponseError
from .users import PoeUserClient

__all__ = [
    "PoeClient",
    "PoeConfigError",
    "PoeError",
    "PoeErrorCode",
    "PoeResponseError",
    "PoeUserClient",
]
