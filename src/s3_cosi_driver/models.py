"""Request, response and credential models for driver operations."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import AUTH_TYPE_UNKNOWN


@dataclass(frozen=True)
class AccountCredentials:
    """Backend credential bundle read from an account secret."""

    namespace: str
    name: str
    access_key: str = field(repr=False)
    secret_key: str = field(repr=False)
    endpoint: str
    root_ca: bytes | None = field(default=None, repr=False)


@dataclass(frozen=True)
class UserInfo:
    """Credentials minted for a backend user on grant."""

    principal: str
    access_key_id: str
    secret_access_key: str = field(repr=False)


@dataclass
class DriverGetInfoResponse:
    """Driver identity."""

    name: str


@dataclass
class DriverCreateBucketRequest:
    """Create bucket request."""

    name: str
    parameters: dict[str, str] | None = None


@dataclass
class DriverCreateBucketResponse:
    """Create bucket response."""

    bucket_id: str


@dataclass
class DriverDeleteBucketRequest:
    """Delete bucket request."""

    bucket_id: str


@dataclass
class DriverDeleteBucketResponse:
    """Delete bucket response."""


@dataclass
class DriverGrantBucketAccessRequest:
    """Grant bucket access request."""

    bucket_id: str
    name: str
    authentication_type: str = AUTH_TYPE_UNKNOWN
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass
class DriverGrantBucketAccessResponse:
    """Grant bucket access response.

    ``credentials`` maps a protocol name (``s3``) to its secret values.
    """

    account_id: str
    credentials: dict[str, dict[str, str]] = field(repr=False)


@dataclass
class DriverRevokeBucketAccessRequest:
    """Revoke bucket access request."""

    bucket_id: str
    account_id: str


@dataclass
class DriverRevokeBucketAccessResponse:
    """Revoke bucket access response."""
