"""Provisioner facade exposing the driver operations to the control plane."""

from __future__ import annotations

import logging

from .handlers import (
    CreateBucketHandler,
    DeleteBucketHandler,
    GrantBucketAccessHandler,
    RevokeBucketAccessHandler,
)
from .handlers.bucket import S3Factory
from .handlers.bucket_access import UserFactory
from .builders.provider import create_s3_provider, create_user_client
from .models import (
    DriverCreateBucketRequest,
    DriverCreateBucketResponse,
    DriverDeleteBucketRequest,
    DriverDeleteBucketResponse,
    DriverGetInfoResponse,
    DriverGrantBucketAccessRequest,
    DriverGrantBucketAccessResponse,
    DriverRevokeBucketAccessRequest,
    DriverRevokeBucketAccessResponse,
)
from .utils.context import with_correlation_id
from .utils.keylock import KeyMutexLock
from .utils.secrets import CredentialSource

logger = logging.getLogger(__name__)


class ProvisionerServer:
    """Entry point for bucket and bucket-access requests.

    Every operation runs under its own correlation id. Failures are raised as
    :class:`~s3_cosi_driver.exceptions.ProvisionerError`.
    """

    def __init__(
        self,
        driver_name: str,
        credentials: CredentialSource,
        key_lock: KeyMutexLock,
        s3_factory: S3Factory = create_s3_provider,
        user_factory: UserFactory = create_user_client,
    ):
        if not driver_name:
            raise ValueError("driver name is empty")

        self.driver_name = driver_name
        self.key_lock = key_lock
        self.create_bucket_handler = CreateBucketHandler(credentials, s3_factory)
        self.delete_bucket_handler = DeleteBucketHandler(credentials, s3_factory)
        self.grant_handler = GrantBucketAccessHandler(
            credentials, key_lock, s3_factory=s3_factory, user_factory=user_factory
        )
        self.revoke_handler = RevokeBucketAccessHandler(
            credentials, key_lock, s3_factory=s3_factory, user_factory=user_factory
        )

    def driver_get_info(self) -> DriverGetInfoResponse:
        return DriverGetInfoResponse(name=self.driver_name)

    def driver_create_bucket(self, request: DriverCreateBucketRequest) -> DriverCreateBucketResponse:
        with with_correlation_id():
            return self.create_bucket_handler.handle(request)

    def driver_delete_bucket(self, request: DriverDeleteBucketRequest) -> DriverDeleteBucketResponse:
        with with_correlation_id():
            return self.delete_bucket_handler.handle(request)

    def driver_grant_bucket_access(
        self, request: DriverGrantBucketAccessRequest
    ) -> DriverGrantBucketAccessResponse:
        with with_correlation_id():
            return self.grant_handler.handle(request)

    def driver_revoke_bucket_access(
        self, request: DriverRevokeBucketAccessRequest
    ) -> DriverRevokeBucketAccessResponse:
        with with_correlation_id():
            return self.revoke_handler.handle(request)
