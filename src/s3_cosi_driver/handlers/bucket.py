"""Handlers for bucket creation and deletion."""

from __future__ import annotations

from typing import Callable

from ..builders.provider import create_s3_provider
from ..constants import (
    OP_CREATE_BUCKET,
    OP_DELETE_BUCKET,
    PARAM_ACCOUNT_SECRET_NAME,
    PARAM_ACCOUNT_SECRET_NAMESPACE,
    PARAM_BUCKET_ACL,
    PARAM_BUCKET_LOCATION,
)
from ..models import (
    AccountCredentials,
    DriverCreateBucketRequest,
    DriverCreateBucketResponse,
    DriverDeleteBucketRequest,
    DriverDeleteBucketResponse,
)
from ..services.s3 import MISSING_BUCKET, S3Provider
from ..tracing import trace_span
from ..utils.resource_id import decode_resource_id, encode_resource_id
from ..utils.secrets import CredentialSource
from .base import BaseHandler

S3Factory = Callable[[AccountCredentials], S3Provider]


class CreateBucketHandler(BaseHandler):
    """Creates buckets with the credentials named in the bucket class."""

    def __init__(self, credentials: CredentialSource, s3_factory: S3Factory = create_s3_provider):
        super().__init__(OP_CREATE_BUCKET)
        self.credentials = credentials
        self.s3_factory = s3_factory

    def validate(self, request: DriverCreateBucketRequest) -> None:
        self.require(request.name, "empty bucket name")
        self.require(request.parameters, "empty bucket parameters")
        self.require(request.parameters.get(PARAM_ACCOUNT_SECRET_NAME), f"{PARAM_ACCOUNT_SECRET_NAME} value is empty")
        self.require(
            request.parameters.get(PARAM_ACCOUNT_SECRET_NAMESPACE),
            f"{PARAM_ACCOUNT_SECRET_NAMESPACE} value is empty",
        )

    def handle(self, request: DriverCreateBucketRequest) -> DriverCreateBucketResponse:
        return self.run_with_metrics(lambda: self._create(request))

    def _create(self, request: DriverCreateBucketRequest) -> DriverCreateBucketResponse:
        self.validate(request)
        params = request.parameters
        namespace = params[PARAM_ACCOUNT_SECRET_NAMESPACE]
        secret_name = params[PARAM_ACCOUNT_SECRET_NAME]

        with trace_span("create_bucket", attributes={"bucket.name": request.name}):
            self.log_info(f"Creating bucket {request.name}", event="started", bucket=request.name)
            creds = self.credentials.get_credentials(namespace, secret_name)
            s3 = self.s3_factory(creds)
            s3.create_bucket(
                request.name,
                acl=params.get(PARAM_BUCKET_ACL) or None,
                location=params.get(PARAM_BUCKET_LOCATION) or None,
            )

        bucket_id = encode_resource_id(namespace, secret_name, request.name)
        self.log_info(f"Created bucket {request.name}", event="succeeded", bucket_id=bucket_id)
        return DriverCreateBucketResponse(bucket_id=bucket_id)


class DeleteBucketHandler(BaseHandler):
    """Deletes buckets identified by a bucket id."""

    def __init__(self, credentials: CredentialSource, s3_factory: S3Factory = create_s3_provider):
        super().__init__(OP_DELETE_BUCKET)
        self.credentials = credentials
        self.s3_factory = s3_factory

    def handle(self, request: DriverDeleteBucketRequest) -> DriverDeleteBucketResponse:
        return self.run_with_metrics(lambda: self._delete(request))

    def _delete(self, request: DriverDeleteBucketRequest) -> DriverDeleteBucketResponse:
        self.require(request.bucket_id, "empty bucket id")
        bucket = decode_resource_id(request.bucket_id)

        with trace_span("delete_bucket", attributes={"bucket.name": bucket.resource_name}):
            self.log_info(f"Deleting bucket {bucket.resource_name}", event="started", bucket_id=request.bucket_id)
            creds = self.credentials.get_credentials(bucket.secret_namespace, bucket.secret_name)
            s3 = self.s3_factory(creds)
            s3.delete_bucket(bucket.resource_name, tolerate=MISSING_BUCKET)

        self.log_info(f"Deleted bucket {bucket.resource_name}", event="succeeded", bucket_id=request.bucket_id)
        return DriverDeleteBucketResponse()
