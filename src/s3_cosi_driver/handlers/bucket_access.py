"""Handlers granting and revoking bucket access.

Both operations read, modify and write back the bucket policy, so they hold
the lock of the bucket id from before credentials are resolved until the
policy has been written.
"""

from __future__ import annotations

import time
from contextlib import closing, contextmanager
from typing import Callable, Iterator

from .. import metrics
from ..builders.provider import create_s3_provider, create_user_client
from ..constants import (
    AUTH_TYPE_IAM,
    AUTH_TYPE_KEY,
    CRED_ACCESS_KEY_ID,
    CRED_ACCESS_SECRET_KEY,
    CRED_ENDPOINT,
    OP_GRANT_BUCKET_ACCESS,
    OP_REVOKE_BUCKET_ACCESS,
    PARAM_ACCOUNT_SECRET_NAME,
    PARAM_ACCOUNT_SECRET_NAMESPACE,
    PARAM_BUCKET_POLICY_MODEL,
    POLICY_MODEL_RO,
    POLICY_MODEL_RW,
    POLICY_MODELS,
    PROTOCOL_S3,
)
from ..exceptions import BackendError
from ..models import (
    AccountCredentials,
    DriverGrantBucketAccessRequest,
    DriverGrantBucketAccessResponse,
    DriverRevokeBucketAccessRequest,
    DriverRevokeBucketAccessResponse,
)
from ..policy import ALLOWED_READ_ACTIONS, ALLOWED_READ_WRITE_ACTIONS, Effect, PolicyDocument, StatementBuilder
from ..services.s3 import MISSING_BUCKET_OR_POLICY, MISSING_POLICY, S3Provider
from ..services.users import UserProvider
from ..tracing import trace_span
from ..utils.keylock import KeyMutexLock
from ..utils.resource_id import decode_resource_id, encode_resource_id
from ..utils.secrets import CredentialSource
from .base import BaseHandler
from .user import ensure_user, remove_user

S3Factory = Callable[[AccountCredentials], S3Provider]
UserFactory = Callable[[AccountCredentials], UserProvider]


class BucketAccessHandler(BaseHandler):
    """Shared wiring of the grant and revoke handlers."""

    def __init__(
        self,
        operation: str,
        credentials: CredentialSource,
        key_lock: KeyMutexLock,
        s3_factory: S3Factory = create_s3_provider,
        user_factory: UserFactory = create_user_client,
    ):
        super().__init__(operation)
        self.credentials = credentials
        self.key_lock = key_lock
        self.s3_factory = s3_factory
        self.user_factory = user_factory

    @contextmanager
    def bucket_lock(self, bucket_id: str) -> Iterator[None]:
        """Hold the lock of ``bucket_id``, recording how long it took to get it."""
        start_time = time.time()
        with self.key_lock.hold(bucket_id):
            metrics.lock_wait_seconds.labels(operation=self.operation).observe(time.time() - start_time)
            yield


class GrantBucketAccessHandler(BucketAccessHandler):
    """Mints user credentials and allows them on the bucket."""

    def __init__(self, *args, **kwargs):
        super().__init__(OP_GRANT_BUCKET_ACCESS, *args, **kwargs)

    def validate(self, request: DriverGrantBucketAccessRequest) -> None:
        self.require(request.bucket_id, "empty bucket id")
        self.require(request.name, "empty user name")
        self.require(request.authentication_type != AUTH_TYPE_IAM, "IAM authentication type not implemented")
        self.require(request.authentication_type == AUTH_TYPE_KEY, "unknown authentication type")

        params = request.parameters or {}
        self.require(params.get(PARAM_ACCOUNT_SECRET_NAME), "account secret name value is empty")
        self.require(params.get(PARAM_ACCOUNT_SECRET_NAMESPACE), "account secret namespace value is empty")

        model = params.get(PARAM_BUCKET_POLICY_MODEL)
        if model is not None:
            self.require(model in POLICY_MODELS, f"invalid bucket policy model [{model}]")

    def handle(self, request: DriverGrantBucketAccessRequest) -> DriverGrantBucketAccessResponse:
        return self.run_with_metrics(lambda: self._grant(request))

    def _grant(self, request: DriverGrantBucketAccessRequest) -> DriverGrantBucketAccessResponse:
        self.validate(request)
        params = request.parameters
        user_name = request.name

        with self.bucket_lock(request.bucket_id), trace_span(
            "grant_bucket_access", attributes={"bucket.id": request.bucket_id, "user.name": user_name}
        ):
            self.log_info(
                f"Granting access on {request.bucket_id} to {user_name}",
                event="started",
                bucket_id=request.bucket_id,
                user=user_name,
            )
            bucket = decode_resource_id(request.bucket_id)
            bucket_creds = self.credentials.get_credentials(bucket.secret_namespace, bucket.secret_name)
            user_creds = self.credentials.get_credentials(
                params[PARAM_ACCOUNT_SECRET_NAMESPACE], params[PARAM_ACCOUNT_SECRET_NAME]
            )

            s3 = self.s3_factory(bucket_creds)
            if not s3.bucket_exists(bucket.resource_name):
                raise BackendError("head_bucket", bucket.resource_name, LookupError("bucket does not exist"))

            with closing(self.user_factory(user_creds)) as users:
                user = ensure_user(users, user_name)

            policy = s3.get_bucket_policy(bucket.resource_name, tolerate=MISSING_POLICY)
            statement = (
                StatementBuilder()
                .with_sid(user_name)
                .with_effect(Effect.ALLOW)
                .with_principals(user.principal)
                .with_actions(self._actions(params.get(PARAM_BUCKET_POLICY_MODEL, POLICY_MODEL_RW)))
                .with_resources(bucket.resource_name)
                .with_sub_resources(bucket.resource_name)
                .build()
            )
            policy = PolicyDocument.new(statement) if policy is None else policy.merge(statement)
            s3.put_bucket_policy(bucket.resource_name, policy)

        self.log_info(
            f"Granted access on {request.bucket_id} to {user_name}",
            event="succeeded",
            bucket_id=request.bucket_id,
            user=user_name,
            access_key_id=user.access_key_id,
        )
        return DriverGrantBucketAccessResponse(
            account_id=encode_resource_id(user_creds.namespace, user_creds.name, user_name),
            credentials={
                PROTOCOL_S3: {
                    CRED_ACCESS_KEY_ID: user.access_key_id,
                    CRED_ACCESS_SECRET_KEY: user.secret_access_key,
                    CRED_ENDPOINT: bucket_creds.endpoint,
                }
            },
        )

    @staticmethod
    def _actions(model: str) -> tuple[str, ...]:
        if model == POLICY_MODEL_RO:
            return ALLOWED_READ_ACTIONS
        return ALLOWED_READ_WRITE_ACTIONS


class RevokeBucketAccessHandler(BucketAccessHandler):
    """Removes a user and its statement from the bucket policy."""

    def __init__(self, *args, **kwargs):
        super().__init__(OP_REVOKE_BUCKET_ACCESS, *args, **kwargs)

    def validate(self, request: DriverRevokeBucketAccessRequest) -> None:
        self.require(request.bucket_id, "empty bucket id")
        self.require(request.account_id, "empty account id")

    def handle(self, request: DriverRevokeBucketAccessRequest) -> DriverRevokeBucketAccessResponse:
        return self.run_with_metrics(lambda: self._revoke(request))

    def _revoke(self, request: DriverRevokeBucketAccessRequest) -> DriverRevokeBucketAccessResponse:
        self.validate(request)

        with self.bucket_lock(request.bucket_id), trace_span(
            "revoke_bucket_access", attributes={"bucket.id": request.bucket_id, "account.id": request.account_id}
        ):
            self.log_info(
                f"Revoking access of {request.account_id} on {request.bucket_id}",
                event="started",
                bucket_id=request.bucket_id,
                account_id=request.account_id,
            )
            account = decode_resource_id(request.account_id)
            user_name = account.resource_name
            user_creds = self.credentials.get_credentials(account.secret_namespace, account.secret_name)

            with closing(self.user_factory(user_creds)) as users:
                removal = remove_user(users, user_name)
            if not removal.complete:
                self.log_error(
                    f"User {user_name} was only partially removed",
                    error=removal.error,
                    event="partial",
                    deleted_access_keys=removal.deleted_access_keys,
                    remaining_access_keys=removal.remaining_access_keys,
                    user_deleted=removal.user_deleted,
                )
                raise BackendError("remove_user", user_name, removal.error)

            bucket = decode_resource_id(request.bucket_id)
            bucket_creds = self.credentials.get_credentials(bucket.secret_namespace, bucket.secret_name)
            self._remove_statement(self.s3_factory(bucket_creds), bucket.resource_name, user_name)

        self.log_info(
            f"Revoked access of {request.account_id} on {request.bucket_id}",
            event="succeeded",
            bucket_id=request.bucket_id,
            account_id=request.account_id,
        )
        return DriverRevokeBucketAccessResponse()

    def _remove_statement(self, s3: S3Provider, bucket_name: str, user_name: str) -> None:
        policy = s3.get_bucket_policy(bucket_name, tolerate=MISSING_BUCKET_OR_POLICY)
        if policy is None:
            self.log_info(f"Bucket {bucket_name} has no policy, nothing to remove", bucket=bucket_name)
            return

        edited = policy.remove(user_name)
        if edited == policy:
            self.log_info(
                f"Bucket {bucket_name} policy has no statement for {user_name}, nothing to remove",
                bucket=bucket_name,
            )
            return

        if edited.statements:
            s3.put_bucket_policy(bucket_name, edited, tolerate=MISSING_BUCKET_OR_POLICY)
        else:
            self.log_info(f"Bucket {bucket_name} policy is empty, deleting it", bucket=bucket_name)
            s3.delete_bucket_policy(bucket_name, tolerate=MISSING_BUCKET_OR_POLICY)
