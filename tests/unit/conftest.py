"""Shared fakes for driver tests."""

from __future__ import annotations

import pytest

from s3_cosi_driver.exceptions import BackendError, CredentialError
from s3_cosi_driver.models import AccountCredentials
from s3_cosi_driver.policy import PolicyDocument
from s3_cosi_driver.services.poe import PoeResponseError
from s3_cosi_driver.services.s3 import NO_TOLERATED, S3ErrorCode
from s3_cosi_driver.services.users import AccessKeyRecord, UserRecord
from s3_cosi_driver.utils.keylock import KeyMutexLock

BUCKET_SECRET_NS = "cosi"
BUCKET_SECRET_NAME = "bucket-owner"
USER_SECRET_NS = "tenant"
USER_SECRET_NAME = "user-admin"
BUCKET_ENDPOINT = "https://s3.example.com"
USER_ENDPOINT = "https://iam.example.com"


def user_arn(name: str) -> str:
    return f"arn:aws:iam::1234:user/{name}"


class FakeS3Provider:
    """In-memory object storage.

    Policies are stored as JSON so every read returns a fresh document.
    """

    def __init__(self, buckets=(), policies=None):
        self.buckets = set(buckets)
        self.policies: dict[str, str] = {
            name: doc.to_json() for name, doc in (policies or {}).items()
        }
        self.calls: list[tuple] = []
        self.fail_put: Exception | None = None

    def _missing(self, operation, name, code, tolerate):
        if code in tolerate:
            return True
        raise BackendError(operation, name, LookupError(code.value))

    def create_bucket(self, name, acl=None, location=None):
        self.calls.append(("create_bucket", name, acl, location))
        self.buckets.add(name)

    def delete_bucket(self, name, tolerate=NO_TOLERATED):
        self.calls.append(("delete_bucket", name))
        if name not in self.buckets:
            self._missing("delete_bucket", name, S3ErrorCode.NO_SUCH_BUCKET, tolerate)
            return
        self.buckets.discard(name)
        self.policies.pop(name, None)

    def bucket_exists(self, name):
        self.calls.append(("bucket_exists", name))
        return name in self.buckets

    def get_bucket_policy(self, name, tolerate=NO_TOLERATED):
        self.calls.append(("get_bucket_policy", name))
        if name not in self.buckets:
            self._missing("get_bucket_policy", name, S3ErrorCode.NO_SUCH_BUCKET, tolerate)
            return None
        if name not in self.policies:
            self._missing("get_bucket_policy", name, S3ErrorCode.NO_SUCH_BUCKET_POLICY, tolerate)
            return None
        return PolicyDocument.from_json(self.policies[name])

    def put_bucket_policy(self, name, policy, tolerate=NO_TOLERATED):
        self.calls.append(("put_bucket_policy", name))
        if self.fail_put is not None:
            raise self.fail_put
        if name not in self.buckets:
            self._missing("put_bucket_policy", name, S3ErrorCode.NO_SUCH_BUCKET, tolerate)
            return
        self.policies[name] = policy.to_json()

    def delete_bucket_policy(self, name, tolerate=NO_TOLERATED):
        self.calls.append(("delete_bucket_policy", name))
        if name not in self.buckets:
            self._missing("delete_bucket_policy", name, S3ErrorCode.NO_SUCH_BUCKET, tolerate)
            return
        self.policies.pop(name, None)

    def policy(self, name) -> PolicyDocument | None:
        if name not in self.policies:
            return None
        return PolicyDocument.from_json(self.policies[name])

    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("put_bucket_policy", "delete_bucket_policy")]


class FakeUserProvider:
    """In-memory user management with failure injection."""

    def __init__(self):
        self.users: dict[str, list[str]] = {}
        self.failing_keys: set[str] = set()
        self.fail_delete_user: Exception | None = None
        self.fail_list: Exception | None = None
        self.fail_on: dict[str, Exception] = {}
        self.closed = 0
        self._counter = 0

    def _maybe_fail(self, operation):
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def _record(self, name):
        return UserRecord(user_name=name, user_id=f"id-{name}", arn=user_arn(name))

    def create_user(self, name):
        self._maybe_fail("create_user")
        self.users.setdefault(name, [])
        return self._record(name)

    def get_user(self, name):
        self._maybe_fail("get_user")
        if name not in self.users:
            return None
        return self._record(name)

    def delete_user(self, name):
        if self.fail_delete_user is not None:
            raise self.fail_delete_user
        self.users.pop(name, None)

    def create_access_key(self, name):
        self._maybe_fail("create_access_key")
        if name not in self.users:
            raise PoeResponseError("NoSuchEntity", "user not found", "req-1", 404)
        self._counter += 1
        key_id = f"AK{self._counter}"
        self.users[name].append(key_id)
        return AccessKeyRecord(access_key_id=key_id, secret_access_key=f"SK{self._counter}")

    def delete_access_key(self, name, access_key_id):
        if access_key_id in self.failing_keys:
            raise PoeResponseError("InternalError", "boom", "req-2", 500)
        keys = self.users.get(name, [])
        if access_key_id in keys:
            keys.remove(access_key_id)

    def list_access_keys(self, name):
        if self.fail_list is not None:
            raise self.fail_list
        return list(self.users.get(name, []))

    def close(self):
        self.closed += 1


class FakeCredentialSource:
    def __init__(self, *credentials: AccountCredentials):
        self.credentials = {(c.namespace, c.name): c for c in credentials}
        self.requested: list[tuple[str, str]] = []

    def get_credentials(self, namespace, name):
        self.requested.append((namespace, name))
        try:
            return self.credentials[(namespace, name)]
        except KeyError:
            raise CredentialError(f"Secret '{name}' not found in namespace '{namespace}'") from None


@pytest.fixture
def bucket_credentials() -> AccountCredentials:
    return AccountCredentials(
        namespace=BUCKET_SECRET_NS,
        name=BUCKET_SECRET_NAME,
        access_key="bucket-ak",
        secret_key="bucket-sk",
        endpoint=BUCKET_ENDPOINT,
    )


@pytest.fixture
def user_credentials() -> AccountCredentials:
    return AccountCredentials(
        namespace=USER_SECRET_NS,
        name=USER_SECRET_NAME,
        access_key="user-ak",
        secret_key="user-sk",
        endpoint=USER_ENDPOINT,
    )


@pytest.fixture
def credential_source(bucket_credentials, user_credentials) -> FakeCredentialSource:
    return FakeCredentialSource(bucket_credentials, user_credentials)


@pytest.fixture
def s3() -> FakeS3Provider:
    return FakeS3Provider(buckets={"my-bucket"})


@pytest.fixture
def users() -> FakeUserProvider:
    return FakeUserProvider()


@pytest.fixture
def key_lock() -> KeyMutexLock:
    return KeyMutexLock(size=8)
