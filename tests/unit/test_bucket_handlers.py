"""Tests for bucket creation and deletion."""

from __future__ import annotations

import pytest

from s3_cosi_driver.exceptions import ProvisionerError, RequestValidationError
from s3_cosi_driver.handlers.bucket import CreateBucketHandler, DeleteBucketHandler
from s3_cosi_driver.models import DriverCreateBucketRequest, DriverDeleteBucketRequest

from conftest import BUCKET_SECRET_NAME, BUCKET_SECRET_NS

PARAMS = {"accountSecretName": BUCKET_SECRET_NAME, "accountSecretNamespace": BUCKET_SECRET_NS}


@pytest.fixture
def create(credential_source, s3) -> CreateBucketHandler:
    return CreateBucketHandler(credential_source, s3_factory=lambda creds: s3)


@pytest.fixture
def delete(credential_source, s3) -> DeleteBucketHandler:
    return DeleteBucketHandler(credential_source, s3_factory=lambda creds: s3)


class TestCreateBucket:
    """Test cases for CreateBucketHandler."""

    def test_create(self, create, s3, credential_source):
        response = create.handle(DriverCreateBucketRequest(name="new-bucket", parameters=dict(PARAMS)))

        assert response.bucket_id == f"{BUCKET_SECRET_NS}/{BUCKET_SECRET_NAME}/new-bucket"
        assert ("create_bucket", "new-bucket", None, None) in s3.calls
        assert credential_source.requested == [(BUCKET_SECRET_NS, BUCKET_SECRET_NAME)]

    def test_acl_and_location_are_forwarded(self, create, s3):
        params = dict(PARAMS, bucketACL="private", bucketLocation="eu-west-1")
        create.handle(DriverCreateBucketRequest(name="new-bucket", parameters=params))
        assert ("create_bucket", "new-bucket", "private", "eu-west-1") in s3.calls

    @pytest.mark.parametrize(
        "request_,message",
        [
            (DriverCreateBucketRequest(name="", parameters=dict(PARAMS)), "empty bucket name"),
            (DriverCreateBucketRequest(name="b", parameters=None), "empty bucket parameters"),
            (
                DriverCreateBucketRequest(name="b", parameters={"accountSecretNamespace": "ns"}),
                "accountSecretName value is empty",
            ),
            (
                DriverCreateBucketRequest(name="b", parameters={"accountSecretName": "n"}),
                "accountSecretNamespace value is empty",
            ),
        ],
    )
    def test_validation(self, create, request_, message):
        with pytest.raises(RequestValidationError, match=message):
            create.validate(request_)

    def test_validation_failure_surfaces_as_provisioner_error(self, create, s3):
        with pytest.raises(ProvisionerError, match="empty bucket name"):
            create.handle(DriverCreateBucketRequest(name="", parameters=dict(PARAMS)))
        assert s3.calls == []


class TestDeleteBucket:
    """Test cases for DeleteBucketHandler."""

    def test_delete(self, delete, s3):
        delete.handle(DriverDeleteBucketRequest(bucket_id=f"{BUCKET_SECRET_NS}/{BUCKET_SECRET_NAME}/my-bucket"))
        assert "my-bucket" not in s3.buckets

    def test_delete_missing_bucket_is_success(self, delete, s3):
        delete.handle(DriverDeleteBucketRequest(bucket_id=f"{BUCKET_SECRET_NS}/{BUCKET_SECRET_NAME}/gone"))
        assert ("delete_bucket", "gone") in s3.calls

    def test_malformed_bucket_id(self, delete):
        with pytest.raises(ProvisionerError, match="invalid value"):
            delete.handle(DriverDeleteBucketRequest(bucket_id="ns//bucket"))
