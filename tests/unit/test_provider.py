"""Tests for the boto3 object-storage provider."""

from __future__ import annotations

import json
import os
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from s3_cosi_driver.exceptions import BackendError
from s3_cosi_driver.policy import PolicyDocument, StatementBuilder
from s3_cosi_driver.services.aws.client import AWSProvider
from s3_cosi_driver.services.s3 import MISSING_BUCKET, MISSING_BUCKET_OR_POLICY, MISSING_POLICY
from s3_cosi_driver.utils.tls import TLSConfig, TLSMode

TRUST_ALL = TLSConfig(TLSMode.TRUST_ALL)


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def boto_client():
    with patch("s3_cosi_driver.services.aws.client.boto3.client") as factory:
        client = MagicMock()
        factory.return_value = client
        yield factory


@pytest.fixture
def provider(boto_client) -> AWSProvider:
    return AWSProvider("https://s3.example.com", "ak", "sk", TRUST_ALL)


class TestAWSProviderInit:
    """Test AWSProvider construction."""

    def test_client_configuration(self, boto_client):
        provider = AWSProvider("https://s3.example.com", "ak", "sk", TRUST_ALL)

        kwargs = boto_client.call_args.kwargs
        assert boto_client.call_args.args == ("s3",)
        assert kwargs["endpoint_url"] == "https://s3.example.com"
        assert kwargs["region_name"] == "us-east-1"
        assert kwargs["verify"] is False
        config = kwargs["config"]
        assert config.signature_version == "s3v4"
        assert config.s3 == {"addressing_style": "path"}
        assert config.retries == {"max_attempts": 0}
        assert config.connect_timeout == 200
        assert provider.path_style is True

    def test_verify_mode_writes_ca_bundle(self, boto_client):
        provider = AWSProvider("https://s3.example.com", "ak", "sk", TLSConfig(TLSMode.VERIFY, b"PEM"))

        bundle = boto_client.call_args.kwargs["verify"]
        with open(bundle, "rb") as f:
            assert f.read() == b"PEM"
        del provider
        assert not os.path.exists(bundle)

    @pytest.mark.parametrize(
        "endpoint,ak,sk",
        [("", "ak", "sk"), ("https://s3", "", "sk"), ("https://s3", "ak", "")],
    )
    def test_rejects_empty_values(self, boto_client, endpoint, ak, sk):
        with pytest.raises(ValueError):
            AWSProvider(endpoint, ak, sk, TRUST_ALL)


class TestBuckets:
    """Test bucket operations."""

    def test_create_bucket(self, provider):
        provider.create_bucket("b1", acl="private", location="eu")
        provider.client.create_bucket.assert_called_once_with(
            Bucket="b1", ACL="private", CreateBucketConfiguration={"LocationConstraint": "eu"}
        )

    def test_create_bucket_minimal(self, provider):
        provider.create_bucket("b1")
        provider.client.create_bucket.assert_called_once_with(Bucket="b1")

    def test_create_bucket_failure(self, provider):
        provider.client.create_bucket.side_effect = client_error("BucketAlreadyExists")
        with pytest.raises(BackendError) as exc_info:
            provider.create_bucket("b1")
        assert exc_info.value.operation == "create_bucket"
        assert exc_info.value.resource == "b1"

    def test_delete_missing_bucket_tolerated(self, provider):
        provider.client.delete_bucket.side_effect = client_error("NoSuchBucket")
        provider.delete_bucket("b1", tolerate=MISSING_BUCKET)

    def test_delete_missing_bucket_not_tolerated(self, provider):
        provider.client.delete_bucket.side_effect = client_error("NoSuchBucket")
        with pytest.raises(BackendError):
            provider.delete_bucket("b1")

    @pytest.mark.parametrize("code", ["404", "NoSuchBucket", "NotFound"])
    def test_bucket_exists_false(self, provider, code):
        provider.client.head_bucket.side_effect = client_error(code)
        assert provider.bucket_exists("b1") is False

    def test_bucket_exists_true(self, provider):
        assert provider.bucket_exists("b1") is True

    def test_bucket_exists_other_error(self, provider):
        provider.client.head_bucket.side_effect = client_error("403")
        with pytest.raises(BackendError):
            provider.bucket_exists("b1")


class TestPolicies:
    """Test bucket policy operations."""

    def test_get_policy(self, provider):
        doc = PolicyDocument.new(StatementBuilder().with_sid("alice").with_resources("b1").build())
        provider.client.get_bucket_policy.return_value = {"Policy": doc.to_json()}

        assert provider.get_bucket_policy("b1") == doc

    def test_get_missing_policy_tolerated(self, provider):
        provider.client.get_bucket_policy.side_effect = client_error("NoSuchBucketPolicy")
        assert provider.get_bucket_policy("b1", tolerate=MISSING_POLICY) is None

    def test_get_missing_bucket_needs_its_own_code(self, provider):
        provider.client.get_bucket_policy.side_effect = client_error("NoSuchBucket")
        with pytest.raises(BackendError):
            provider.get_bucket_policy("b1", tolerate=MISSING_POLICY)

    def test_get_malformed_policy(self, provider):
        provider.client.get_bucket_policy.return_value = {"Policy": "not json"}
        with pytest.raises(BackendError):
            provider.get_bucket_policy("b1")

    def test_put_policy(self, provider):
        doc = PolicyDocument.new(StatementBuilder().with_sid("alice").build())
        provider.put_bucket_policy("b1", doc)

        kwargs = provider.client.put_bucket_policy.call_args.kwargs
        assert kwargs["Bucket"] == "b1"
        assert json.loads(kwargs["Policy"])["Statement"][0]["Sid"] == "alice"

    def test_put_policy_tolerated(self, provider):
        provider.client.put_bucket_policy.side_effect = client_error("NoSuchBucket")
        provider.put_bucket_policy("b1", PolicyDocument(), tolerate=MISSING_BUCKET_OR_POLICY)

    def test_delete_policy_failure(self, provider):
        provider.client.delete_bucket_policy.side_effect = client_error("AccessDenied")
        with pytest.raises(BackendError, match="delete_bucket_policy on b1 failed"):
            provider.delete_bucket_policy("b1", tolerate=MISSING_BUCKET_OR_POLICY)
