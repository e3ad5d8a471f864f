"""AWS S3 client implementation."""

from __future__ import annotations

import logging
import os
import weakref

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ...constants import S3_DEFAULT_REGION, S3_HTTP_TIMEOUT_SECONDS
from ...exceptions import BackendError
from ...metrics import track_backend_call
from ...policy import PolicyDocument
from ...utils.tls import TLSConfig
from ..s3.errors import NO_TOLERATED, S3ErrorCode, error_code, is_tolerated

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchBucket", "NotFound"}


class AWSProvider:
    """S3 provider backed by boto3."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        tls: TLSConfig,
        region: str = S3_DEFAULT_REGION,
        path_style: bool = True,
        timeout: float = S3_HTTP_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize AWS S3 provider.

        Args:
            endpoint: S3 endpoint URL
            access_key: Access key ID
            secret_key: Secret access key
            tls: Certificate verification settings
            region: Region used for request signing
            path_style: Use path-style addressing
            timeout: Connect and read timeout in seconds
        """
        if not endpoint:
            raise ValueError("endpoint is empty")
        if not access_key:
            raise ValueError("access key is empty")
        if not secret_key:
            raise ValueError("secret key is empty")

        self.endpoint = endpoint
        self.region = region
        self.path_style = path_style
        self.tls = tls

        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if path_style else "auto"},
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={"max_attempts": 0},
        )

        ca_bundle = tls.write_ca_bundle()
        if ca_bundle is not None:
            weakref.finalize(self, os.remove, ca_bundle)

        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=config,
            verify=ca_bundle if ca_bundle is not None else False,
        )

    def create_bucket(self, name: str, acl: str | None = None, location: str | None = None) -> None:
        """Create a bucket.

        Args:
            name: Bucket name
            acl: Optional canned ACL
            location: Optional location constraint
        """
        logger.info(f"Creating bucket {name} (acl={acl}, location={location})")
        params = {"Bucket": name}
        if acl:
            params["ACL"] = acl
        if location:
            params["CreateBucketConfiguration"] = {"LocationConstraint": location}

        with track_backend_call("s3", "create_bucket"):
            try:
                self.client.create_bucket(**params)
            except ClientError as e:
                logger.error(f"Failed to create bucket {name}: {e}")
                raise BackendError("create_bucket", name, e) from e

        logger.info(f"Created bucket {name}")

    def delete_bucket(self, name: str, tolerate: frozenset[S3ErrorCode] = NO_TOLERATED) -> None:
        """Delete a bucket."""
        logger.info(f"Deleting bucket {name}")
        with track_backend_call("s3", "delete_bucket"):
            try:
                self.client.delete_bucket(Bucket=name)
            except ClientError as e:
                if is_tolerated(e, tolerate):
                    logger.info(f"Bucket {name} does not exist, nothing to delete")
                    return
                logger.error(f"Failed to delete bucket {name}: {e}")
                raise BackendError("delete_bucket", name, e) from e

        logger.info(f"Deleted bucket {name}")

    def bucket_exists(self, name: str) -> bool:
        """Check if bucket exists.

        Raises:
            BackendError: If the check fails for any reason other than absence
        """
        with track_backend_call("s3", "head_bucket"):
            try:
                self.client.head_bucket(Bucket=name)
            except ClientError as e:
                if error_code(e) in _NOT_FOUND_CODES:
                    return False
                logger.error(f"Failed to check bucket {name} existence: {e}")
                raise BackendError("head_bucket", name, e) from e
        return True

    def get_bucket_policy(
        self, name: str, tolerate: frozenset[S3ErrorCode] = NO_TOLERATED
    ) -> PolicyDocument | None:
        """Get bucket policy.

        Returns:
            Policy document, or None if the backend reported a tolerated
            absence
        """
        with track_backend_call("s3", "get_bucket_policy"):
            try:
                response = self.client.get_bucket_policy(Bucket=name)
            except ClientError as e:
                if is_tolerated(e, tolerate):
                    logger.info(f"No policy for bucket {name} ({error_code(e)})")
                    return None
                logger.error(f"Failed to get policy for bucket {name}: {e}")
                raise BackendError("get_bucket_policy", name, e) from e

        try:
            return PolicyDocument.from_json(response["Policy"])
        except ValueError as e:
            raise BackendError("get_bucket_policy", name, e) from e

    def put_bucket_policy(
        self, name: str, policy: PolicyDocument, tolerate: frozenset[S3ErrorCode] = NO_TOLERATED
    ) -> None:
        """Set bucket policy."""
        policy_json = policy.to_json()
        logger.debug(f"Policy JSON for bucket {name}: {policy_json}")

        with track_backend_call("s3", "put_bucket_policy"):
            try:
                self.client.put_bucket_policy(Bucket=name, Policy=policy_json)
            except ClientError as e:
                if is_tolerated(e, tolerate):
                    logger.info(f"Skipped putting policy on bucket {name} ({error_code(e)})")
                    return
                logger.error(f"Failed to set policy for bucket {name}: {e}")
                raise BackendError("put_bucket_policy", name, e) from e

        logger.info(f"Set policy for bucket {name}")

    def delete_bucket_policy(self, name: str, tolerate: frozenset[S3ErrorCode] = NO_TOLERATED) -> None:
        """Delete bucket policy."""
        with track_backend_call("s3", "delete_bucket_policy"):
            try:
                self.client.delete_bucket_policy(Bucket=name)
            except ClientError as e:
                if is_tolerated(e, tolerate):
                    logger.info(f"Skipped deleting policy of bucket {name} ({error_code(e)})")
                    return
                logger.error(f"Failed to delete policy for bucket {name}: {e}")
                raise BackendError("delete_bucket_policy", name, e) from e

        logger.info(f"Deleted policy for bucket {name}")
