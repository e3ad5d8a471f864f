"""User-management actions on top of :class:`PoeClient`."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from ..users.base import AccessKeyRecord, UserRecord
from .client import ACTION_KEY, PoeClient
from .errors import PoeErrorCode, PoeResponseError
from .parsing import find_text, parse_response, request_id

logger = logging.getLogger(__name__)

USER_NAME_KEY = "UserName"
ACCESS_KEY_ID_KEY = "AccessKeyId"


class PoeUserClient:
    """User provider backed by the signed-request endpoint."""

    def __init__(self, client: PoeClient) -> None:
        self.client = client

    def _call(self, action: str, **params: str) -> bytes:
        return self.client.call({ACTION_KEY: action, **params})

    @staticmethod
    def _user_record(root: ET.Element, result_tag: str) -> UserRecord:
        user = root.find(f"{result_tag}/User")
        if user is None:
            return UserRecord(user_name="", user_id="", arn="")
        return UserRecord(
            user_name=find_text(user, "UserName"),
            user_id=find_text(user, "UserId"),
            arn=find_text(user, "Arn"),
        )

    def create_user(self, name: str) -> UserRecord:
        logger.info(f"Creating user {name}")
        root = parse_response(self._call("CreateUser", UserName=name), "CreateUserResponse")
        logger.info(f"Created user {name}, request id {request_id(root)}")
        return self._user_record(root, "CreateUserResult")

    def get_user(self, name: str) -> UserRecord | None:
        """Get a user.

        Returns:
            The user, or None if the backend reports ``NoSuchEntity``
        """
        try:
            body = self._call("GetUser", UserName=name)
        except PoeResponseError as e:
            if e.is_code(PoeErrorCode.NO_SUCH_ENTITY):
                logger.info(f"User {name} does not exist")
                return None
            raise

        root = parse_response(body, "GetUserResponse")
        logger.debug(f"Got user {name}, request id {request_id(root)}")
        return self._user_record(root, "GetUserResult")

    def delete_user(self, name: str) -> None:
        logger.info(f"Deleting user {name}")
        try:
            body = self._call("DeleteUser", UserName=name)
        except PoeResponseError as e:
            if e.is_code(PoeErrorCode.NO_SUCH_ENTITY):
                logger.info(f"User {name} does not exist, nothing to delete")
                return
            raise

        root = parse_response(body, "DeleteUserResponse")
        logger.info(f"Deleted user {name}, request id {request_id(root)}")

    def create_access_key(self, name: str) -> AccessKeyRecord:
        logger.info(f"Creating access key for user {name}")
        root = parse_response(self._call("CreateAccessKey", UserName=name), "CreateAccessKeyResponse")
        record = AccessKeyRecord(
            access_key_id=find_text(root, "CreateAccessKeyResult/AccessKey/AccessKeyId"),
            secret_access_key=find_text(root, "CreateAccessKeyResult/AccessKey/SecretAccessKey"),
        )
        logger.info(
            f"Created access key {record.access_key_id} for user {name}, request id {request_id(root)}"
        )
        return record

    def delete_access_key(self, name: str, access_key_id: str) -> None:
        logger.info(f"Deleting access key {access_key_id} of user {name}")
        try:
            body = self._call("DeleteAccessKey", UserName=name, AccessKeyId=access_key_id)
        except PoeResponseError as e:
            if e.is_code(PoeErrorCode.NO_SUCH_ENTITY):
                logger.info(f"Access key {access_key_id} of user {name} does not exist")
                return
            raise

        root = parse_response(body, "DeleteAccessKeyResponse")
        logger.info(f"Deleted access key {access_key_id} of user {name}, request id {request_id(root)}")

    def list_access_keys(self, name: str) -> list[str]:
        """List access key ids of a user; an absent user has none."""
        try:
            body = self._call("ListAccessKeys", UserName=name)
        except PoeResponseError as e:
            if e.is_code(PoeErrorCode.NO_SUCH_ENTITY):
                logger.info(f"User {name} does not exist, no access keys to list")
                return []
            raise

        root = parse_response(body, "ListAccessKeysResponse")
        members = root.findall("ListAccessKeysResult/AccessKeyMetadata/member")
        key_ids = [find_text(m, "AccessKeyId") for m in members]
        return [k for k in key_ids if k]

    def close(self) -> None:
        self.client.close()
