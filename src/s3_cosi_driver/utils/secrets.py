"""Reading backend account credentials from Kubernetes secrets."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol

from kubernetes import client

from ..constants import SECRET_ACCESS_KEY, SECRET_ENDPOINT, SECRET_ROOT_CA, SECRET_SECRET_KEY
from ..exceptions import CredentialError
from ..models import AccountCredentials

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (SECRET_ACCESS_KEY, SECRET_SECRET_KEY, SECRET_ENDPOINT)


class CredentialSource(Protocol):
    """Anything that can resolve an account secret reference to credentials."""

    def get_credentials(self, namespace: str, name: str) -> AccountCredentials:
        ...


def _decode(value: str | bytes, key: str, secret_name: str) -> bytes:
    if isinstance(value, bytes):
        return value
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CredentialError(f"Key '{key}' in secret '{secret_name}' is not valid base64") from e


class KubernetesSecretSource:
    """Credential source reading account secrets through the Kubernetes API."""

    def __init__(self, api: client.CoreV1Api) -> None:
        self.api = api

    def get_secret_data(self, namespace: str, name: str) -> dict[str, bytes]:
        """Read and decode all data of a secret.

        Raises:
            CredentialError: If the secret does not exist
        """
        try:
            secret = self.api.read_namespaced_secret(name=name, namespace=namespace)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                raise CredentialError(f"Secret '{name}' not found in namespace '{namespace}'") from e
            raise

        data = secret.data or {}
        return {key: _decode(value, key, name) for key, value in data.items()}

    def get_credentials(self, namespace: str, name: str) -> AccountCredentials:
        """Resolve the account secret ``namespace/name``.

        ``accessKey``, ``secretKey`` and ``endpoint`` are required, ``rootCA``
        is optional.

        Raises:
            CredentialError: If the secret is missing or incomplete
        """
        data = self.get_secret_data(namespace, name)

        missing = [key for key in REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise CredentialError(
                f"Secret '{name}' in namespace '{namespace}' is missing keys: {', '.join(missing)}"
            )

        logger.debug(f"Read account credentials from secret {namespace}/{name}")
        return AccountCredentials(
            namespace=namespace,
            name=name,
            access_key=data[SECRET_ACCESS_KEY].decode("utf-8"),
            secret_key=data[SECRET_SECRET_KEY].decode("utf-8"),
            endpoint=data[SECRET_ENDPOINT].decode("utf-8").strip(),
            root_ca=data.get(SECRET_ROOT_CA) or None,
        )
