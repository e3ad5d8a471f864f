"""Builders for backend clients."""

from __future__ import annotations

import logging

from kubernetes import client, config

from ..constants import USER_CLIENT_POE
from ..models import AccountCredentials
from ..services.aws.client import AWSProvider
from ..services.poe import PoeClient, PoeUserClient
from ..services.s3 import S3Provider
from ..services.users import UserProvider
from ..utils.tls import TLSConfig

logger = logging.getLogger(__name__)


def create_core_v1_api(kubeconfig_path: str = "") -> client.CoreV1Api:
    """Create a Kubernetes core API client.

    Args:
        kubeconfig_path: Path to a kubeconfig file; empty means in-cluster
            configuration

    Returns:
        Core v1 API client
    """
    if kubeconfig_path:
        config.load_kube_config(config_file=kubeconfig_path)
    else:
        config.load_incluster_config()
    return client.CoreV1Api()


def create_s3_provider(credentials: AccountCredentials) -> S3Provider:
    """Create an object-storage client from an account credential bundle.

    Raises:
        ValueError: If the credentials are incomplete
    """
    return AWSProvider(
        endpoint=credentials.endpoint,
        access_key=credentials.access_key,
        secret_key=credentials.secret_key,
        tls=TLSConfig.from_root_ca(credentials.root_ca),
    )


def create_user_client(credentials: AccountCredentials, client_type: str = USER_CLIENT_POE) -> UserProvider:
    """Create a user-management client from an account credential bundle.

    Args:
        credentials: Account credentials
        client_type: Backend user-management flavour

    Raises:
        ValueError: If ``client_type`` is not supported or the credentials
            are incomplete
    """
    if client_type != USER_CLIENT_POE:
        raise ValueError(f"unsupported user client type [{client_type}]")

    poe = PoeClient(
        endpoint=credentials.endpoint,
        access_key=credentials.access_key,
        secret_key=credentials.secret_key,
        tls=TLSConfig.from_root_ca(credentials.root_ca),
    )
    return PoeUserClient(poe)
