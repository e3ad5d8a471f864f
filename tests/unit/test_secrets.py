"""Tests for the Kubernetes credential source."""

from __future__ import annotations

import base64
from unittest.mock import Mock

import pytest
from kubernetes import client

from s3_cosi_driver.exceptions import CredentialError
from s3_cosi_driver.utils.secrets import KubernetesSecretSource


def _b64(value: bytes) -> str:
    return base64.b64encode(value).decode("utf-8")


def _api(data) -> Mock:
    api = Mock()
    secret = Mock()
    secret.data = data
    api.read_namespaced_secret.return_value = secret
    return api


class TestKubernetesSecretSource:
    """Test cases for KubernetesSecretSource."""

    def test_get_credentials(self):
        api = _api({
            "accessKey": _b64(b"AK"),
            "secretKey": _b64(b"SK"),
            "endpoint": _b64(b"https://s3.example.com\n"),
            "rootCA": _b64(b"-----BEGIN CERTIFICATE-----"),
        })

        creds = KubernetesSecretSource(api).get_credentials("cosi", "owner")

        api.read_namespaced_secret.assert_called_once_with(name="owner", namespace="cosi")
        assert creds.namespace == "cosi"
        assert creds.name == "owner"
        assert creds.access_key == "AK"
        assert creds.secret_key == "SK"
        assert creds.endpoint == "https://s3.example.com"
        assert creds.root_ca == b"-----BEGIN CERTIFICATE-----"
        assert "SK" not in repr(creds)

    def test_root_ca_is_optional(self):
        api = _api({"accessKey": _b64(b"AK"), "secretKey": _b64(b"SK"), "endpoint": _b64(b"https://s3")})
        assert KubernetesSecretSource(api).get_credentials("cosi", "owner").root_ca is None

    def test_missing_keys(self):
        api = _api({"accessKey": _b64(b"AK")})
        with pytest.raises(CredentialError, match="secretKey, endpoint"):
            KubernetesSecretSource(api).get_credentials("cosi", "owner")

    def test_empty_secret(self):
        with pytest.raises(CredentialError):
            KubernetesSecretSource(_api(None)).get_credentials("cosi", "owner")

    def test_invalid_base64(self):
        api = _api({"accessKey": "%%%not-base64%%%"})
        with pytest.raises(CredentialError, match="not valid base64"):
            KubernetesSecretSource(api).get_credentials("cosi", "owner")

    def test_secret_not_found(self):
        api = Mock()
        api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=404)
        with pytest.raises(CredentialError, match="not found"):
            KubernetesSecretSource(api).get_credentials("cosi", "owner")

    def test_other_api_error_propagates(self):
        api = Mock()
        api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=403)
        with pytest.raises(client.exceptions.ApiException):
            KubernetesSecretSource(api).get_credentials("cosi", "owner")
