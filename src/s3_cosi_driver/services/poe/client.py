"""Signed-request client for the storage user-management endpoint.

Every call is an HTTPS ``GET`` on ``/poe/rest`` carrying the action and its
arguments as query parameters. Requests are signed with HMAC-SHA256 over the
method, host, URI and the sorted query string.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from typing import Mapping
from urllib.parse import quote_plus, urlsplit

import httpx

from ...constants import POE_PORT, POE_TIMEOUT_SECONDS, POE_URI
from ...metrics import track_backend_call
from ...utils.tls import TLSConfig
from .errors import PoeConfigError, PoeError, error_from_response

logger = logging.getLogger(__name__)

ACTION_KEY = "Action"
ACCESS_KEY_ID_KEY = "AWSAccessKeyId"
SIGNATURE_METHOD_KEY = "SignatureMethod"
SIGNATURE_VERSION_KEY = "SignatureVersion"
SIGNATURE_KEY = "Signature"
TIMESTAMP_KEY = "Timestamp"

SIGNATURE_METHOD = "HmacSHA256"
SIGNATURE_VERSION = "4"


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` in UTC with one fractional digit, e.g. ``2024-01-02T03:04:05.6Z``."""
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 100000}Z"


def sorted_query_string(params: Mapping[str, str]) -> str:
    """Join params as ``key=value`` pairs sorted by key.

    Values are form-encoded (space becomes ``+``); keys are used verbatim.
    """
    return "&".join(f"{key}={quote_plus(params[key], safe='')}" for key in sorted(params))


def string_to_sign(method: str, host: str, uri: str, query: str) -> str:
    return f"{method}\n{host}\n{uri}\n{query}"


def normalize_endpoint(endpoint: str) -> str:
    """Rewrite ``endpoint`` to ``scheme://hostname:9443``.

    Raises:
        PoeConfigError: If the endpoint is empty or has no scheme or host
    """
    if not endpoint:
        raise PoeConfigError("endpoint is empty")

    parts = urlsplit(endpoint)
    if not parts.scheme or not parts.hostname:
        raise PoeConfigError(f"endpoint [{endpoint}] must include a scheme and a host")

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    return f"{parts.scheme}://{host}:{POE_PORT}"


class PoeClient:
    """Low-level signed-request client."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        tls: TLSConfig,
        timeout: float = POE_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Storage endpoint; only its scheme and host are kept
            access_key: Administrative access key
            secret_key: Administrative secret key
            tls: Certificate verification settings
            timeout: Request timeout in seconds
            http_client: Pre-built HTTP client, mainly for tests
        """
        self.endpoint = normalize_endpoint(endpoint)
        if not access_key:
            raise PoeConfigError("access key is empty")
        if not secret_key:
            raise PoeConfigError("secret key is empty")

        self.access_key = access_key
        self._secret_key = secret_key
        self.tls = tls
        self.host = self.endpoint.split("//", 1)[1]

        if http_client is None:
            http_client = httpx.Client(verify=tls.ssl_context(), timeout=timeout)
        self._http = http_client

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> PoeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _sign(self, text: str) -> str:
        digest = hmac.new(self._secret_key.encode("utf-8"), text.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def signed_query(self, params: Mapping[str, str], timestamp: datetime) -> str:
        """Return the signed query string for ``params`` at ``timestamp``.

        ``params`` is not modified.
        """
        signed = dict(params)
        signed[ACCESS_KEY_ID_KEY] = self.access_key
        signed[SIGNATURE_METHOD_KEY] = SIGNATURE_METHOD
        signed[SIGNATURE_VERSION_KEY] = SIGNATURE_VERSION
        signed[TIMESTAMP_KEY] = format_timestamp(timestamp)

        text = string_to_sign("GET", self.host, POE_URI, sorted_query_string(signed))
        signed[SIGNATURE_KEY] = self._sign(text)
        return sorted_query_string(signed)

    def call(self, params: Mapping[str, str] | None) -> bytes:
        """Send one signed request.

        Args:
            params: Action and action arguments

        Returns:
            Raw response body of a successful call

        Raises:
            PoeConfigError: If params is None
            PoeResponseError: If the endpoint answered with an error envelope
            PoeError: If the request could not be sent or the error body is unreadable
        """
        if params is None:
            raise PoeConfigError("request params are empty")

        action = params.get(ACTION_KEY, "unknown")
        url = f"{self.endpoint}{POE_URI}?{self.signed_query(params, datetime.now(timezone.utc))}"

        with track_backend_call("poe", action):
            try:
                response = self._http.get(url)
            except httpx.HTTPError as e:
                logger.error(f"User-management request {action} failed: {e}")
                raise PoeError(f"{action} request failed: {e}") from e

            if response.status_code != httpx.codes.OK:
                logger.error(f"User-management request {action} returned HTTP {response.status_code}")
                raise error_from_response(response.content, response.status_code)

        return response.content
