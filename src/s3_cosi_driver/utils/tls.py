"""TLS settings shared by the backend clients."""

from __future__ import annotations

import enum
import logging
import os
import ssl
import tempfile
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class TLSMode(enum.Enum):
    """How server certificates are checked."""

    VERIFY = "verify"
    TRUST_ALL = "trust-all"


@dataclass(frozen=True)
class TLSConfig:
    """TLS configuration for a backend client.

    ``VERIFY`` trusts only ``root_ca``. ``TRUST_ALL`` skips certificate
    verification entirely.
    """

    mode: TLSMode
    root_ca: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.mode is TLSMode.VERIFY and not self.root_ca:
            raise ValueError("root CA is required when TLS mode is verify")

    @classmethod
    def from_root_ca(cls, root_ca: bytes | None) -> TLSConfig:
        """Verify against ``root_ca`` if one is given, otherwise trust all."""
        if root_ca:
            return cls(TLSMode.VERIFY, root_ca)
        logger.warning("No root CA configured, backend TLS certificates will not be verified")
        return cls(TLSMode.TRUST_ALL)

    def ssl_context(self) -> ssl.SSLContext:
        """Build an SSL context for this configuration."""
        if self.mode is TLSMode.TRUST_ALL:
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            return ctx

        ctx = ssl.create_default_context(cadata=self.root_ca.decode("utf-8"))
        ctx.minimum_version = ssl.TLSVersion.TLSv1_2
        return ctx

    def write_ca_bundle(self) -> str | None:
        """Write the root CA to a temporary PEM file.

        boto3 only accepts a CA bundle path, not in-memory certificates.

        Returns:
            Path of the written bundle, or None in trust-all mode
        """
        if self.mode is TLSMode.TRUST_ALL:
            return None

        fd, path = tempfile.mkstemp(prefix="s3-cosi-ca-", suffix=".pem")
        with os.fdopen(fd, "wb") as f:
            f.write(self.root_ca)
        return path
