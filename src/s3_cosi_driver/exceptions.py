"""Exception types raised by the S3 COSI driver."""

from __future__ import annotations


class RequestValidationError(ValueError):
    """A request is malformed and was rejected before any backend call."""


class CredentialError(ValueError):
    """Backend credentials could not be read or are incomplete."""


class BackendError(Exception):
    """A backend call failed with a condition that is not tolerated.

    Args:
        operation: Backend operation that failed (e.g. ``put_bucket_policy``)
        resource: Name of the bucket or user the operation targeted
        cause: Underlying exception
    """

    def __init__(self, operation: str, resource: str, cause: Exception | None = None):
        self.operation = operation
        self.resource = resource
        self.cause = cause
        message = f"{operation} on {resource} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ProvisionerError(Exception):
    """Error surfaced to the control plane.

    The control plane only distinguishes status codes coarsely, so every
    failure is reported as ``INTERNAL`` with a descriptive message.
    """

    code = "INTERNAL"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
