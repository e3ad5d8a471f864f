"""Errors reported by the user-management endpoint."""

from __future__ import annotations

import enum


class PoeErrorCode(str, enum.Enum):
    """Backend error codes with a known meaning."""

    NO_SUCH_ENTITY = "NoSuchEntity"


class PoeError(Exception):
    """A call to the user-management endpoint could not be completed."""


class PoeConfigError(PoeError, ValueError):
    """The client or a call was configured with invalid values."""


class PoeResponseError(PoeError):
    """The endpoint answered with an error envelope.

    Args:
        code: Backend error code (``Error/Code``)
        message: Backend error message (``Error/Message``)
        request_id: Backend request id
        status_code: HTTP status of the response
    """

    def __init__(self, code: str, message: str, request_id: str, status_code: int):
        self.code = code
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(
            f"error response: code is [{code}], msg is [{message}], requestId is [{request_id}]"
        )

    def is_code(self, code: PoeErrorCode) -> bool:
        """Check whether this error carries ``code``."""
        return self.code == code.value


def error_from_response(body: bytes, status_code: int) -> PoeError:
    """Build the error for a non-success response body.

    The body is expected to be an ``ErrorResponse`` envelope. A body that
    cannot be parsed yields a plain :class:`PoeError`.
    """
    from .parsing import find_text, parse_document

    try:
        root = parse_document(body)
    except PoeError:
        text = body.decode("utf-8", errors="replace")
        return PoeError(f"failed to parse error response (HTTP {status_code}), body is [{text}]")

    if root.tag != "ErrorResponse":
        return PoeError(f"unexpected error response element <{root.tag}> (HTTP {status_code})")

    return PoeResponseError(
        code=find_text(root, "Error/Code"),
        message=find_text(root, "Error/Message"),
        request_id=find_text(root, "RequestId"),
        status_code=status_code,
    )
