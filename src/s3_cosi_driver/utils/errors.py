"""Error sanitization utilities to keep credentials out of logs and responses."""

import re
from typing import Any

# (pattern, replacement) pairs applied in order
SENSITIVE_PATTERNS = [
    # Signed-request query parameters
    (r"(AWSAccessKeyId=)[^&\s\]]+", r"\1[REDACTED]"),
    (r"(Signature=)[^&\s\]]+", r"\1[REDACTED]"),
    # XML bodies of access key responses
    (r"(<SecretAccessKey>)[^<]*(</SecretAccessKey>)", r"\1[REDACTED]\2"),
    # key: value / key=value pairs
    (
        r"((?:access[_\s]?key[_\s]?id|secret[_\s]?access[_\s]?key|access[_\s]?secret[_\s]?key"
        r"|secret[_\s]?key|access[_\s]?key|session[_\s]?token|password)['\"]?\s*[:=]\s*['\"]?)"
        r"[^\s,;&'\"\(\)\[\]]+",
        r"\1[REDACTED]",
    ),
]

# Dictionary keys whose values are redacted completely
SENSITIVE_FIELDS = {
    "accesskey",
    "access_key",
    "accesskeyid",
    "access_key_id",
    "secretkey",
    "secret_key",
    "secretaccesskey",
    "secret_access_key",
    "accesssecretkey",
    "session_token",
    "password",
    "credentials",
    "rootca",
    "root_ca",
    "signature",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with credentials redacted
    """
    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)
    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Keys are matched case-insensitively against ``SENSITIVE_FIELDS`` and
    ``sensitive_keys``. Nested dictionaries are sanitized recursively and
    string values are passed through :func:`sanitize_error_message`.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact

    Returns:
        Sanitized copy of ``data``
    """
    all_sensitive = SENSITIVE_FIELDS | {k.lower() for k in (sensitive_keys or set())}
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        if key.lower() in all_sensitive:
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
