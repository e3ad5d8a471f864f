"""XML helpers for user-management responses.

Responses may or may not carry an XML namespace, so elements are matched by
local name only.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .errors import PoeError


def _strip_namespaces(root: ET.Element) -> ET.Element:
    for el in root.iter():
        if isinstance(el.tag, str) and "}" in el.tag:
            el.tag = el.tag.split("}", 1)[1]
    return root


def parse_document(body: bytes) -> ET.Element:
    """Parse ``body`` and return its namespace-free root element.

    Raises:
        PoeError: If the body is not well-formed XML
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise PoeError(f"failed to parse response body: {e}") from e
    return _strip_namespaces(root)


def parse_response(body: bytes, expected_root: str) -> ET.Element:
    """Parse a success response and check its root element name.

    Raises:
        PoeError: If the body is malformed or has an unexpected root
    """
    root = parse_document(body)
    if root.tag != expected_root:
        raise PoeError(f"unexpected response element <{root.tag}>, expected <{expected_root}>")
    return root


def find_text(element: ET.Element, path: str) -> str:
    """Return the text at ``path`` below ``element``, or an empty string."""
    found = element.find(path)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def request_id(root: ET.Element) -> str:
    """Return the request id from a response's metadata block."""
    return find_text(root, "ResponseMetadata/RequestId")
