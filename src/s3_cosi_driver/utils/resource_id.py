"""Codec for the composite ids handed to the control plane.

Bucket ids and account ids are the account secret namespace, the account
secret name and the resource name joined with ``/``. Segments are not escaped,
so a segment containing ``/`` does not survive a round trip.
"""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "/"
SEGMENT_COUNT = 3


class ResourceIdError(ValueError):
    """Base class for resource id decoding errors."""


class InvalidResourceIdFormat(ResourceIdError):
    """The id does not split into exactly three segments."""


class InvalidResourceIdValue(ResourceIdError):
    """The id has the right shape but one of its segments is empty."""


@dataclass(frozen=True)
class ResourceIdentifier:
    """Decoded composite id."""

    secret_namespace: str
    secret_name: str
    resource_name: str

    def encode(self) -> str:
        """Return the wire form of this id."""
        return encode_resource_id(self.secret_namespace, self.secret_name, self.resource_name)


def encode_resource_id(secret_namespace: str, secret_name: str, resource_name: str) -> str:
    """Join the three segments of a resource id."""
    return SEPARATOR.join((secret_namespace, secret_name, resource_name))


def decode_resource_id(resource_id: str) -> ResourceIdentifier:
    """Split a resource id into its segments.

    Args:
        resource_id: Id in ``namespace/name/resource`` form

    Returns:
        Decoded identifier

    Raises:
        InvalidResourceIdFormat: If the id does not have three segments
        InvalidResourceIdValue: If any segment is empty
    """
    parts = resource_id.split(SEPARATOR)
    if len(parts) != SEGMENT_COUNT:
        raise InvalidResourceIdFormat(f"invalid format of resource id [{resource_id}]")

    if not all(parts):
        raise InvalidResourceIdValue(f"invalid value of resource id [{resource_id}]")

    return ResourceIdentifier(*parts)
