"""Bucket policy document model."""

from __future__ import annotations

import dataclasses
import enum
import json
from dataclasses import dataclass, field
from typing import Any

POLICY_VERSION = "2012-10-17"
AWS_PRINCIPAL = "AWS"
ARN_RESOURCE_FORMAT = "arn:aws:s3:::{}"


class Effect(str, enum.Enum):
    """Statement effect, spelled the way the S3 API expects it."""

    ALLOW = "Allow"
    DENY = "Deny"


# Object operations
GET_OBJECT = "s3:GetObject"
PUT_OBJECT = "s3:PutObject"
GET_OBJECT_VERSION = "s3:GetObjectVersion"
DELETE_OBJECT_VERSION = "s3:DeleteObjectVersion"
DELETE_OBJECT = "s3:DeleteObject"
LIST_MULTIPART_UPLOAD_PARTS = "s3:ListMultipartUploadParts"
GET_OBJECT_ACL = "s3:GetObjectAcl"
GET_OBJECT_VERSION_ACL = "s3:GetObjectVersionAcl"
PUT_OBJECT_ACL = "s3:PutObjectAcl"
PUT_OBJECT_VERSION_ACL = "s3:PutObjectVersionAcl"
ABORT_MULTIPART_UPLOAD = "s3:AbortMultipartUpload"

# Bucket operations
LIST_BUCKET_MULTIPART_UPLOADS = "s3:ListBucketMultiPartUploads"
LIST_BUCKET = "s3:ListBucket"
LIST_BUCKET_VERSIONS = "s3:ListBucketVersions"

ALLOWED_READ_ACTIONS: tuple[str, ...] = (
    GET_OBJECT,
    GET_OBJECT_VERSION,
    LIST_MULTIPART_UPLOAD_PARTS,
    GET_OBJECT_ACL,
    GET_OBJECT_VERSION_ACL,
    LIST_BUCKET_VERSIONS,
    LIST_BUCKET,
    LIST_BUCKET_MULTIPART_UPLOADS,
)

ALLOWED_READ_WRITE_ACTIONS: tuple[str, ...] = ALLOWED_READ_ACTIONS + (
    ABORT_MULTIPART_UPLOAD,
    PUT_OBJECT_ACL,
    DELETE_OBJECT_VERSION,
    PUT_OBJECT_VERSION_ACL,
    PUT_OBJECT,
    DELETE_OBJECT,
)


def _as_list(value: Any) -> list[str]:
    # S3 backends collapse one-element arrays to a bare string
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


_STATEMENT_KEYS = ("Sid", "Effect", "Principal", "Action", "Resource")


@dataclass
class PolicyStatement:
    """A single policy statement, keyed by ``sid`` within a document.

    ``principal`` is either a map of principal type to ARNs or a bare
    string such as ``"*"``, kept in the form it was read. Keys the model
    does not know (``Condition``, ``NotPrincipal``, ``NotAction``, ...)
    are carried in ``extra`` and written back unchanged.
    """

    sid: str
    effect: Effect
    principal: dict[str, list[str]] | str = field(default_factory=dict)
    action: list[str] = field(default_factory=list)
    resource: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"Sid": self.sid, "Effect": self.effect.value}
        if isinstance(self.principal, str):
            data["Principal"] = self.principal
        elif self.principal:
            data["Principal"] = {k: list(v) for k, v in self.principal.items()}
        if self.action:
            data["Action"] = list(self.action)
        if self.resource:
            data["Resource"] = list(self.resource)
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyStatement:
        principal = data.get("Principal") or {}
        if not isinstance(principal, str):
            principal = {k: _as_list(v) for k, v in principal.items()}
        return cls(
            sid=data.get("Sid", ""),
            effect=Effect(data.get("Effect", Effect.ALLOW.value)),
            principal=principal,
            action=_as_list(data.get("Action")),
            resource=_as_list(data.get("Resource")),
            extra={k: v for k, v in data.items() if k not in _STATEMENT_KEYS},
        )


@dataclass
class PolicyDocument:
    """An ordered list of statements applied to one bucket.

    ``merge`` and ``remove`` return new documents and never mutate the
    receiver. Statement order is preserved by both.
    """

    statements: list[PolicyStatement] = field(default_factory=list)
    version: str = POLICY_VERSION
    id: str | None = None

    @classmethod
    def new(cls, *statements: PolicyStatement) -> PolicyDocument:
        """Create a document holding ``statements``."""
        return cls(statements=list(statements))

    def merge(self, statement: PolicyStatement) -> PolicyDocument:
        """Replace the statement with the same sid, or append it.

        Args:
            statement: Statement to merge

        Returns:
            New document with the statement in place
        """
        statements = []
        matched = False
        for existing in self.statements:
            if existing.sid == statement.sid:
                statements.append(statement)
                matched = True
            else:
                statements.append(existing)

        if not matched:
            statements.append(statement)

        return dataclasses.replace(self, statements=statements)

    def remove(self, sid: str) -> PolicyDocument:
        """Return a document without the statement identified by ``sid``."""
        return dataclasses.replace(
            self,
            statements=[s for s in self.statements if s.sid != sid],
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id:
            data["Id"] = self.id
        data["Version"] = self.version
        data["Statement"] = [s.to_dict() for s in self.statements]
        return data

    def to_json(self) -> str:
        """Serialize to the JSON shape accepted by PutBucketPolicy."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> PolicyDocument:
        """Parse a policy returned by GetBucketPolicy.

        Raises:
            ValueError: If the text is not a JSON policy object
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("bucket policy must be a JSON object")

        statements = data.get("Statement") or []
        if isinstance(statements, dict):
            statements = [statements]

        return cls(
            statements=[PolicyStatement.from_dict(s) for s in statements],
            version=data.get("Version", POLICY_VERSION),
            id=data.get("Id") or None,
        )


class StatementBuilder:
    """Fluent builder for :class:`PolicyStatement`."""

    def __init__(self) -> None:
        self._sid = ""
        self._effect = Effect.ALLOW
        self._principals: list[str] = []
        self._actions: list[str] = []
        self._resources: list[str] = []

    def with_sid(self, sid: str) -> StatementBuilder:
        self._sid = sid
        return self

    def with_effect(self, effect: Effect) -> StatementBuilder:
        self._effect = effect
        return self

    def with_principals(self, *arns: str) -> StatementBuilder:
        """Add user ARNs under the ``AWS`` principal."""
        self._principals.extend(arns)
        return self

    def with_actions(self, actions: tuple[str, ...] | list[str]) -> StatementBuilder:
        self._actions = list(actions)
        return self

    def with_resources(self, *bucket_names: str) -> StatementBuilder:
        """Add buckets as ``arn:aws:s3:::<bucket>``."""
        self._resources.extend(ARN_RESOURCE_FORMAT.format(b) for b in bucket_names)
        return self

    def with_sub_resources(self, *bucket_names: str) -> StatementBuilder:
        """Add every object of the buckets as ``arn:aws:s3:::<bucket>/*``."""
        self._resources.extend(ARN_RESOURCE_FORMAT.format(f"{b}/*") for b in bucket_names)
        return self

    def build(self) -> PolicyStatement:
        return PolicyStatement(
            sid=self._sid,
            effect=self._effect,
            principal={AWS_PRINCIPAL: list(self._principals)},
            action=list(self._actions),
            resource=list(self._resources),
        )
