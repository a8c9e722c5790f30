"""Storage data types, error hierarchy and the remote client protocol.

The remote client is whatever ``boto3.client("s3")`` returns. Only the four
calls the bucket handle issues are described here, so tests can substitute
an in-memory fake with the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from bucketkit.infra.storage.errors import RemoteErrorDetail


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""

    def __init__(self, message: str, *, detail: "RemoteErrorDetail | None" = None):
        super().__init__(message)
        self.detail = detail


class ConfigurationError(StorageError):
    """Raised when the remote client cannot be constructed."""


class ConnectivityError(StorageError):
    """Raised when the bucket cannot be reached with the given credentials."""


class ListError(StorageError):
    """Raised when any page of a bucket listing fails."""


class ObjectError(StorageError):
    """Raised when reading or writing a single object fails."""


class NotFoundError(ObjectError):
    """The requested key (or bucket) does not exist."""


class AccessError(ObjectError):
    """The credentials are not allowed to perform the operation."""


class TransportError(ObjectError):
    """Any other failure: network, throttling, server errors."""


@dataclass(frozen=True, slots=True)
class Credentials:
    """A static access key pair."""

    access_key: str
    secret_access_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class Object:
    """An object in a bucket.

    Listing results carry only ``key`` and ``last_modified``; objects returned
    by ``Bucket.get_object`` also carry the full payload in ``data``.
    """

    key: str
    last_modified: datetime | None = None
    data: bytes | None = None

    def __str__(self) -> str:
        return f"{self.last_modified}; {self.key}"


class S3Client(Protocol):
    """The subset of the boto3 S3 client used by ``Bucket``."""

    def head_bucket(self, *, Bucket: str) -> dict[str, Any]:
        ...

    def list_objects(
        self, *, Bucket: str, MaxKeys: int, Marker: str = ...
    ) -> dict[str, Any]:
        ...

    def get_object(self, *, Bucket: str, Key: str, **kwargs: Any) -> dict[str, Any]:
        ...

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ACL: str,
        ContentType: str,
    ) -> dict[str, Any]:
        ...
