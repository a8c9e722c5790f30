"""Convenience wrapper for listing, reading and writing objects in one S3 bucket."""

from bucketkit.infra.storage import (
    AccessError,
    Bucket,
    ConfigurationError,
    ConnectivityError,
    Credentials,
    ListError,
    NotFoundError,
    Object,
    ObjectError,
    StorageError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "AccessError",
    "Bucket",
    "ConfigurationError",
    "ConnectivityError",
    "Credentials",
    "ListError",
    "NotFoundError",
    "Object",
    "ObjectError",
    "StorageError",
    "TransportError",
]
