"""Object storage layer.

A thin handle around a boto3 S3 client bound to one bucket, with the data
types and errors it exposes.
"""

from .client import (
    AccessError,
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
from .errors import ErrorKind, RemoteErrorDetail
from .s3_client import Bucket

__all__ = [
    "AccessError",
    "Bucket",
    "ConfigurationError",
    "ConnectivityError",
    "Credentials",
    "ErrorKind",
    "ListError",
    "NotFoundError",
    "Object",
    "ObjectError",
    "RemoteErrorDetail",
    "StorageError",
    "TransportError",
]
