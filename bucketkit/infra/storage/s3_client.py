"""S3 bucket handle.

This module binds a boto3 S3 client to a single bucket and maps four S3
calls (HeadBucket, ListObjects, GetObject, PutObject) onto convenience
methods. Transport, signing and retries are left entirely to boto3.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterator

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from bucketkit.common.config import DEFAULT_ACL, DEFAULT_REGION
from bucketkit.infra.observability.metrics import observe
from bucketkit.infra.storage.client import (
    ConfigurationError,
    ConnectivityError,
    Credentials,
    ListError,
    Object,
    S3Client,
    StorageError,
)
from bucketkit.infra.storage.errors import inspect_error, translate_error

if TYPE_CHECKING:
    from bucketkit.common.config import Settings

logger = logging.getLogger("bucketkit.storage")

PAGE_SIZE = 1000
CONTENT_TYPE = "application/json"
# get/put treat keys as rooted paths; listings return keys as stored.
KEY_PREFIX = "/"


def _newest_first(obj: Object) -> tuple[bool, datetime]:
    # entries without a timestamp sort last
    if obj.last_modified is None:
        return (False, datetime.min)
    return (True, obj.last_modified)


class Bucket:
    """Handle for one S3 bucket.

    Construction never touches the network; boto3 connects lazily on the
    first request. The bucket name and client are fixed for the lifetime of
    the handle. ``acl`` is applied to every upload and may be changed.

    A single handle may be shared between threads: it holds no mutable state
    of its own besides ``acl``, and boto3 clients are thread-safe.
    """

    def __init__(
        self,
        name: str,
        credentials: Credentials | None = None,
        *,
        region: str = DEFAULT_REGION,
        acl: str = DEFAULT_ACL,
        endpoint_url: str | None = None,
        addressing_style: str | None = None,
        use_ssl: bool = True,
        client: S3Client | None = None,
    ) -> None:
        """Create a handle for ``name``.

        Args:
            name: Bucket name.
            credentials: Static access key pair. When omitted, boto3 falls
                back to its default credential chain.
            region: Region the client is configured for.
            acl: Canned ACL applied to uploaded objects.
            endpoint_url: Endpoint of an S3-compatible service (e.g. MinIO).
            addressing_style: ``path``, ``virtual`` or ``auto``.
            use_ssl: Whether to use HTTPS.
            client: Pre-built S3 client; skips client construction.

        Raises:
            ConfigurationError: If the boto3 client cannot be created.
        """
        self._name = name
        self._region = region
        self.acl = acl
        self.credentials = credentials
        if client is None:
            client = self._build_client(
                credentials,
                region=region,
                endpoint_url=endpoint_url,
                addressing_style=addressing_style,
                use_ssl=use_ssl,
            )
        self._client = client

    @classmethod
    def new(
        cls,
        bucket: str,
        access_key: str,
        secret_access_key: str,
        *,
        region: str = DEFAULT_REGION,
    ) -> "Bucket":
        """Create a handle from a bucket name and an access key pair."""
        return cls(
            bucket,
            Credentials(access_key=access_key, secret_access_key=secret_access_key),
            region=region,
        )

    @classmethod
    def from_settings(
        cls, settings: "Settings", *, bucket: str | None = None
    ) -> "Bucket":
        """Create a handle from application settings.

        ``bucket`` overrides ``settings.S3_BUCKET``.
        """
        name = bucket or settings.S3_BUCKET
        if not name:
            raise ConfigurationError("S3_BUCKET is not configured")
        credentials = None
        if settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY:
            credentials = Credentials(
                access_key=settings.S3_ACCESS_KEY_ID,
                secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            )
        return cls(
            name,
            credentials,
            region=settings.S3_REGION,
            acl=settings.S3_ACL,
            endpoint_url=settings.S3_ENDPOINT_URL,
            addressing_style=settings.S3_ADDRESSING_STYLE,
            use_ssl=settings.S3_USE_SSL,
        )

    @staticmethod
    def _build_client(
        credentials: Credentials | None,
        *,
        region: str,
        endpoint_url: str | None,
        addressing_style: str | None,
        use_ssl: bool,
    ) -> Any:
        """Create a boto3 S3 client."""
        config = None
        if addressing_style:
            config = Config(s3={"addressing_style": addressing_style})

        params: dict[str, Any] = {
            "region_name": region,
            "use_ssl": use_ssl,
            "config": config,
        }
        if endpoint_url:
            params["endpoint_url"] = endpoint_url
        if credentials is not None:
            params["aws_access_key_id"] = credentials.access_key
            params["aws_secret_access_key"] = credentials.secret_access_key

        try:
            return boto3.client("s3", **params)
        except (BotoCoreError, ValueError) as exc:
            raise ConfigurationError(
                f"Failed to create S3 client: {exc}", detail=inspect_error(exc)
            ) from exc

    @property
    def name(self) -> str:
        return self._name

    @property
    def region(self) -> str:
        return self._region

    @property
    def client(self) -> S3Client:
        return self._client

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"region={self._region!r}, acl={self.acl!r})"
        )

    @contextmanager
    def _operation(self, operation: str, key: str | None = None) -> Iterator[None]:
        start = time.perf_counter()
        with observe(operation):
            try:
                yield
            except StorageError as exc:
                duration_ms = round((time.perf_counter() - start) * 1000, 3)
                logger.warning(
                    "storage_error operation=%s bucket=%s key=%s duration_ms=%.3f error=%s",
                    operation,
                    self._name,
                    key or "-",
                    duration_ms,
                    exc,
                    extra={
                        "extra": {
                            "operation": operation,
                            "bucket": self._name,
                            "key": key,
                            "duration_ms": duration_ms,
                            "error_type": type(exc).__name__,
                        }
                    },
                )
                raise
        duration_ms = round((time.perf_counter() - start) * 1000, 3)
        logger.debug(
            "storage_ok operation=%s bucket=%s key=%s duration_ms=%.3f",
            operation,
            self._name,
            key or "-",
            duration_ms,
        )

    def test_connection(self) -> None:
        """Check that the bucket exists and the credentials may access it.

        Raises:
            ConnectivityError: With the raw remote error text as message.
        """
        with self._operation("test_connection"):
            try:
                self._client.head_bucket(Bucket=self._name)
            except Exception as exc:
                raise ConnectivityError(str(exc), detail=inspect_error(exc)) from exc

    def iter_objects(self) -> Iterator[Object]:
        """Yield every object in the bucket, page by page, in service order.

        Each page holds up to ``PAGE_SIZE`` entries and resumes after the
        last key of the previous page. Objects carry no payload.

        Raises:
            ListError: If a page request fails. Objects already yielded are
                not revoked; use ``list_objects`` for all-or-nothing results.
        """
        marker: str | None = None
        while True:
            params: dict[str, Any] = {"Bucket": self._name, "MaxKeys": PAGE_SIZE}
            if marker:
                params["Marker"] = marker
            try:
                response = self._client.list_objects(**params)
            except Exception as exc:
                detail = inspect_error(exc)
                raise ListError(
                    f"Failed to list objects in {self._name}: {detail.describe()}",
                    detail=detail,
                ) from exc

            contents = response.get("Contents") or []
            for entry in contents:
                marker = entry["Key"]
                yield Object(key=entry["Key"], last_modified=entry.get("LastModified"))

            if not response.get("IsTruncated"):
                return
            if not contents:
                next_marker = response.get("NextMarker")
                if not next_marker:
                    raise ListError(
                        f"Failed to list objects in {self._name}: "
                        "truncated page without entries"
                    )
                marker = next_marker

    def list_objects(self) -> list[Object]:
        """Return every object in the bucket, most recently modified first.

        The whole listing is held in memory before sorting. Order among
        objects with equal timestamps is unspecified.

        Raises:
            ListError: If any page request fails; no partial result is
                returned.
        """
        with self._operation("list_objects"):
            objects = list(self.iter_objects())
            objects.sort(key=_newest_first, reverse=True)
        return objects

    def get_object(self, key: str) -> Object:
        """Download ``key`` fully into memory.

        The request is made for ``"/" + key``; the returned object keeps the
        key as given.

        Raises:
            NotFoundError: The key or bucket does not exist.
            AccessError: The credentials may not read the object.
            TransportError: Any other failure.
        """
        with self._operation("get_object", key):
            try:
                response = self._client.get_object(
                    Bucket=self._name,
                    Key=KEY_PREFIX + key,
                    ResponseExpires=datetime.now(timezone.utc),
                )
                data = response["Body"].read()
            except Exception as exc:
                raise translate_error(exc) from exc
        return Object(key=key, last_modified=response.get("LastModified"), data=data)

    def put_object(self, obj: Object) -> None:
        """Upload ``obj.data`` to ``"/" + obj.key``.

        The upload uses the handle's ``acl`` and a fixed JSON content type.

        Raises:
            AccessError: The credentials may not write the object.
            TransportError: Any other failure.
        """
        body = obj.data if obj.data is not None else b""
        with self._operation("put_object", obj.key):
            try:
                self._client.put_object(
                    Bucket=self._name,
                    Key=KEY_PREFIX + obj.key,
                    Body=body,
                    ACL=self.acl,
                    ContentType=CONTENT_TYPE,
                )
            except Exception as exc:
                raise translate_error(exc) from exc
