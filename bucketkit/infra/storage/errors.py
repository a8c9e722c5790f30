"""Translation of boto errors into storage errors.

botocore raises two families of exceptions: ``ClientError`` when the service
answered with an error document, and ``BotoCoreError`` subclasses when the
request never produced a usable response (connection failures, missing
credentials, invalid parameters). Anything else reaching this module is
passed through as plain text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from botocore.exceptions import BotoCoreError, ClientError

from bucketkit.infra.storage.client import (
    AccessError,
    NotFoundError,
    ObjectError,
    TransportError,
)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket", "NotFound"})
ACCESS_CODES = frozenset(
    {
        "401",
        "403",
        "AccessDenied",
        "AllAccessDisabled",
        "Forbidden",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
    }
)


class ErrorKind(str, Enum):
    SERVICE = "service"
    RAW = "raw"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class RemoteErrorDetail:
    """What could be learned from a failed remote call.

    ``SERVICE`` details come from a service response and carry the HTTP
    status and request id. ``RAW`` details only have an error code, message
    and the underlying error. ``UNKNOWN`` details only have ``text``.
    """

    kind: ErrorKind
    text: str
    code: str | None = None
    message: str | None = None
    status_code: int | None = None
    request_id: str | None = None
    original: str | None = None

    def describe(self) -> str:
        if self.kind is ErrorKind.SERVICE:
            parts = [self.message, self.status_code, self.request_id]
        elif self.kind is ErrorKind.RAW:
            parts = [self.code, self.message, self.original]
        else:
            return self.text
        rendered = " ".join(str(part) for part in parts if part not in (None, ""))
        return rendered or self.text


def inspect_error(exc: BaseException) -> RemoteErrorDetail:
    """Select the most detailed representation available for ``exc``."""
    text = str(exc)
    if isinstance(exc, ClientError):
        error = exc.response.get("Error") or {}
        metadata = exc.response.get("ResponseMetadata") or {}
        code = error.get("Code")
        message = error.get("Message")
        status_code = metadata.get("HTTPStatusCode")
        if status_code is not None:
            return RemoteErrorDetail(
                kind=ErrorKind.SERVICE,
                text=text,
                code=code,
                message=message,
                status_code=int(status_code),
                request_id=metadata.get("RequestId"),
            )
        return RemoteErrorDetail(
            kind=ErrorKind.RAW,
            text=text,
            code=code,
            message=message,
        )
    if isinstance(exc, BotoCoreError):
        original = exc.kwargs.get("error")
        return RemoteErrorDetail(
            kind=ErrorKind.RAW,
            text=text,
            code=type(exc).__name__,
            message=text,
            original=str(original) if original is not None else None,
        )
    return RemoteErrorDetail(kind=ErrorKind.UNKNOWN, text=text)


def _error_class(detail: RemoteErrorDetail) -> type[ObjectError]:
    if detail.status_code == 404 or detail.code in NOT_FOUND_CODES:
        return NotFoundError
    if detail.status_code in (401, 403) or detail.code in ACCESS_CODES:
        return AccessError
    return TransportError


def translate_error(exc: BaseException) -> ObjectError:
    """Build the storage error raised for a failed get or put."""
    detail = inspect_error(exc)
    return _error_class(detail)(detail.describe(), detail=detail)
