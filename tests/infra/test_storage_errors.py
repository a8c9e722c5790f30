"""Tests for boto error inspection and translation."""

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    HTTPClientError,
    NoCredentialsError,
)

from bucketkit.infra.storage import (
    AccessError,
    ErrorKind,
    NotFoundError,
    TransportError,
)
from bucketkit.infra.storage.errors import inspect_error, translate_error
from tests.infra.mock_s3 import client_error


def test_service_error_detail():
    exc = client_error(
        "NoSuchKey",
        "The specified key does not exist.",
        "GetObject",
        status=404,
        request_id="4442587FB7D0A2F9",
    )

    detail = inspect_error(exc)

    assert detail.kind is ErrorKind.SERVICE
    assert detail.code == "NoSuchKey"
    assert detail.status_code == 404
    assert detail.request_id == "4442587FB7D0A2F9"
    assert detail.describe() == "The specified key does not exist. 404 4442587FB7D0A2F9"


def test_service_error_without_request_id():
    exc = client_error("SlowDown", "Please reduce your request rate.", "PutObject", status=503)

    assert inspect_error(exc).describe() == "Please reduce your request rate. 503"


def test_client_error_without_metadata_is_raw():
    exc = client_error("AccessDenied", "Access Denied", "GetObject")

    detail = inspect_error(exc)

    assert detail.kind is ErrorKind.RAW
    assert detail.describe() == "AccessDenied Access Denied"


def test_client_error_with_empty_response_falls_back_to_text():
    exc = ClientError({}, "GetObject")

    detail = inspect_error(exc)

    assert detail.kind is ErrorKind.RAW
    assert detail.describe() == str(exc)


def test_botocore_error_keeps_original_error():
    exc = HTTPClientError(error="timed out")

    detail = inspect_error(exc)

    assert detail.kind is ErrorKind.RAW
    assert detail.code == "HTTPClientError"
    assert detail.original == "timed out"
    assert detail.describe().endswith("timed out")


def test_unknown_error_passes_text_through():
    detail = inspect_error(RuntimeError("boom"))

    assert detail.kind is ErrorKind.UNKNOWN
    assert detail.describe() == "boom"


def test_translate_not_found():
    error = translate_error(client_error("NoSuchKey", "missing", "GetObject", status=404))

    assert isinstance(error, NotFoundError)
    assert error.detail.status_code == 404


def test_translate_not_found_by_code_only():
    error = translate_error(client_error("NoSuchBucket", "missing", "PutObject"))

    assert isinstance(error, NotFoundError)
    assert str(error) == "NoSuchBucket missing"


def test_translate_access_denied():
    error = translate_error(
        client_error("SignatureDoesNotMatch", "bad signature", "PutObject", status=403)
    )

    assert isinstance(error, AccessError)


def test_translate_missing_credentials_is_transport_error():
    error = translate_error(NoCredentialsError())

    assert isinstance(error, TransportError)
    assert "Unable to locate credentials" in str(error)


def test_translate_connection_error():
    error = translate_error(EndpointConnectionError(endpoint_url="http://localhost:9000"))

    assert isinstance(error, TransportError)
    assert error.detail.kind is ErrorKind.RAW
