from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY

from bucketkit.infra.storage import Bucket, NotFoundError, Object
from tests.infra.mock_s3 import MockS3Client


def _count(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "storage_operations_total", {"operation": operation, "outcome": outcome}
    )
    return value or 0.0


def _observations(operation: str) -> float:
    value = REGISTRY.get_sample_value(
        "storage_operation_duration_seconds_count", {"operation": operation}
    )
    return value or 0.0


@pytest.fixture
def bucket():
    s3 = MockS3Client()
    s3.create_bucket("reports")
    return Bucket("reports", client=s3)


def test_successful_operations_are_counted(bucket):
    before_put = _count("put_object", "ok")
    before_get = _count("get_object", "ok")
    before_latency = _observations("get_object")

    bucket.put_object(Object(key="a.json", data=b"{}"))
    bucket.get_object("a.json")

    assert _count("put_object", "ok") == before_put + 1
    assert _count("get_object", "ok") == before_get + 1
    assert _observations("get_object") == before_latency + 1


def test_failed_operations_are_counted(bucket):
    before = _count("get_object", "error")

    with pytest.raises(NotFoundError):
        bucket.get_object("missing")

    assert _count("get_object", "error") == before + 1


def test_listing_counts_once_regardless_of_pages(bucket):
    s3 = bucket.client
    for i in range(1500):
        s3.add_object("reports", f"item-{i:04d}")
    before = _count("list_objects", "ok")

    bucket.list_objects()

    assert _count("list_objects", "ok") == before + 1


def test_connection_check_is_counted():
    client = MagicMock()
    bucket = Bucket("reports", client=client)
    before = _count("test_connection", "ok")

    bucket.test_connection()

    assert _count("test_connection", "ok") == before + 1
