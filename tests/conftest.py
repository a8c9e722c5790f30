from __future__ import annotations

import pytest

from bucketkit.common.config import get_settings

S3_ENV_VARS = (
    "S3_BUCKET",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_REGION",
    "S3_ENDPOINT_URL",
    "S3_ADDRESSING_STYLE",
    "S3_USE_SSL",
    "S3_ACL",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    # .env is resolved relative to the working directory
    monkeypatch.chdir(tmp_path)
    for name in S3_ENV_VARS:
        # setenv first so teardown also drops values written by _load_env_file
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
