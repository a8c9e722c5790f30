from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

DEFAULT_REGION = "eu-west-1"
DEFAULT_ACL = "private"

ADDRESSING_STYLES: tuple[str, ...] = ("auto", "path", "virtual")
LOG_FORMATS: tuple[str, ...] = ("json", "plain")
LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Settings:
    S3_BUCKET: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_REGION: str = DEFAULT_REGION
    S3_ENDPOINT_URL: str | None = None
    S3_ADDRESSING_STYLE: str | None = None
    S3_USE_SSL: bool = True
    S3_ACL: str = DEFAULT_ACL
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    def __post_init__(self) -> None:
        if self.S3_ADDRESSING_STYLE is None and self.S3_ENDPOINT_URL:
            # S3-compatible servers rarely resolve bucket subdomains.
            self.S3_ADDRESSING_STYLE = "path"
        if self.S3_ADDRESSING_STYLE is not None:
            style = self.S3_ADDRESSING_STYLE.strip().lower()
            if style not in ADDRESSING_STYLES:
                raise ValueError(
                    "S3_ADDRESSING_STYLE must be one of: "
                    + ", ".join(ADDRESSING_STYLES)
                )
            self.S3_ADDRESSING_STYLE = style
        log_format = self.LOG_FORMAT.strip().lower()
        if log_format not in LOG_FORMATS:
            raise ValueError("LOG_FORMAT must be one of: " + ", ".join(LOG_FORMATS))
        self.LOG_FORMAT = log_format
        log_level = self.LOG_LEVEL.strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError("LOG_LEVEL must be one of: " + ", ".join(LOG_LEVELS))
        self.LOG_LEVEL = log_level

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            S3_BUCKET=_as_optional(os.environ.get("S3_BUCKET")),
            S3_ACCESS_KEY_ID=_as_optional(os.environ.get("S3_ACCESS_KEY_ID")),
            S3_SECRET_ACCESS_KEY=_as_optional(os.environ.get("S3_SECRET_ACCESS_KEY")),
            S3_REGION=os.environ.get("S3_REGION") or cls.S3_REGION,
            S3_ENDPOINT_URL=_as_optional(os.environ.get("S3_ENDPOINT_URL")),
            S3_ADDRESSING_STYLE=_as_optional(os.environ.get("S3_ADDRESSING_STYLE")),
            S3_USE_SSL=_as_bool(os.environ.get("S3_USE_SSL"), cls.S3_USE_SSL),
            S3_ACL=os.environ.get("S3_ACL") or cls.S3_ACL,
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL),
            LOG_FORMAT=os.environ.get("LOG_FORMAT", cls.LOG_FORMAT),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
