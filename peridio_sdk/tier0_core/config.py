"""
peridio_sdk.tier0_core.config
──────────────────────────────
Typed configuration with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic and prefixed with PERIDIO_.

    PERIDIO_API_KEY         API token sent as ``Authorization: Token <key>``
    PERIDIO_ENDPOINT        base URL (default: production)
    PERIDIO_API_VERSION     value of the ``x-api-version`` header
    PERIDIO_CA_BUNDLE_PATH  extra PEM bundle trusted on top of the built-ins
    PERIDIO_LOG_LEVEL       DEBUG | INFO | WARNING | ERROR
    PERIDIO_LOG_FORMAT      json | console
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://api.cremini.peridio.com"
DEFAULT_API_VERSION = 2


class PeridioConfig(BaseSettings):
    """Client configuration. Only ``api_key`` has no usable default."""

    model_config = SettingsConfigDict(
        env_prefix="PERIDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── API ───────────────────────────────────────────────────────────────────
    api_key: SecretStr | None = None
    endpoint: str = Field(default=DEFAULT_ENDPOINT, min_length=1)
    api_version: int = Field(default=DEFAULT_API_VERSION, ge=1, le=255)

    # ── TLS ───────────────────────────────────────────────────────────────────
    ca_bundle_path: Path | None = None

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()


@lru_cache(maxsize=1)
def get_config() -> PeridioConfig:
    """
    Return the singleton config. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.
    """
    return PeridioConfig()


def _reset_config() -> None:
    """For tests: clear the config cache."""
    get_config.cache_clear()
