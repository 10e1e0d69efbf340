"""
peridio_sdk test configuration.

All HTTP traffic goes through httpx.MockTransport; no network required.
"""
from __future__ import annotations

import os

import httpx
import pytest

# ── Pin the environment ───────────────────────────────────────────────────
# These must be set before any peridio_sdk modules are imported.

os.environ.setdefault("PERIDIO_LOG_LEVEL", "WARNING")
os.environ.setdefault("PERIDIO_LOG_FORMAT", "json")
os.environ.pop("PERIDIO_API_KEY", None)
os.environ.pop("PERIDIO_CA_BUNDLE_PATH", None)

API_KEY = "test-api-key"
ENDPOINT = "https://api.test.peridio.com"


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_config():
    """Each test reads the environment afresh."""
    from peridio_sdk.tier0_core.config import _reset_config

    _reset_config()
    yield
    _reset_config()


class Recorder:
    """Collects every request the mock server receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    @property
    def count(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_api(recorder):
    """
    Build an Api whose transport answers with *handler*.

    ``handler`` may be an httpx.Response (copied for every call) or a
    callable taking the request.
    """
    from peridio_sdk.tier2_transport.client import Api, ApiOptions

    def _make(handler, *, api_version: int = 2, ca_bundle_path=None):
        def _handle(request: httpx.Request) -> httpx.Response:
            recorder.requests.append(request)
            if isinstance(handler, httpx.Response):
                return httpx.Response(
                    handler.status_code,
                    headers=handler.headers,
                    content=handler.content,
                )
            return handler(request)

        options = ApiOptions(
            api_key=API_KEY,
            endpoint=ENDPOINT,
            ca_bundle_path=ca_bundle_path,
            api_version=api_version,
        )
        return Api(options, transport=httpx.MockTransport(_handle))

    return _make
