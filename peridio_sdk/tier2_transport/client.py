"""
peridio_sdk.tier2_transport.client
───────────────────────────────────
The request executor. Every resource call goes through ``Api.execute``:

    1. URL = endpoint + path
    2. caller headers (validated), then ``Authorization: Token <key>`` and
       ``x-api-version: <n>``
    3. query pairs in the order given
    4. JSON or multipart body
    5. one attempt over the shared ``httpx.AsyncClient``
    6. status classification:
         200/201 → decoded body    204 → None (body never read)
         anything else → a typed ApiStatusError

No retries, no logging of credentials. Wrap calls with
``tier1_runtime.retry.retry_policy`` to retry transient failures.
"""
from __future__ import annotations

import re
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from peridio_sdk.tier0_core.config import DEFAULT_API_VERSION, DEFAULT_ENDPOINT, PeridioConfig, get_config
from peridio_sdk.tier0_core.errors import (
    BadResponseError,
    ConfigurationError,
    RequestBuildError,
    RequestFailedError,
)
from peridio_sdk.tier0_core.http import HTTP, error_from_response, is_success
from peridio_sdk.tier0_core.logging import get_logger
from peridio_sdk.tier1_runtime.query import QueryParams
from peridio_sdk.tier1_runtime.serialize import Body, JsonBody, MultipartBody, deserialize
from peridio_sdk.tier2_transport.trust import build_ssl_context
from peridio_sdk.tier3_resources.artifacts import ArtifactsApi
from peridio_sdk.tier3_resources.firmwares import FirmwaresApi
from peridio_sdk.tier3_resources.products import ProductsApi
from peridio_sdk.tier3_resources.signatures import (
    BINARY_SIGNATURES,
    BUNDLE_SIGNATURES,
    SignaturesApi,
)
from peridio_sdk.tier3_resources.users import UsersApi

logger = get_logger(__name__)

Headers = Sequence[tuple[str, str]]

# RFC 7230 token characters.
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_FORBIDDEN_VALUE_CHARS = ("\r", "\n", "\0")


@dataclass(frozen=True)
class ApiOptions:
    """Constructor arguments for ``Api``."""
    api_key: str
    endpoint: str | None = None
    ca_bundle_path: str | Path | None = None
    api_version: int = DEFAULT_API_VERSION


def _check_header(name: str, value: str) -> None:
    if not _HEADER_NAME.match(name):
        raise RequestBuildError(
            user_message="Bad request parameters.",
            detail=f"Invalid header name {name!r}",
        )
    if any(char in value for char in _FORBIDDEN_VALUE_CHARS):
        raise RequestBuildError(
            user_message="Bad request parameters.",
            detail=f"Invalid value for header {name!r}",
        )
    try:
        value.encode("ascii")
    except UnicodeEncodeError as exc:
        raise RequestBuildError(
            user_message="Bad request parameters.",
            detail=f"Header {name!r} value is not ASCII",
        ) from exc


class Api:
    """
    Async client for the Peridio REST API.

    Usage::

        async with Api(ApiOptions(api_key="...")) as api:
            response = await api.products().get(GetProductParams(prn=prn))

    The underlying connection pool is shared, read-only, by concurrent calls.
    """

    def __init__(
        self,
        options: ApiOptions,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = options.api_key
        self.endpoint = (options.endpoint or DEFAULT_ENDPOINT).rstrip("/")
        self.api_version = options.api_version
        self._http = httpx.AsyncClient(
            verify=build_ssl_context(options.ca_bundle_path),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: PeridioConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Api:
        """Build a client from PERIDIO_* settings."""
        config = config or get_config()
        if config.api_key is None:
            raise ConfigurationError(
                "missing_api_key",
                "No API key configured. Set PERIDIO_API_KEY.",
            )
        options = ApiOptions(
            api_key=config.api_key.get_secret_value(),
            endpoint=config.endpoint,
            ca_bundle_path=config.ca_bundle_path,
            api_version=config.api_version,
        )
        return cls(options, transport=transport)

    def __repr__(self) -> str:
        return f"Api(endpoint={self.endpoint!r}, api_version={self.api_version})"

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> Api:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ── Execution ────────────────────────────────────────────────────────────

    async def execute(
        self,
        method: str,
        path: str,
        body: Body | None = None,
        *,
        params: QueryParams | None = None,
        headers: Headers | None = None,
        response_type: Any = Any,
    ) -> Any:
        """
        Send one request and decode the response into *response_type*.
        Returns None for 204; raises a PeridioError subclass otherwise.
        """
        method = method.upper()
        url = f"{self.endpoint}{path}"
        request = self._build_request(method, url, body, params or [], headers or [])

        logger.debug("api.request", method=method, url=url, query=params or [])
        started = time.monotonic()
        try:
            response = await self._http.send(request, stream=True)
        except httpx.RequestError as exc:
            raise RequestFailedError(
                user_message="API request failed.",
                detail=f"Api request failed with error: {exc}",
                method=method,
                url=url,
            ) from exc

        try:
            logger.debug(
                "api.response",
                method=method,
                url=url,
                status=response.status_code,
                elapsed_ms=round((time.monotonic() - started) * 1000, 2),
            )
            if response.status_code == HTTP.NO_CONTENT:
                return None
            text = await self._read_text(response)
            if is_success(response.status_code):
                return deserialize(text, response_type)
            raise error_from_response(response.status_code, text)
        finally:
            await response.aclose()

    async def execute_with_params(
        self,
        method: str,
        path: str,
        body: Body | None,
        params: QueryParams,
        *,
        response_type: Any = Any,
    ) -> Any:
        return await self.execute(method, path, body, params=params, response_type=response_type)

    async def execute_with_headers(
        self,
        method: str,
        path: str,
        body: Body | None,
        headers: Headers,
        *,
        response_type: Any = Any,
    ) -> Any:
        return await self.execute(method, path, body, headers=headers, response_type=response_type)

    def _build_request(
        self,
        method: str,
        url: str,
        body: Body | None,
        params: QueryParams,
        headers: Headers,
    ) -> httpx.Request:
        for name, value in headers:
            _check_header(name, value)

        kwargs: dict[str, Any] = {}
        if isinstance(body, JsonBody):
            kwargs["content"] = body.content
        elif isinstance(body, MultipartBody):
            kwargs["files"] = body.files
            if body.data:
                kwargs["data"] = body.data

        try:
            request_headers = httpx.Headers(list(headers))
            request_headers["Authorization"] = f"Token {self._api_key}"
            request_headers["x-api-version"] = str(self.api_version)
            if isinstance(body, JsonBody):
                request_headers["Content-Type"] = body.content_type
            return self._http.build_request(
                method,
                url,
                params=list(params),
                headers=request_headers,
                **kwargs,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise RequestBuildError(
                user_message="Bad request parameters.",
                detail=f"Bad request {exc}",
                method=method,
                url=url,
            ) from exc

    @staticmethod
    async def _read_text(response: httpx.Response) -> str:
        try:
            await response.aread()
        except (httpx.RequestError, httpx.StreamError) as exc:
            raise BadResponseError(
                user_message="Bad response.",
                detail=f"Bad response {exc}",
                status_code=response.status_code,
            ) from exc
        return response.text

    # ── Resources ────────────────────────────────────────────────────────────

    def artifacts(self) -> ArtifactsApi:
        return ArtifactsApi(self)

    def binary_signatures(self) -> SignaturesApi:
        return SignaturesApi(self, BINARY_SIGNATURES)

    def bundle_signatures(self) -> SignaturesApi:
        return SignaturesApi(self, BUNDLE_SIGNATURES)

    def firmwares(self) -> FirmwaresApi:
        return FirmwaresApi(self)

    def products(self) -> ProductsApi:
        return ProductsApi(self)

    def users(self) -> UsersApi:
        return UsersApi(self)


__all__ = ["Api", "ApiOptions"]
