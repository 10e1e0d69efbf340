"""Tests for the trust store and the request executor."""
from __future__ import annotations

import asyncio
import ssl
from typing import Any

import httpx
import pytest
from pydantic import BaseModel

from peridio_sdk.tier0_core.config import PeridioConfig
from peridio_sdk.tier0_core.errors import (
    BadResponseError,
    ConfigurationError,
    ConflictError,
    InternalServerError,
    JsonDeserializationError,
    NotFoundError,
    RequestBuildError,
    RequestFailedError,
    UnauthorizedError,
    UnknownError,
    UnprocessableEntityError,
)
from peridio_sdk.tier1_runtime.serialize import json_body, multipart_body
from peridio_sdk.tier2_transport.client import Api, ApiOptions
from peridio_sdk.tier2_transport.trust import (
    EMBEDDED_ROOTS,
    build_ssl_context,
    embedded_roots,
    load_ca_bundle,
)


class Widget(BaseModel):
    name: str


# ── trust ──────────────────────────────────────────────────────────────────

class TestTrust:
    def test_embedded_roots_are_pem(self):
        roots = embedded_roots()
        assert len(roots) == len(EMBEDDED_ROOTS) == 3
        for pem in roots:
            assert pem.startswith("-----BEGIN CERTIFICATE-----")

    def test_embedded_roots_load_once(self):
        assert embedded_roots() is embedded_roots()

    def test_default_context_verifies(self):
        context = build_ssl_context()
        assert isinstance(context, ssl.SSLContext)
        assert context.verify_mode == ssl.CERT_REQUIRED

    def test_caller_bundle_is_added(self, tmp_path):
        bundle = tmp_path / "ca.pem"
        bundle.write_text(embedded_roots()[0])
        before = build_ssl_context().cert_store_stats()["x509_ca"]
        after = build_ssl_context(bundle).cert_store_stats()["x509_ca"]
        assert after >= before

    def test_missing_bundle_is_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            build_ssl_context(tmp_path / "missing.pem")
        assert exc_info.value.code == "invalid_ca_bundle"

    def test_directory_bundle_is_configuration_error(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_ca_bundle(tmp_path)

    def test_non_pem_bundle_is_configuration_error(self, tmp_path):
        bundle = tmp_path / "ca.pem"
        bundle.write_text("hello")
        with pytest.raises(ConfigurationError):
            load_ca_bundle(bundle)

    def test_unparseable_bundle_is_configuration_error(self, tmp_path):
        bundle = tmp_path / "ca.pem"
        bundle.write_text("-----BEGIN CERTIFICATE-----\n!!!!\n-----END CERTIFICATE-----\n")
        with pytest.raises(ConfigurationError):
            build_ssl_context(bundle)

    def test_api_construction_fails_on_bad_bundle(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Api(ApiOptions(api_key="k", ca_bundle_path=tmp_path / "nope.pem"))


# ── construction ───────────────────────────────────────────────────────────

class TestConstruction:
    def test_defaults(self):
        api = Api(ApiOptions(api_key="k"))
        assert api.endpoint == "https://api.cremini.peridio.com"
        assert api.api_version == 2

    def test_repr_hides_key(self):
        api = Api(ApiOptions(api_key="very-secret"))
        assert "very-secret" not in repr(api)

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("PERIDIO_API_KEY", "cfg-key")
        monkeypatch.setenv("PERIDIO_ENDPOINT", "http://localhost:4000")
        api = Api.from_config()
        assert api.endpoint == "http://localhost:4000"

    def test_from_config_without_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Api.from_config(PeridioConfig())
        assert exc_info.value.code == "missing_api_key"

    @pytest.mark.asyncio
    async def test_from_config_sends_configured_key(self, recorder):
        def handler(request):
            recorder.requests.append(request)
            return httpx.Response(204)

        config = PeridioConfig(api_key="cfg-key", api_version=1)
        async with Api.from_config(config, transport=httpx.MockTransport(handler)) as api:
            await api.execute("GET", "/users/me")
        assert recorder.last.headers["authorization"] == "Token cfg-key"
        assert recorder.last.headers["x-api-version"] == "1"


# ── request construction ──────────────────────────────────────────────────

class TestRequest:
    @pytest.mark.asyncio
    async def test_url_and_auth_headers(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        await api.execute("get", "/products/prn:1")
        request = recorder.last
        assert request.method == "GET"
        assert str(request.url) == "https://api.test.peridio.com/products/prn:1"
        assert request.headers["authorization"] == "Token test-api-key"
        assert request.headers["x-api-version"] == "2"

    @pytest.mark.asyncio
    async def test_api_version_header_follows_option(self, make_api, recorder):
        api = make_api(httpx.Response(204), api_version=1)
        await api.execute("GET", "/users/me")
        assert recorder.last.headers["x-api-version"] == "1"

    @pytest.mark.asyncio
    async def test_query_params_keep_order(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        params = [("search", "a"), ("limit", "5"), ("page", "p==")]
        await api.execute_with_params("GET", "/products", None, params)
        assert recorder.last.url.params.multi_items() == params

    @pytest.mark.asyncio
    async def test_extra_headers(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        await api.execute_with_headers(
            "PUT", "/binary_parts", None, [("content-sha256", "abc"), ("x-trace", "1")]
        )
        assert recorder.last.headers["content-sha256"] == "abc"
        assert recorder.last.headers["x-trace"] == "1"

    @pytest.mark.asyncio
    async def test_extra_headers_cannot_override_auth(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        await api.execute("GET", "/users/me", headers=[("Authorization", "Token other")])
        assert recorder.last.headers.get_list("authorization") == ["Token test-api-key"]

    @pytest.mark.asyncio
    async def test_json_body_sets_content_type(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        await api.execute("POST", "/products", json_body({"name": "pro-1"}))
        assert recorder.last.headers["content-type"] == "application/json"
        assert recorder.last.content == b'{"name": "pro-1"}'

    @pytest.mark.asyncio
    async def test_no_body_has_no_content_type(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        await api.execute("DELETE", "/products/prn:1")
        assert "content-type" not in recorder.last.headers
        assert recorder.last.content == b""

    @pytest.mark.asyncio
    async def test_multipart_body(self, make_api, recorder):
        api = make_api(httpx.Response(204))
        body = multipart_body(
            {"firmware": ("fw.fw", b"FWDATA", "application/octet-stream")},
            {"ttl": "30"},
        )
        await api.execute("POST", "/firmwares", body)
        request = recorder.last
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert b'name="firmware"; filename="fw.fw"' in request.content
        assert b"FWDATA" in request.content
        assert b'name="ttl"' in request.content

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,value",
        [("bad header", "v"), ("x-ok", "line\r\nbreak"), ("", "v"), ("x-ok", "café")],
    )
    async def test_invalid_headers_fail_before_sending(self, make_api, recorder, name, value):
        api = make_api(httpx.Response(204))
        with pytest.raises(RequestBuildError):
            await api.execute("GET", "/users/me", headers=[(name, value)])
        assert recorder.count == 0


# ── response classification ───────────────────────────────────────────────

class TestResponse:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [200, 201])
    async def test_success_decodes(self, make_api, status):
        api = make_api(httpx.Response(status, json={"name": "x"}))
        result = await api.execute("GET", "/widgets/1", response_type=Widget)
        assert result == Widget(name="x")

    @pytest.mark.asyncio
    async def test_default_response_type_is_plain_json(self, make_api):
        api = make_api(httpx.Response(200, json={"a": [1]}))
        assert await api.execute("GET", "/x") == {"a": [1]}

    @pytest.mark.asyncio
    async def test_no_content_ignores_body(self, make_api):
        api = make_api(httpx.Response(204, content=b"this is not json"))
        assert await api.execute("DELETE", "/widgets/1", response_type=Widget) is None

    @pytest.mark.asyncio
    async def test_no_content_body_is_never_read(self, make_api):
        class ExplodingStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                raise AssertionError("body was read")
                yield b""

        api = make_api(lambda request: httpx.Response(204, stream=ExplodingStream()))
        assert await api.execute("DELETE", "/widgets/1") is None

    @pytest.mark.asyncio
    async def test_undecodable_body_keeps_exact_text(self, make_api):
        text = '{"name": "x", é broken'
        api = make_api(httpx.Response(200, content=text.encode("utf-8")))
        with pytest.raises(JsonDeserializationError) as exc_info:
            await api.execute("GET", "/widgets/1", response_type=Widget)
        assert exc_info.value.text_response == text

    @pytest.mark.asyncio
    async def test_wrong_shape_keeps_exact_text(self, make_api):
        api = make_api(httpx.Response(201, content=b'{"title": "x"}'))
        with pytest.raises(JsonDeserializationError) as exc_info:
            await api.execute("POST", "/widgets", response_type=Widget)
        assert exc_info.value.text_response == '{"title": "x"}'

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,payload,error_cls",
        [
            (401, {"status": "unauthorized"}, UnauthorizedError),
            (403, {"status": "forbidden"}, UnauthorizedError),
            (404, {"errors": {"detail": "Not Found"}}, NotFoundError),
            (409, {"errors": {"name": ["has already been taken"]}}, ConflictError),
            (422, {"errors": {"name": ["too short"]}}, UnprocessableEntityError),
            (500, {"errors": {"detail": "Internal Server Error"}}, InternalServerError),
        ],
    )
    async def test_status_classes(self, make_api, status, payload, error_cls):
        api = make_api(httpx.Response(status, json=payload))
        with pytest.raises(error_cls) as exc_info:
            await api.execute("GET", "/widgets/1", response_type=Widget)
        assert exc_info.value.status_code == status
        assert exc_info.value.payload == payload

    @pytest.mark.asyncio
    async def test_unrecognized_status_is_unknown(self, make_api):
        api = make_api(httpx.Response(418, content=b"I'm a teapot"))
        with pytest.raises(UnknownError) as exc_info:
            await api.execute("GET", "/coffee")
        assert exc_info.value.text == "I'm a teapot"
        assert exc_info.value.status_code == 418

    @pytest.mark.asyncio
    async def test_unlisted_success_status_is_unknown(self, make_api):
        api = make_api(httpx.Response(202, content=b"accepted"))
        with pytest.raises(UnknownError):
            await api.execute("POST", "/jobs")

    @pytest.mark.asyncio
    async def test_transport_failure(self, make_api):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = make_api(refuse)
        with pytest.raises(RequestFailedError) as exc_info:
            await api.execute("GET", "/users/me")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_body_read_failure(self, make_api):
        class BrokenStream(httpx.AsyncByteStream):
            async def __aiter__(self):
                raise httpx.ReadError("connection reset")
                yield b""

        api = make_api(lambda request: httpx.Response(200, stream=BrokenStream()))
        with pytest.raises(BadResponseError):
            await api.execute("GET", "/users/me")

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_client(self, make_api, recorder):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"name": request.url.path.rsplit("/", 1)[-1]})

        api = make_api(handler)
        results: list[Any] = await asyncio.gather(
            *(api.execute("GET", f"/widgets/{i}", response_type=Widget) for i in range(5))
        )
        assert [w.name for w in results] == [str(i) for i in range(5)]
        assert recorder.count == 5
