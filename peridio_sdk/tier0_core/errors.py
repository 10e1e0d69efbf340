"""
peridio_sdk.tier0_core.errors
──────────────────────────────
Error taxonomy for every failure the client can surface. Each error has a
stable machine-readable ``code`` and a ``retryable`` flag so callers can tell
transient failures (transport, 5xx) from permanent ones (4xx, validation).

HTTP status errors carry the decoded error envelope the API returned:

    401/403  {"status": "..."}
    404      {"errors": {"detail": "..."}}
    409/422  {"errors": {"<field>": ["<message>", ...]}}
    5xx      arbitrary JSON
"""
from __future__ import annotations

import json
from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class PeridioError(Exception):
    """
    Base class for all client errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: safe to surface to end users
    - detail: internal context
    - retryable: whether repeating the same call may succeed
    """

    code: str = "peridio_error"
    retryable: bool = False

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "An unexpected error occurred.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


# ── Local errors (no response involved) ──────────────────────────────────────

class ConfigurationError(PeridioError):
    """Misconfiguration detected while building the client."""
    code = "configuration_error"


class ValidationError(PeridioError):
    """Request parameters rejected client-side, before any network call."""
    code = "validation_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Validation failed.",
        fields: dict[str, str] | None = None,
        **metadata: Any,
    ) -> None:
        self.fields = fields or {}
        detail = user_message
        if self.fields:
            detail = f"{user_message} {json.dumps(self.fields, sort_keys=True)}"
        super().__init__(code, user_message, detail, **metadata)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


class RequestBuildError(PeridioError):
    """The request could not be built (invalid header, URL or query)."""
    code = "bad_request_params"


class JsonSerializationError(PeridioError):
    """A request body could not be serialized to JSON."""
    code = "json_serialization_failed"


# ── Transport / response errors ──────────────────────────────────────────────

class RequestFailedError(PeridioError):
    """Transport failure: connection refused, DNS, TLS or timeout."""
    code = "request_failed"
    retryable = True


class BadResponseError(PeridioError):
    """The response body could not be read."""
    code = "bad_response"
    retryable = True


class JsonDeserializationError(PeridioError):
    """
    A 200/201 body could not be decoded into the expected type.
    ``text_response`` holds the exact body so the payload can be inspected.
    """
    code = "json_deserialization_failure"

    def __init__(self, text_response: str, reason: str, **metadata: Any) -> None:
        self.text_response = text_response
        self.reason = reason
        super().__init__(
            user_message="Error decoding API response.",
            detail=f"Error decoding API response: {reason} \r\n{text_response}",
            **metadata,
        )


# ── HTTP status errors ───────────────────────────────────────────────────────

class ApiStatusError(PeridioError):
    """
    Non-success HTTP status. ``payload`` is the decoded error envelope and
    ``text`` the raw body. ``str()`` is derived from the payload.
    """

    code = "api_error"

    def __init__(self, status_code: int, text: str, payload: Any = None) -> None:
        self.status_code = status_code
        self.text = text
        self.payload = payload
        super().__init__(
            user_message=f"API request failed with status {status_code}.",
            detail=self._render(),
            status_code=status_code,
        )

    def _render(self) -> str:
        return f"{self.status_code}: {json.dumps(self.payload, sort_keys=True)}"

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["error"]["status"] = self.status_code
        d["error"]["payload"] = self.payload
        return d


class UnauthorizedError(ApiStatusError):
    """401 or 403. ``status`` is the server's status token (e.g. "forbidden")."""
    code = "unauthorized"

    @property
    def status(self) -> str:
        return self.payload["status"]


class NotFoundError(ApiStatusError):
    code = "not_found"

    @property
    def detail_message(self) -> str:
        return self.payload["errors"]["detail"]


class ConflictError(ApiStatusError):
    code = "conflict"

    @property
    def fields(self) -> dict[str, list[str]]:
        return self.payload["errors"]


class UnprocessableEntityError(ApiStatusError):
    code = "unprocessable_entity"

    @property
    def fields(self) -> dict[str, list[str]]:
        return self.payload["errors"]


class InternalServerError(ApiStatusError):
    """5xx. The payload shape is not stable; ``payload`` is None for non-JSON bodies."""
    code = "internal_server_error"
    retryable = True

    def _render(self) -> str:
        if self.payload is None:
            return f"{self.status_code}: {self.text}"
        return super()._render()


class UnknownError(ApiStatusError):
    """Any status without a documented envelope. Carries the raw text verbatim."""
    code = "unknown"

    def _render(self) -> str:
        return self.text


__all__ = [
    "PeridioError",
    "ConfigurationError",
    "ValidationError",
    "RequestBuildError",
    "JsonSerializationError",
    "RequestFailedError",
    "BadResponseError",
    "JsonDeserializationError",
    "ApiStatusError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
    "UnprocessableEntityError",
    "InternalServerError",
    "UnknownError",
]
