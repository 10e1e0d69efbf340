"""
peridio_sdk.tier0_core.http
────────────────────────────
HTTP primitives: the status codes the API documents, the error envelopes it
returns for each status class, and the mapping from a failed response to a
typed error.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from peridio_sdk.tier0_core.errors import (
    ApiStatusError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
    UnknownError,
    UnprocessableEntityError,
)


# ── Status code constants ──────────────────────────────────────────────────

class HTTP:
    """HTTP status codes the API responds with."""

    # 2xx
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 4xx
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422

    # 5xx
    INTERNAL_SERVER_ERROR = 500


def is_success(status_code: int) -> bool:
    """True for statuses that carry a decodable body (200, 201)."""
    return status_code in (HTTP.OK, HTTP.CREATED)


def is_server_error(status_code: int) -> bool:
    return 500 <= status_code < 600


# ── Error envelopes ─────────────────────────────────────────────────────────

class StatusEnvelope(BaseModel):
    status: str


class DetailErrors(BaseModel):
    detail: str


class DetailEnvelope(BaseModel):
    errors: DetailErrors


class FieldsEnvelope(BaseModel):
    errors: dict[str, list[str]]


_ENVELOPES: dict[int, tuple[type[BaseModel], type[ApiStatusError]]] = {
    HTTP.UNAUTHORIZED: (StatusEnvelope, UnauthorizedError),
    HTTP.FORBIDDEN: (StatusEnvelope, UnauthorizedError),
    HTTP.NOT_FOUND: (DetailEnvelope, NotFoundError),
    HTTP.CONFLICT: (FieldsEnvelope, ConflictError),
    HTTP.UNPROCESSABLE_ENTITY: (FieldsEnvelope, UnprocessableEntityError),
}

_ANY_JSON = TypeAdapter(Any)


def error_from_response(status_code: int, text: str) -> ApiStatusError:
    """
    Build the typed error for a non-success response.

    Documented 4xx statuses decode their envelope; a body that does not match
    falls back to UnknownError so the raw text is never lost. 5xx keeps any
    JSON it can parse. Everything else is UnknownError.
    """
    if status_code in _ENVELOPES:
        envelope, error_cls = _ENVELOPES[status_code]
        try:
            decoded = envelope.model_validate_json(text)
        except PydanticValidationError:
            return UnknownError(status_code, text)
        return error_cls(status_code, text, decoded.model_dump(mode="json"))

    if is_server_error(status_code):
        try:
            payload = _ANY_JSON.validate_json(text)
        except PydanticValidationError:
            payload = None
        return InternalServerError(status_code, text, payload)

    return UnknownError(status_code, text)


__all__ = [
    "HTTP",
    "is_success",
    "is_server_error",
    "error_from_response",
    "StatusEnvelope",
    "DetailEnvelope",
    "FieldsEnvelope",
]
