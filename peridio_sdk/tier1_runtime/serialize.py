"""
peridio_sdk.tier1_runtime.serialize
────────────────────────────────────
Request body encoding and response body decoding.

Two body kinds reach the wire:
    JsonBody       JSON bytes tagged ``application/json``
    MultipartBody  a prepared form (one or more file parts + text fields);
                   httpx generates the boundary and content type
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import IO, Any, Union

from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from peridio_sdk.tier0_core.errors import (
    JsonDeserializationError,
    JsonSerializationError,
    RequestBuildError,
)

JSON_CONTENT_TYPE = "application/json"

FileContent = Union[bytes, IO[bytes]]
# (file name, content, content type)
FilePart = tuple[str, FileContent, str]


@dataclass(frozen=True)
class JsonBody:
    content: bytes
    content_type: str = JSON_CONTENT_TYPE


@dataclass(frozen=True)
class MultipartBody:
    files: dict[str, FilePart] = field(default_factory=dict)
    data: dict[str, str] = field(default_factory=dict)


Body = Union[JsonBody, MultipartBody]


def serialize(obj: BaseModel | dict | list) -> bytes:
    """
    Serialize a Pydantic model, dict or list to JSON bytes.
    Model fields left as None are omitted.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump_json(exclude_none=True).encode()
    return json.dumps(obj).encode()


def json_body(value: BaseModel | dict | list) -> JsonBody:
    """Encode *value* as a JSON request body."""
    try:
        return JsonBody(content=serialize(value))
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise JsonSerializationError(
            user_message="JSON serialization failed.",
            detail=f"JSON serialization failed {exc}",
        ) from exc


def multipart_body(
    files: dict[str, FilePart],
    data: dict[str, str] | None = None,
) -> MultipartBody:
    """
    Wrap a prepared form for file-upload endpoints.
    At least one file part is required; httpx sends a form without files as
    ``application/x-www-form-urlencoded``.
    """
    if not files:
        raise RequestBuildError(
            user_message="Bad request parameters.",
            detail="A multipart body needs at least one file part",
        )
    return MultipartBody(files=dict(files), data=dict(data or {}))


def deserialize(text: str, response_type: Any) -> Any:
    """
    Decode a JSON response body into *response_type*.
    The original text is kept on the error so malformed payloads can be read.
    """
    try:
        return _adapter(response_type).validate_json(text)
    except PydanticValidationError as exc:
        raise JsonDeserializationError(text_response=text, reason=str(exc)) from exc


_adapters: dict[Any, TypeAdapter] = {}


def _adapter(response_type: Any) -> TypeAdapter:
    adapter = _adapters.get(response_type)
    if adapter is None:
        adapter = TypeAdapter(response_type)
        _adapters[response_type] = adapter
    return adapter


__all__ = [
    "JsonBody",
    "MultipartBody",
    "Body",
    "FilePart",
    "JSON_CONTENT_TYPE",
    "serialize",
    "json_body",
    "multipart_body",
    "deserialize",
]
