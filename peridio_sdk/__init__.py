"""
peridio_sdk
───────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from peridio_sdk.tier0_core.config import PeridioConfig, get_config
from peridio_sdk.tier0_core.errors import (
    ApiStatusError,
    BadResponseError,
    ConfigurationError,
    ConflictError,
    InternalServerError,
    JsonDeserializationError,
    JsonSerializationError,
    NotFoundError,
    PeridioError,
    RequestBuildError,
    RequestFailedError,
    UnauthorizedError,
    UnknownError,
    UnprocessableEntityError,
    ValidationError,
)
from peridio_sdk.tier0_core.logging import configure_logging, get_logger

from peridio_sdk.tier1_runtime.query import ListParams
from peridio_sdk.tier1_runtime.serialize import json_body, multipart_body
from peridio_sdk.tier1_runtime.retry import retry_policy

from peridio_sdk.tier2_transport.client import Api, ApiOptions

__version__ = "0.1.0"
__all__ = [
    # client
    "Api", "ApiOptions",
    # config
    "PeridioConfig", "get_config",
    # logging
    "configure_logging", "get_logger",
    # errors
    "PeridioError", "ConfigurationError", "ValidationError",
    "RequestBuildError", "RequestFailedError", "BadResponseError",
    "JsonSerializationError", "JsonDeserializationError",
    "ApiStatusError", "UnauthorizedError", "NotFoundError", "ConflictError",
    "UnprocessableEntityError", "InternalServerError", "UnknownError",
    # runtime
    "ListParams", "json_body", "multipart_body", "retry_policy",
]
