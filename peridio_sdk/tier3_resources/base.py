"""
peridio_sdk.tier3_resources.base
─────────────────────────────────
Shared plumbing for resource modules. A resource holds a reference to the
executor and turns typed parameter models into ``Api.execute`` calls.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from peridio_sdk.tier2_transport.client import Api


class ApiModel(BaseModel):
    """Response shape. Unknown fields from newer API versions are ignored."""
    model_config = ConfigDict(extra="ignore")


class ParamsModel(BaseModel):
    """Request parameters. Typos in field names fail at construction."""
    model_config = ConfigDict(extra="forbid")


class EmptyResponse(ApiModel):
    """``{}`` bodies returned by some deletes."""


class Resource:
    def __init__(self, api: Api) -> None:
        self._api = api


__all__ = ["ApiModel", "ParamsModel", "EmptyResponse", "Resource"]
