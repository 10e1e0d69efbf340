"""Artifacts: ``/artifacts``. Custom metadata is capped at 1 MB of JSON."""
from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field

from peridio_sdk.tier1_runtime.query import ListParams
from peridio_sdk.tier1_runtime.serialize import json_body
from peridio_sdk.tier1_runtime.validate import (
    CUSTOM_METADATA_MAX_BYTES,
    MaxJsonBytes,
    validate_params,
)
from peridio_sdk.tier3_resources.base import ApiModel, ParamsModel, Resource

CustomMetadata = Annotated[dict[str, Any] | None, MaxJsonBytes(CUSTOM_METADATA_MAX_BYTES)]


class Artifact(ApiModel):
    custom_metadata: dict[str, Any] | None = None
    description: str | None = None
    inserted_at: str
    name: str
    organization_prn: str
    prn: str
    updated_at: str


class CreateArtifactParams(ParamsModel):
    custom_metadata: CustomMetadata = None
    description: str | None = None
    id: str | None = None
    name: str
    organization_prn: str


class CreateArtifactResponse(ApiModel):
    artifact: Artifact


class GetArtifactParams(ParamsModel):
    prn: str


class GetArtifactResponse(ApiModel):
    artifact: Artifact


class ListArtifactsParams(ParamsModel):
    list: ListParams = Field(default_factory=ListParams)


class ListArtifactsResponse(ApiModel):
    artifacts: list[Artifact]
    next_page: str | None = None


class UpdateArtifactParams(ParamsModel):
    prn: str
    custom_metadata: CustomMetadata = None
    description: str | None = None
    name: str | None = None


class UpdateArtifactResponse(ApiModel):
    artifact: Artifact


class ArtifactsApi(Resource):
    async def create(self, params: CreateArtifactParams) -> CreateArtifactResponse | None:
        validate_params(params)
        return await self._api.execute(
            "POST", "/artifacts", json_body(params), response_type=CreateArtifactResponse
        )

    async def get(self, params: GetArtifactParams) -> GetArtifactResponse | None:
        return await self._api.execute(
            "GET", f"/artifacts/{params.prn}", response_type=GetArtifactResponse
        )

    async def list(self, params: ListArtifactsParams | None = None) -> ListArtifactsResponse | None:
        params = params or ListArtifactsParams()
        return await self._api.execute_with_params(
            "GET",
            "/artifacts",
            None,
            params.list.to_query_params(),
            response_type=ListArtifactsResponse,
        )

    async def update(self, params: UpdateArtifactParams) -> UpdateArtifactResponse | None:
        validate_params(params)
        return await self._api.execute(
            "PATCH",
            f"/artifacts/{params.prn}",
            json_body(params),
            response_type=UpdateArtifactResponse,
        )
