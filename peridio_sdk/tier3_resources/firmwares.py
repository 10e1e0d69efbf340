"""
Firmwares: ``/orgs/{organization_name}/products/{product_name}/firmwares``.

``create`` uploads the firmware image as a multipart form (``firmware`` file
part, optional ``ttl`` field). The image is streamed from disk, not read into
memory. Errors opening the image propagate as OSError.
"""
from __future__ import annotations

from pathlib import Path

from peridio_sdk.tier1_runtime.serialize import multipart_body
from peridio_sdk.tier3_resources.base import ApiModel, ParamsModel, Resource

FIRMWARE_CONTENT_TYPE = "application/octet-stream"


class Firmware(ApiModel):
    architecture: str
    author: str | None = None
    inserted_at: str
    platform: str
    product: str
    updated_at: str
    uuid: str
    vcs_identifier: str | None = None
    version: str


class ProductScope(ParamsModel):
    organization_name: str
    product_name: str

    @property
    def base_path(self) -> str:
        return f"/orgs/{self.organization_name}/products/{self.product_name}/firmwares"


class CreateFirmwareParams(ProductScope):
    firmware_path: Path
    ttl: int | None = None


class CreateFirmwareResponse(ApiModel):
    data: Firmware


class GetFirmwareParams(ProductScope):
    firmware_uuid: str


class GetFirmwareResponse(ApiModel):
    data: Firmware


class ListFirmwareParams(ProductScope):
    pass


class ListFirmwareResponse(ApiModel):
    data: list[Firmware]


class DeleteFirmwareParams(ProductScope):
    firmware_uuid: str


class FirmwaresApi(Resource):
    async def create(self, params: CreateFirmwareParams) -> CreateFirmwareResponse | None:
        path = params.firmware_path
        data = {"ttl": str(params.ttl)} if params.ttl is not None else None
        with path.open("rb") as image:
            files = {"firmware": (path.name, image, FIRMWARE_CONTENT_TYPE)}
            return await self._api.execute(
                "POST",
                params.base_path,
                multipart_body(files, data),
                response_type=CreateFirmwareResponse,
            )

    async def get(self, params: GetFirmwareParams) -> GetFirmwareResponse | None:
        return await self._api.execute(
            "GET",
            f"{params.base_path}/{params.firmware_uuid}",
            response_type=GetFirmwareResponse,
        )

    async def list(self, params: ListFirmwareParams) -> ListFirmwareResponse | None:
        return await self._api.execute(
            "GET", params.base_path, response_type=ListFirmwareResponse
        )

    async def delete(self, params: DeleteFirmwareParams) -> None:
        await self._api.execute("DELETE", f"{params.base_path}/{params.firmware_uuid}")
