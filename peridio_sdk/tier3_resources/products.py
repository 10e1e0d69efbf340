"""Products: ``/products``."""
from __future__ import annotations

from pydantic import Field

from peridio_sdk.tier1_runtime.query import ListParams
from peridio_sdk.tier1_runtime.serialize import json_body
from peridio_sdk.tier3_resources.base import ApiModel, EmptyResponse, ParamsModel, Resource


class Product(ApiModel):
    archived: bool = False
    inserted_at: str | None = None
    name: str
    organization_prn: str | None = None
    prn: str | None = None
    updated_at: str | None = None


class CreateProductParams(ParamsModel):
    name: str
    organization_prn: str
    archived: bool | None = None


class CreateProductResponse(ApiModel):
    product: Product


class GetProductParams(ParamsModel):
    prn: str


class GetProductResponse(ApiModel):
    product: Product


class ListProductsParams(ParamsModel):
    list: ListParams = Field(default_factory=ListParams)


class ListProductsResponse(ApiModel):
    products: list[Product]
    next_page: str | None = None


class UpdateProductParams(ParamsModel):
    prn: str
    name: str | None = None
    archived: bool | None = None


class UpdateProductResponse(ApiModel):
    product: Product


class DeleteProductParams(ParamsModel):
    prn: str


class ProductsApi(Resource):
    async def create(self, params: CreateProductParams) -> CreateProductResponse | None:
        return await self._api.execute(
            "POST", "/products", json_body(params), response_type=CreateProductResponse
        )

    async def get(self, params: GetProductParams) -> GetProductResponse | None:
        return await self._api.execute(
            "GET", f"/products/{params.prn}", response_type=GetProductResponse
        )

    async def list(self, params: ListProductsParams | None = None) -> ListProductsResponse | None:
        params = params or ListProductsParams()
        return await self._api.execute_with_params(
            "GET",
            "/products",
            None,
            params.list.to_query_params(),
            response_type=ListProductsResponse,
        )

    async def update(self, params: UpdateProductParams) -> UpdateProductResponse | None:
        return await self._api.execute(
            "PATCH",
            f"/products/{params.prn}",
            json_body(params),
            response_type=UpdateProductResponse,
        )

    async def delete(self, params: DeleteProductParams) -> EmptyResponse | None:
        return await self._api.execute(
            "DELETE", f"/products/{params.prn}", response_type=EmptyResponse
        )
