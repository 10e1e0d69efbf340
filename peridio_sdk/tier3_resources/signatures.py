"""
peridio_sdk.tier3_resources.signatures
───────────────────────────────────────
Signature sub-resources share one shape and differ only in the resource
name, the field naming the signed parent, and the endpoint. A
``SignatureKind`` describes one of them; ``SignaturesApi`` serves any kind.

    binary signatures  binary_prn  /binary_signatures
    bundle signatures  bundle_prn  /bundle_signatures
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import create_model

from peridio_sdk.tier1_runtime.serialize import json_body
from peridio_sdk.tier3_resources.base import ApiModel, EmptyResponse, ParamsModel, Resource

if TYPE_CHECKING:
    from peridio_sdk.tier2_transport.client import Api


class SignatureBase(ApiModel):
    inserted_at: str
    keyid: str
    organization_prn: str
    prn: str
    signature: str
    signing_key_prn: str
    updated_at: str


class CreateSignatureParamsBase(ParamsModel):
    signature: str
    signing_key_prn: str | None = None
    signing_key_keyid: str | None = None


@dataclass(frozen=True)
class SignatureKind:
    """
    resource:      response key and model prefix, e.g. "binary_signature"
    parent_field:  PRN field of the signed object, e.g. "binary_prn"
    endpoint:      collection path, e.g. "/binary_signatures"
    """
    resource: str
    parent_field: str
    endpoint: str
    signature_model: type[SignatureBase] = field(init=False, repr=False, compare=False)
    create_params_model: type[CreateSignatureParamsBase] = field(init=False, repr=False, compare=False)
    create_response_model: type[ApiModel] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        prefix = "".join(part.capitalize() for part in self.resource.split("_"))
        signature_model = create_model(
            prefix,
            __base__=SignatureBase,
            **{self.parent_field: (str, ...)},
        )
        create_params_model = create_model(
            f"Create{prefix}Params",
            __base__=CreateSignatureParamsBase,
            **{self.parent_field: (str, ...)},
        )
        create_response_model = create_model(
            f"Create{prefix}Response",
            __base__=ApiModel,
            **{self.resource: (signature_model, ...)},
        )
        object.__setattr__(self, "signature_model", signature_model)
        object.__setattr__(self, "create_params_model", create_params_model)
        object.__setattr__(self, "create_response_model", create_response_model)

    def create_params(self, **values: Any) -> CreateSignatureParamsBase:
        return self.create_params_model(**values)


BINARY_SIGNATURES = SignatureKind("binary_signature", "binary_prn", "/binary_signatures")
BUNDLE_SIGNATURES = SignatureKind("bundle_signature", "bundle_prn", "/bundle_signatures")


class SignaturesApi(Resource):
    def __init__(self, api: Api, kind: SignatureKind) -> None:
        super().__init__(api)
        self.kind = kind

    async def create(self, params: CreateSignatureParamsBase | dict[str, Any]) -> Any:
        """Returns an instance of ``kind.create_response_model``."""
        if isinstance(params, dict):
            params = self.kind.create_params(**params)
        return await self._api.execute(
            "POST",
            self.kind.endpoint,
            json_body(params),
            response_type=self.kind.create_response_model,
        )

    async def delete(self, prn: str) -> EmptyResponse | None:
        return await self._api.execute(
            "DELETE", f"{self.kind.endpoint}/{prn}", response_type=EmptyResponse
        )


__all__ = [
    "SignatureKind",
    "SignaturesApi",
    "SignatureBase",
    "CreateSignatureParamsBase",
    "BINARY_SIGNATURES",
    "BUNDLE_SIGNATURES",
]
