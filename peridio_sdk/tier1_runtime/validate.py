"""
peridio_sdk.tier1_runtime.validate
───────────────────────────────────
Client-side checks run before a request is sent. Constraints are declared
on parameter models with ``Annotated`` markers and enforced by
``validate_params``, which raises the client ValidationError (not
Pydantic's) so a rejected call never reaches the network.

Usage:
    class CreateArtifactParams(BaseModel):
        custom_metadata: Annotated[dict[str, Any] | None, MaxJsonBytes(1_000_000)] = None

    validate_params(params)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from peridio_sdk.tier0_core.errors import ValidationError

CUSTOM_METADATA_MAX_BYTES = 1_000_000


@dataclass(frozen=True)
class MaxJsonBytes:
    """The field's compact UTF-8 JSON encoding must be at most ``limit`` bytes."""
    limit: int

    def check(self, value: Any) -> str | None:
        try:
            encoded = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError):
            return "invalid json"
        if len(encoded) > self.limit:
            return f"greater than {self.limit} bytes"
        return None


def validate_params(params: BaseModel) -> None:
    """Run every ``MaxJsonBytes`` constraint declared on *params*' model."""
    failures: dict[str, str] = {}
    for name, info in type(params).model_fields.items():
        value = getattr(params, name)
        if value is None:
            continue
        for marker in info.metadata:
            if isinstance(marker, MaxJsonBytes):
                message = marker.check(value)
                if message:
                    failures[name] = message
    if failures:
        raise ValidationError(
            user_message="Request validation failed.",
            fields=failures,
        )


__all__ = ["MaxJsonBytes", "validate_params", "CUSTOM_METADATA_MAX_BYTES"]
