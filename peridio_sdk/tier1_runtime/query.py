"""
peridio_sdk.tier1_runtime.query
────────────────────────────────
List/pagination parameters shared by every ``list`` endpoint.

List responses carry an opaque ``next_page`` cursor; pass it back as
``page`` to fetch the next batch. A missing ``next_page`` ends the
collection.
"""
from __future__ import annotations

from pydantic import BaseModel

QueryParams = list[tuple[str, str]]

# Wire order of the list fields.
_FIELDS = ("limit", "order", "search", "page")


class ListParams(BaseModel):
    """Optional list controls. Absent fields are never sent."""

    limit: int | None = None
    order: str | None = None
    search: str | None = None
    page: str | None = None

    def to_query_params(self) -> QueryParams:
        """Return (name, value) pairs for the present fields, in wire order."""
        query_params: QueryParams = []
        for name in _FIELDS:
            value = getattr(self, name)
            if value is not None:
                query_params.append((name, str(value)))
        return query_params

    def next(self, next_page: str) -> ListParams:
        """Same controls, advanced to the cursor a previous response returned."""
        return self.model_copy(update={"page": next_page})


__all__ = ["ListParams", "QueryParams"]
