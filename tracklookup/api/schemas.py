"""Pydantic response schemas for the tracklookup API.

Convention: response schemas end with "Response".  Items are the frozen
domain models from ``tracklookup.models.items`` serialized as-is, with
``item_type`` telling clients which shape they are looking at.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tracklookup.models.items import LookupResult, NormalizedItem, ResultKind


class LookupResponse(BaseModel):
    """Result of any lookup.

    ``found`` is ``False`` only when a compound query's name search matched
    nothing; a plain lookup with zero items is still ``found=True``.
    """

    found: bool = True
    kind: ResultKind | None = None
    count: int = 0
    items: list[NormalizedItem] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: LookupResult | None) -> LookupResponse:
        if result is None:
            return cls(found=False)
        return cls(kind=result.kind, count=len(result.items), items=list(result.items))


class ErrorResponse(BaseModel):
    """Standard error body returned by the error-handling middleware."""

    error: str
    detail: str
    error_code: int | None = None
    challenge_sid: str | None = None
    challenge_image_url: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    provider: str
    accounts: int
