"""FastAPI API routes for tracklookup.

Endpoint                                   Description
─────────────────────────────────────────────────────────────────────────
GET /api/v1/search?q=&page=                 Compound search (artist:, album:, albums:)
GET /api/v1/search/{kind}?q=&page=          Search albums or artists
GET /api/v1/artists/{artist_id}/{kind}      Artist tracks (audiosByArtist) or albums (albumsByArtist)
GET /api/v1/albums/{album_id}               Album track listing (owner_id, access_key)
GET /api/v1/health                          Health check

Every lookup accepts ``account`` (index into the configured token pool) and
the anti-bot challenge answer ``captcha_sid``/``captcha_key``.  Services are
resolved from ``app.state`` via ``Depends``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from tracklookup.api.schemas import HealthResponse, LookupResponse
from tracklookup.models.credentials import LookupContext
from tracklookup.models.query import Query as SearchQuery
from tracklookup.services.aggregation_service import AggregationService
from tracklookup.services.lookup_engine import EntityLookupEngine

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_engine(request: Request) -> EntityLookupEngine:
    return request.app.state.lookup_engine


def _get_aggregation_service(request: Request) -> AggregationService:
    return request.app.state.aggregation_service


def _get_context(
    account: Annotated[int, Query(ge=0)] = 0,
    captcha_sid: str | None = None,
    captcha_key: str | None = None,
) -> LookupContext:
    """Build the per-request lookup context from query parameters."""
    challenge: dict[str, str] = {}
    if captcha_sid and captcha_key:
        challenge = {"captcha_sid": captcha_sid, "captcha_key": captcha_key}
    return LookupContext(token_index=account, challenge_params=challenge)


EngineDep = Annotated[EntityLookupEngine, Depends(_get_engine)]
AggregationDep = Annotated[AggregationService, Depends(_get_aggregation_service)]
ContextDep = Annotated[LookupContext, Depends(_get_context)]
PageParam = Annotated[int, Query(ge=0)]


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/search", response_model=LookupResponse)
async def compound_search(
    aggregation: AggregationDep,
    context: ContextDep,
    q: Annotated[str, Query(min_length=1)],
    page: PageParam = 0,
) -> LookupResponse:
    result = await aggregation.search(SearchQuery(q=q, page=page), context)
    return LookupResponse.from_result(result)


@router.get("/search/{kind}", response_model=LookupResponse)
async def search_items(
    kind: str,
    engine: EngineDep,
    context: ContextDep,
    q: Annotated[str, Query(min_length=1)],
    page: PageParam = 0,
) -> LookupResponse:
    result = await engine.search(SearchQuery(q=q, page=page), kind, context)
    return LookupResponse.from_result(result)


@router.get("/artists/{artist_id}/{kind}", response_model=LookupResponse)
async def artist_items(
    artist_id: str,
    kind: str,
    engine: EngineDep,
    context: ContextDep,
    page: PageParam = 0,
) -> LookupResponse:
    result = await engine.list_by_artist(artist_id, kind, context, page)
    return LookupResponse.from_result(result)


@router.get("/albums/{album_id}", response_model=LookupResponse)
async def album_tracks(
    album_id: str,
    engine: EngineDep,
    context: ContextDep,
    owner_id: str | None = None,
    access_key: str | None = None,
) -> LookupResponse:
    result = await engine.get_album_by_id(album_id, owner_id, access_key, context)
    return LookupResponse.from_result(result)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    state = request.app.state
    return HealthResponse(
        version=_VERSION,
        provider=state.catalog_client.get_provider_name(),
        accounts=len(state.credentials),
    )
