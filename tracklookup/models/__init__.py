"""tracklookup domain models: re-exports all public model classes.

    - credentials.py -- access-token pool and per-request lookup context
    - items.py       -- Track / Album / Artist tagged union, LookupKind, LookupResult
    - query.py       -- search query with prefix-tag intent parsing
"""

from __future__ import annotations

from tracklookup.models.credentials import CredentialPool, LookupContext
from tracklookup.models.items import (
    ARTIST_KINDS,
    SEARCH_KINDS,
    Album,
    Artist,
    LookupKind,
    LookupResult,
    NormalizedItem,
    ResultKind,
    Track,
)
from tracklookup.models.query import Query, QueryIntent

__all__ = [
    "ARTIST_KINDS",
    "Album",
    "Artist",
    "CredentialPool",
    "LookupContext",
    "LookupKind",
    "LookupResult",
    "NormalizedItem",
    "Query",
    "QueryIntent",
    "ResultKind",
    "SEARCH_KINDS",
    "Track",
]
