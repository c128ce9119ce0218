"""Deterministic cache-key derivation for lookups.

A key is ``"{namespace}.{digest}"``: the namespace is the lookup kind and
the digest is a SHA-1 over every input that changes the upstream answer
(normalized query text or entity id, offset, owner and access key).
Challenge parameters and access tokens never enter the key; they change
how a request is authorised, not what it returns.
"""

from __future__ import annotations

import hashlib
import json

from tracklookup.models.items import LookupKind
from tracklookup.utils.text_normalizer import normalize_query


def _digest(*parts: object) -> str:
    # JSON keeps part boundaries unambiguous ("a|b","c" vs "a","b|c").
    payload = json.dumps([None if p is None else str(p) for p in parts])
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def search_key(kind: LookupKind, text: str, offset: int) -> str:
    """Key for a free-text search of *kind* at *offset*."""
    return f"{kind.value}.{_digest(normalize_query(text), offset)}"


def artist_key(kind: LookupKind, artist_id: str, offset: int) -> str:
    """Key for an artist-scoped listing of *kind* at *offset*."""
    return f"{kind.value}.{_digest(str(artist_id).strip(), offset)}"


def album_key(album_id: str, owner_id: str | None, access_key: str | None) -> str:
    """Key for an album's track listing.

    The same album id under a different owner or access key is a different
    album as far as the upstream is concerned, so both qualify the key.
    """
    return f"{LookupKind.ALBUM_BY_ID.value}.{_digest(str(album_id).strip(), owner_id, access_key)}"
