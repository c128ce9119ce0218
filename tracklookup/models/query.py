"""Search query model and compound-query intent parsing."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from tracklookup.utils.text_normalizer import strip_prefix


class QueryIntent(str, Enum):  # noqa: UP042
    """Compound-query intent signalled by a prefix tag on the query text.

    The enum value is the tag itself; ``PLAIN`` has no tag.
    """

    PLAIN = ""
    ARTIST = "artist:"
    ALBUM = "album:"
    ALBUMS = "albums:"


# "albums:" must be tested before "album:" since the latter is its prefix.
_INTENT_ORDER = (QueryIntent.ALBUMS, QueryIntent.ALBUM, QueryIntent.ARTIST)


class Query(BaseModel):
    """A single search request: free text plus 0-based page number."""

    model_config = ConfigDict(frozen=True)

    q: str
    page: int = Field(default=0, ge=0)

    @property
    def intent(self) -> QueryIntent:
        text = self.q.lstrip()
        for intent in _INTENT_ORDER:
            if text.startswith(intent.value):
                return intent
        return QueryIntent.PLAIN

    @property
    def stripped_text(self) -> str:
        """Query text with the intent's prefix tag removed."""
        intent = self.intent
        if intent is QueryIntent.PLAIN:
            return self.q.strip()
        return strip_prefix(self.q, intent.value)

    def offset(self, page_size: int) -> int:
        return self.page * page_size

    def with_text(self, text: str) -> Query:
        """Return a copy of this query carrying *text*, same page."""
        return self.model_copy(update={"q": text})
