"""Text normalization utilities for search queries.

Two concerns live here:

1. **Query normalization** -- collapses whitespace and case so that
   "Daft  Punk", "daft punk" and " DAFT PUNK " map to the same cache key.

2. **Prefix tags** -- compound queries are written as ``artist:<name>``,
   ``album:<name>`` or ``albums:<name>``.  The tag is removed before the
   remaining text is searched upstream.
"""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_query(text: str) -> str:
    """Normalize a free-text query for cache-key derivation.

    Args:
        text: Raw query text.

    Returns:
        Lower-cased text with surrounding whitespace stripped and internal
        runs of whitespace collapsed to a single space.
    """
    return _WHITESPACE.sub(" ", text.strip()).lower()


def strip_prefix(text: str, prefix: str) -> str:
    """Remove the first occurrence of *prefix* from *text*.

    Only the first occurrence is removed, so a query such as
    ``"album:album: leftovers"`` keeps its second tag as search text.
    """
    return text.replace(prefix, "", 1).strip()
