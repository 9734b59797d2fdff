"""
Query-term highlighting for search result text.
"""

from __future__ import annotations

import re

DEFAULT_OPEN_TAG = "<mark>"
DEFAULT_CLOSE_TAG = "</mark>"


def query_terms(query: str) -> list[str]:
    """Whitespace-split query terms longer than one character."""
    return [term for term in query.split() if len(term) > 1]


def highlight(
    text: str,
    query: str,
    *,
    open_tag: str = DEFAULT_OPEN_TAG,
    close_tag: str = DEFAULT_CLOSE_TAG,
) -> str:
    """Wrap every case-insensitive occurrence of a query term in marker tags."""
    if not query:
        return text
    terms = query_terms(query)
    if not terms:
        return text
    pattern = re.compile("|".join(re.escape(term) for term in terms), re.IGNORECASE)
    return pattern.sub(lambda match: f"{open_tag}{match.group(0)}{close_tag}", text)
