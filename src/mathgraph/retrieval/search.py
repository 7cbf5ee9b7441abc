"""Fuzzy text search over node fields.

Relevance scores follow the fuzzy-match convention: 0.0 is a perfect
match, 1.0 is no match, lower is better. A field scores 0.0 when it
contains the query as a substring (case-insensitive); otherwise it scores
the smallest Levenshtein distance between the query and any window of
the field, divided by the query length.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

import jellyfish

from mathgraph.config import settings
from mathgraph.models import SEARCHABLE_FIELDS, Node

logger = logging.getLogger(__name__)


@dataclass
class FieldMatch:
    """Best match of the query inside one node field."""

    field: str
    value: str
    score: float


@dataclass
class SearchResult:
    """A node with its relevance score (lower is better)."""

    node: Node
    score: float
    matches: list[FieldMatch] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "node": self.node.to_dict(),
            "score": self.score,
            "matches": [
                {"field": m.field, "value": m.value, "score": m.score}
                for m in self.matches
            ],
        }


def field_score(query: str, value: str, min_match_chars: int | None = None) -> float:
    """
    Score how well `query` matches somewhere inside `value`.

    Args:
        query: Search text (already stripped)
        value: Field text
        min_match_chars: Shorter queries only match as exact substrings

    Returns:
        Score in [0, 1], 0 = query is a substring of value
    """
    min_match_chars = min_match_chars if min_match_chars is not None else settings.search_min_match_chars
    q = query.lower()
    v = value.lower()

    if not q or not v:
        return 1.0
    if q in v:
        return 0.0
    if len(q) < min_match_chars:
        return 1.0

    q_len = len(q)
    if len(v) <= q_len + 1:
        best = jellyfish.levenshtein_distance(q, v)
    else:
        best = q_len
        # Windows one shorter/longer than the query allow a missing or extra char
        for size in (q_len - 1, q_len, q_len + 1):
            if size <= 0:
                continue
            for start in range(len(v) - size + 1):
                best = min(best, jellyfish.levenshtein_distance(q, v[start:start + size]))

    return min(best / q_len, 1.0)


def search(
    nodes: Iterable[Node],
    query: str,
    fields: list[str] | None = None,
    exact: bool = False,
    threshold: float | None = None,
    max_results: int | None = None,
) -> list[SearchResult]:
    """
    Rank nodes by text relevance to a query.

    Args:
        nodes: Nodes to search (graph order is kept for ties)
        query: Search text; empty query returns no results
        fields: Node fields to score (default from settings); an empty
            list scores nothing
        exact: Near-exact matching instead of fuzzy matching
        threshold: Max accepted score (default from settings per mode)
        max_results: Optional cap on the number of results

    Returns:
        SearchResult list sorted by score ascending (best first)

    Raises:
        ValueError: If a field is not one of SEARCHABLE_FIELDS
    """
    if fields is None:
        fields = settings.search_fields
    unknown = [name for name in fields if name not in SEARCHABLE_FIELDS]
    if unknown:
        raise ValueError(f"Not searchable fields: {unknown}")

    query = query.strip()
    if not query:
        return []

    if threshold is None:
        threshold = settings.search_exact_threshold if exact else settings.search_fuzzy_threshold

    results: list[SearchResult] = []
    for node in nodes:
        matches: list[FieldMatch] = []
        for name in fields:
            value = node.field_value(name)
            if not value:
                continue
            score = field_score(query, value)
            if score <= threshold:
                matches.append(FieldMatch(field=name, value=value, score=score))

        if matches:
            best = min(m.score for m in matches)
            results.append(SearchResult(node=node, score=best, matches=matches))

    # Stable sort: equal scores keep graph order
    results.sort(key=lambda r: r.score)

    if max_results is not None:
        results = results[:max_results]

    logger.debug(
        f"Search '{query}' (exact={exact}, threshold={threshold}): {len(results)} results"
    )
    return results
