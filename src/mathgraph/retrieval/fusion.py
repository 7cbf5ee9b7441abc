"""Traversal-first fusion of graph membership and text relevance.

Every node reached by traversal gets a base membership score of 1.0. Its
search contribution is (1 - search_score) when it also appears in the
search results (search scores are lower-is-better), otherwise 0. The
combined score is the weighted sum of both; nodes found only by search
are not included.
"""

from dataclasses import dataclass, field
from typing import Iterable

from mathgraph.config import settings
from mathgraph.models import Node
from mathgraph.retrieval.search import SearchResult

TRAVERSAL_MEMBERSHIP_SCORE = 1.0


@dataclass(frozen=True)
class FusionWeights:
    """Weights of the traversal and search signals."""

    traversal: float = field(default_factory=lambda: settings.fusion_traversal_weight)
    search: float = field(default_factory=lambda: settings.fusion_search_weight)


@dataclass
class RankedNode:
    """A node with its combined score and the signals behind it."""

    node: Node
    score: float
    traversal_score: float = TRAVERSAL_MEMBERSHIP_SCORE
    search_score: float | None = None  # Raw search score, None if not matched

    @property
    def matched_search(self) -> bool:
        return self.search_score is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "node": self.node.to_dict(),
            "score": self.score,
            "traversal_score": self.traversal_score,
            "search_score": self.search_score,
        }


def rank(
    traversal_nodes: Iterable[Node],
    search_results: Iterable[SearchResult],
    weights: FusionWeights | None = None,
) -> list[RankedNode]:
    """
    Score traversal nodes and order them by combined score.

    Args:
        traversal_nodes: Nodes reached by traversal, in discovery order
        search_results: Search results (score: lower is better)
        weights: Signal weights (default from settings: 0.6 / 0.4)

    Returns:
        RankedNode list sorted by score descending; ties keep input order
    """
    weights = weights or FusionWeights()

    search_scores: dict[str, float] = {}
    for result in search_results:
        search_scores.setdefault(result.node.id, result.score)

    ranked: list[RankedNode] = []
    for node in traversal_nodes:
        search_score = search_scores.get(node.id)
        search_contribution = (1 - search_score) if search_score is not None else 0.0
        combined = (
            TRAVERSAL_MEMBERSHIP_SCORE * weights.traversal
            + search_contribution * weights.search
        )
        ranked.append(RankedNode(node=node, score=combined, search_score=search_score))

    # list.sort is stable, so equal scores keep traversal order
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked


def fuse(
    traversal_nodes: Iterable[Node],
    search_results: Iterable[SearchResult],
    weights: FusionWeights | None = None,
) -> list[Node]:
    """Ordered traversal nodes after fusing in search relevance."""
    return [r.node for r in rank(traversal_nodes, search_results, weights)]
