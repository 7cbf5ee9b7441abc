"""Search, fusion and exploration over the canonical graph."""

from mathgraph.retrieval.fusion import FusionWeights, RankedNode, fuse, rank
from mathgraph.retrieval.pipeline import ExplorationResult, explore, filter_subgraph
from mathgraph.retrieval.search import FieldMatch, SearchResult, field_score, search

__all__ = [
    "FieldMatch",
    "SearchResult",
    "field_score",
    "search",
    "FusionWeights",
    "RankedNode",
    "fuse",
    "rank",
    "ExplorationResult",
    "explore",
    "filter_subgraph",
]
