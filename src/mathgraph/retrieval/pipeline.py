"""Exploration pipeline combining filtering, traversal, search and fusion.

Orchestrates:
1. Text search for the active query (fuzzy or exact)
2. Neighbor expansion of matched nodes (optional)
3. Relation-filtered subgraph for rendering
4. Traversal from focus nodes and fusion with search relevance
5. Statistics tuple for the current graph and filters
"""

import logging
from dataclasses import dataclass, field

from mathgraph.graph.statistics import GraphStats, graph_stats
from mathgraph.graph.traversal import Direction, TraversalConfig, TraversalResult, traverse
from mathgraph.models import CanonicalGraph, FilterConfig, Node, Subgraph
from mathgraph.retrieval.fusion import FusionWeights, RankedNode, rank
from mathgraph.retrieval.search import SearchResult, search

logger = logging.getLogger(__name__)


@dataclass
class ExplorationResult:
    """Everything the rendering, inspection and status collaborators need."""

    filters: FilterConfig
    subgraph: Subgraph
    ranked: list[RankedNode] = field(default_factory=list)
    search_results: list[SearchResult] = field(default_factory=list)
    traversal: TraversalResult | None = None
    stats: GraphStats = field(default_factory=GraphStats)

    @property
    def ranked_nodes(self) -> list[Node]:
        return [r.node for r in self.ranked]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "subgraph": self.subgraph.to_dict(),
            "ranked": [r.to_dict() for r in self.ranked],
            "traversal": self.traversal.to_dict() if self.traversal else None,
            "stats": self.stats.to_dict(),
        }


def filter_subgraph(
    graph: CanonicalGraph,
    filters: FilterConfig,
    search_results: list[SearchResult] | None = None,
) -> Subgraph:
    """
    Nodes and edges passing the active relation set and text filter.

    Without a text query every node passes. With one, the matched nodes
    pass, extended by their traversal neighborhood when
    `include_neighbors` is set. Edges pass when their relation is enabled
    and both endpoints passed. Graph order is kept for both.
    """
    if filters.text_query.strip():
        if search_results is None:
            search_results = search(graph.nodes, filters.text_query, exact=filters.exact_match)
        keep = {r.node.id for r in search_results}

        if filters.include_neighbors and keep:
            expansion = traverse(graph, TraversalConfig(
                start_nodes=tuple(n.id for n in graph.nodes if n.id in keep),
                relations=filters.enabled_relations,
                max_depth=filters.traversal_depth,
                direction=Direction.ANY,
            ))
            keep |= expansion.node_ids

        nodes = [n for n in graph.nodes if n.id in keep]
    else:
        nodes = list(graph.nodes)
        keep = {n.id for n in nodes}

    edges = [
        e for e in graph.edges
        if e.relation in filters.enabled_relations
        and e.source in keep
        and e.target in keep
    ]
    return Subgraph(nodes=nodes, edges=edges)


def explore(
    graph: CanonicalGraph,
    filters: FilterConfig | None = None,
    focus_nodes: list[str] | None = None,
    weights: FusionWeights | None = None,
) -> ExplorationResult:
    """
    Run one exploration pass for the given filters.

    With focus nodes the ranking is traversal-first fusion. Without them
    it is the pure search ordering, or graph order when there is no query.

    Args:
        graph: Current canonical graph snapshot
        filters: Active filter configuration (defaults if None)
        focus_nodes: Node IDs to traverse from
        weights: Fusion weights (defaults from settings)

    Returns:
        ExplorationResult
    """
    filters = filters or FilterConfig()
    query = filters.text_query.strip()

    search_results = (
        search(graph.nodes, query, exact=filters.exact_match) if query else []
    )
    subgraph = filter_subgraph(graph, filters, search_results)

    traversal: TraversalResult | None = None
    if focus_nodes:
        traversal = traverse(graph, TraversalConfig(
            start_nodes=tuple(focus_nodes),
            relations=filters.enabled_relations,
            max_depth=filters.traversal_depth,
            direction=Direction.OUTBOUND,
        ))
        ranked = rank(traversal.nodes, search_results, weights)
    elif query:
        # Pure search ranking: invert the lower-is-better score
        ranked = [
            RankedNode(node=r.node, score=1 - r.score, traversal_score=0.0, search_score=r.score)
            for r in search_results
        ]
    else:
        ranked = [RankedNode(node=n, score=0.0, traversal_score=0.0) for n in subgraph.nodes]

    logger.debug(
        f"Explore (query='{query}', focus={len(focus_nodes or [])}): "
        f"{len(subgraph.nodes)} nodes / {len(subgraph.edges)} edges visible, "
        f"{len(ranked)} ranked"
    )

    return ExplorationResult(
        filters=filters,
        subgraph=subgraph,
        ranked=ranked,
        search_results=search_results,
        traversal=traversal,
        stats=graph_stats(graph, filters),
    )
