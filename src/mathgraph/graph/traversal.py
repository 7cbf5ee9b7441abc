"""Depth-bounded multi-hop traversal over the canonical graph.

Builds a relation-filtered, direction-aware adjacency projection once per
call, then runs a depth-first search from every start node independently.
Returns the reached subgraph plus every discovered path.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from mathgraph.models import CanonicalGraph, Edge, Node, Relation

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Which edge orientation a traversal follows."""

    OUTBOUND = "outbound"
    INBOUND = "inbound"
    ANY = "any"


@dataclass(frozen=True)
class TraversalConfig:
    """Parameters of one traversal call."""

    start_nodes: tuple[str, ...]
    relations: frozenset[Relation]
    max_depth: int = 2
    direction: Direction = Direction.OUTBOUND

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        object.__setattr__(self, "start_nodes", tuple(self.start_nodes))
        object.__setattr__(self, "relations", frozenset(Relation(r) for r in self.relations))
        object.__setattr__(self, "direction", Direction(self.direction))


@dataclass(frozen=True)
class Path:
    """A walk from a start node: node ids, edge ids, and edge count."""

    nodes: tuple[str, ...]
    edges: tuple[str, ...]

    @property
    def start(self) -> str:
        return self.nodes[0]

    @property
    def end(self) -> str:
        return self.nodes[-1]

    @property
    def length(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "start": self.start,
            "end": self.end,
            "length": self.length,
            "nodes": list(self.nodes),
            "edges": list(self.edges),
        }


@dataclass
class TraversalResult:
    """Reached nodes and edges (deduplicated, discovery order) plus paths."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    paths: list[Path] = field(default_factory=list)

    @property
    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    @property
    def edge_ids(self) -> set[str]:
        return {e.id for e in self.edges}

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "paths": [p.to_dict() for p in self.paths],
        }


def build_adjacency(
    graph: CanonicalGraph,
    relations: Iterable[Relation],
    direction: Direction,
) -> dict[str, list[tuple[Edge, str]]]:
    """
    Project the graph onto an adjacency list.

    Edges keep their original order. Edges whose endpoints are not both
    present in the graph are skipped.

    Returns:
        node_id -> [(edge, neighbor_id)]
    """
    relations = frozenset(relations)
    node_ids = graph.node_ids()
    adjacency: dict[str, list[tuple[Edge, str]]] = defaultdict(list)

    for edge in graph.edges:
        if edge.relation not in relations:
            continue
        if edge.source not in node_ids or edge.target not in node_ids:
            continue
        if direction in (Direction.OUTBOUND, Direction.ANY):
            adjacency[edge.source].append((edge, edge.target))
        if direction in (Direction.INBOUND, Direction.ANY):
            adjacency[edge.target].append((edge, edge.source))

    return adjacency


def traverse(graph: CanonicalGraph, config: TraversalConfig) -> TraversalResult:
    """
    Traverse the graph from each start node.

    Visited state is kept per start node, so a node reachable from two
    starts is explored from both. Within one start, a node is re-expanded
    only when reached again at a strictly smaller depth, which bounds
    the work on cycles and reaches every node within `max_depth` hops.
    Every edge walked records a path, including edges that lead back to
    an already visited node. The walk keeps its own stack, so depth is
    not limited by the interpreter recursion limit.

    Args:
        graph: Canonical graph snapshot (read-only)
        config: Start nodes, relations, depth bound and direction

    Returns:
        TraversalResult; unknown start nodes contribute nothing
    """
    nodes_by_id = {node.id: node for node in graph.nodes}
    adjacency = build_adjacency(graph, config.relations, config.direction)

    result_nodes: dict[str, Node] = {}
    result_edges: dict[str, Edge] = {}
    paths: list[Path] = []

    def walk(start: str) -> None:
        best_depth: dict[str, int] = {}
        # Frames: (node_id, depth, path_nodes, path_edges, pending neighbors)
        stack: list[tuple[str, int, tuple[str, ...], tuple[str, ...], Iterator]] = []

        def enter(node_id: str, depth: int, path_nodes: tuple[str, ...], path_edges: tuple[str, ...]) -> None:
            best_depth[node_id] = depth
            result_nodes.setdefault(node_id, nodes_by_id[node_id])
            if depth < config.max_depth:
                stack.append((node_id, depth, path_nodes, path_edges, iter(adjacency.get(node_id, ()))))

        enter(start, 0, (start,), ())
        while stack:
            _, depth, path_nodes, path_edges, pending = stack[-1]
            step = next(pending, None)
            if step is None:
                stack.pop()
                continue

            edge, neighbor_id = step
            result_edges.setdefault(edge.id, edge)
            new_nodes = path_nodes + (neighbor_id,)
            new_edges = path_edges + (edge.id,)
            paths.append(Path(nodes=new_nodes, edges=new_edges))

            seen_at = best_depth.get(neighbor_id)
            if seen_at is None or depth + 1 < seen_at:
                enter(neighbor_id, depth + 1, new_nodes, new_edges)

    for start in config.start_nodes:
        if start not in nodes_by_id:
            logger.debug(f"Traversal start node not in graph: {start}")
            continue
        walk(start)

    logger.debug(
        f"Traversal from {len(config.start_nodes)} start nodes "
        f"(depth={config.max_depth}, direction={config.direction.value}): "
        f"{len(result_nodes)} nodes, {len(result_edges)} edges, {len(paths)} paths"
    )

    return TraversalResult(
        nodes=list(result_nodes.values()),
        edges=list(result_edges.values()),
        paths=paths,
    )
