"""Canonical graph store - owner of the loaded dataset.

Each load normalizes a raw payload into a new immutable, versioned
snapshot and swaps it in atomically. Readers take the current snapshot
and work on it without locking; a later load never mutates a snapshot
that is already handed out.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mathgraph.config import settings
from mathgraph.graph.normalizer import GraphFormat, check_unique_ids, normalize
from mathgraph.models import CanonicalGraph, Edge, Node, NodeKind, Relation

logger = logging.getLogger(__name__)


class NodeNotFoundError(KeyError):
    """Requested node id is not in the current snapshot."""


# Fallback dataset installed when a load fails
DEMO_GRAPH = CanonicalGraph(
    nodes=(
        Node(id="sections/s1", key="s1", kind=NodeKind.SECTION,
             label="Introduction", title="Introduction"),
        Node(id="lemmas/l1", key="l1", kind=NodeKind.LEMMA,
             label="Basic Lemma", title="Basic Lemma"),
        Node(id="theorems/t1", key="t1", kind=NodeKind.THEOREM,
             label="Main Theorem", title="Main Theorem"),
    ),
    edges=(
        Edge(id="e1", source="sections/s1", target="lemmas/l1", relation=Relation.DEPENDS_ON),
        Edge(id="e2", source="lemmas/l1", target="theorems/t1", relation=Relation.REFINES),
    ),
)


@dataclass
class NeighborLists:
    """Incoming and outgoing (node, edge) pairs of one node."""

    node: Node
    outgoing: list[tuple[Node, Edge]] = field(default_factory=list)
    incoming: list[tuple[Node, Edge]] = field(default_factory=list)


@dataclass(frozen=True)
class GraphSnapshot:
    """An immutable, versioned view of one loaded dataset."""

    version: int
    graph: CanonicalGraph
    source_format: str
    dropped_edges: int = 0
    nodes_by_id: dict[str, Node] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        version: int,
        graph: CanonicalGraph,
        source_format: str,
        dropped_edges: int = 0,
    ) -> "GraphSnapshot":
        return cls(
            version=version,
            graph=graph,
            source_format=source_format,
            dropped_edges=dropped_edges,
            nodes_by_id={node.id: node for node in graph.nodes},
        )


class GraphStore:
    """
    Holds the current graph snapshot for the hosting application.

    Loads replace the snapshot wholesale; there is no in-place mutation.
    """

    def __init__(self, prune_dangling_edges: bool | None = None) -> None:
        self.prune_dangling_edges = (
            settings.prune_dangling_edges
            if prune_dangling_edges is None
            else prune_dangling_edges
        )
        self._lock = threading.Lock()
        self._snapshot = GraphSnapshot.build(0, CanonicalGraph(), "empty")

    @property
    def snapshot(self) -> GraphSnapshot:
        """Current snapshot (read-only)."""
        return self._snapshot

    @property
    def graph(self) -> CanonicalGraph:
        return self._snapshot.graph

    def _install(self, graph: CanonicalGraph, source_format: str) -> GraphSnapshot:
        dropped = 0
        if self.prune_dangling_edges:
            pruned = graph.without_dangling_edges()
            dropped = graph.edge_count - pruned.edge_count
            if dropped:
                logger.warning(f"Dropped {dropped} dangling edges at ingestion")
            graph = pruned

        with self._lock:
            snapshot = GraphSnapshot.build(
                version=self._snapshot.version + 1,
                graph=graph,
                source_format=source_format,
                dropped_edges=dropped,
            )
            self._snapshot = snapshot

        logger.info(
            f"Loaded {graph.node_count} nodes and {graph.edge_count} edges "
            f"({source_format}, version {snapshot.version})"
        )
        return snapshot

    def load(self, raw: Any) -> GraphSnapshot:
        """
        Normalize a raw payload and make it the current snapshot.

        Raises:
            FormatError: If the payload is not a recognized encoding.
                The previous snapshot stays active.
        """
        graph_format, graph = normalize(raw)
        return self._install(graph, graph_format.value)

    def load_file(self, path: str | Path) -> GraphSnapshot:
        """Load a JSON dataset from disk."""
        path = Path(path)
        logger.info(f"Loading graph data from {path}")
        raw = json.loads(path.read_text(encoding="utf-8"))
        return self.load(raw)

    def load_graph(self, graph: CanonicalGraph) -> GraphSnapshot:
        """
        Install an already-canonical graph.

        Raises:
            FormatError: If two nodes share an id.
        """
        check_unique_ids(graph.nodes)
        return self._install(graph, GraphFormat.NATIVE.value)

    def load_demo(self) -> GraphSnapshot:
        """Install the built-in demo dataset."""
        return self._install(DEMO_GRAPH, "demo")

    def get_node(self, node_id: str) -> Node:
        """Look up a node in the current snapshot."""
        node = self._snapshot.nodes_by_id.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def neighbors(self, node_id: str) -> NeighborLists:
        """
        Incoming and outgoing neighbors by a linear scan of the edges.

        A self-loop is reported once, as outgoing.
        """
        snapshot = self._snapshot
        node = snapshot.nodes_by_id.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)

        result = NeighborLists(node=node)
        for edge in snapshot.graph.edges:
            if edge.source == node_id:
                target = snapshot.nodes_by_id.get(edge.target)
                if target is not None:
                    result.outgoing.append((target, edge))
            elif edge.target == node_id:
                source = snapshot.nodes_by_id.get(edge.source)
                if source is not None:
                    result.incoming.append((source, edge))

        return result
