"""Canonical graph model - the single normalized node/edge representation."""

from dataclasses import dataclass, field

from mathgraph.models.edge import Edge
from mathgraph.models.node import Node


@dataclass(frozen=True)
class CanonicalGraph:
    """Ordered nodes plus ordered edges forming a multigraph."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_ids(self) -> set[str]:
        """Get the set of node IDs."""
        return {node.id for node in self.nodes}

    def dangling_edges(self) -> list[Edge]:
        """Edges whose source or target does not resolve to a node."""
        ids = self.node_ids()
        return [e for e in self.edges if e.source not in ids or e.target not in ids]

    def without_dangling_edges(self) -> "CanonicalGraph":
        """Copy of the graph with dangling edges removed."""
        ids = self.node_ids()
        edges = tuple(e for e in self.edges if e.source in ids and e.target in ids)
        return CanonicalGraph(nodes=self.nodes, edges=edges)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


@dataclass(frozen=True)
class Subgraph:
    """A filtered subset of the canonical graph handed to renderers."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
