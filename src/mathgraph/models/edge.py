"""Edge model - typed directed relations between nodes."""

from dataclasses import dataclass
from enum import Enum


class Relation(str, Enum):
    """Relation kind of an edge."""

    DEPENDS_ON = "depends_on"
    CONTRADICTS = "contradicts"
    REFINES = "refines"
    KNN = "knn"  # Similarity, weighted


ALL_RELATIONS: frozenset[Relation] = frozenset(Relation)


@dataclass(frozen=True)
class Edge:
    """
    A directed edge of the canonical multigraph.

    Parallel edges (same endpoints, same or different relation) are kept
    as independent records. `weight` is only meaningful for knn edges.
    """

    id: str
    source: str  # `from` node id
    target: str  # `to` node id
    relation: Relation
    weight: float | None = None

    def touches(self, node_id: str) -> bool:
        """Check whether the edge starts or ends at a node."""
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "from": self.source,
            "to": self.target,
            "relation": self.relation.value,
            "weight": self.weight,
        }
