"""Graph core: normalization, storage, traversal and statistics.

Provides:
- Raw payload classification and normalization (portable/native)
- Versioned in-memory graph store
- Depth-bounded, relation-filtered traversal
- Connected components and degree statistics
"""

from mathgraph.graph.normalizer import (
    FormatError,
    GraphFormat,
    check_unique_ids,
    classify,
    normalize,
    normalize_native,
    normalize_portable,
)
from mathgraph.graph.statistics import (
    DegreeHistogram,
    GraphStats,
    connected_components,
    degree_histogram,
    graph_stats,
)
from mathgraph.graph.store import GraphSnapshot, GraphStore, NeighborLists, NodeNotFoundError
from mathgraph.graph.traversal import Direction, Path, TraversalConfig, TraversalResult, traverse

__all__ = [
    # Normalizer
    "FormatError",
    "GraphFormat",
    "check_unique_ids",
    "classify",
    "normalize",
    "normalize_native",
    "normalize_portable",
    # Store
    "GraphSnapshot",
    "GraphStore",
    "NeighborLists",
    "NodeNotFoundError",
    # Traversal
    "Direction",
    "Path",
    "TraversalConfig",
    "TraversalResult",
    "traverse",
    # Statistics
    "DegreeHistogram",
    "GraphStats",
    "connected_components",
    "degree_histogram",
    "graph_stats",
]
