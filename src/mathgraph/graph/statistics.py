"""Graph statistics for the status bar and reports."""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field

from mathgraph.models import CanonicalGraph, FilterConfig

logger = logging.getLogger(__name__)


@dataclass
class GraphStats:
    """Telemetry tuple recomputed after every load or filter change."""

    total_nodes: int = 0
    total_edges: int = 0
    active_filter_count: int = 0
    connected_components: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "active_filter_count": self.active_filter_count,
            "connected_components": self.connected_components,
        }


@dataclass
class DegreeHistogram:
    """Undirected degree distribution."""

    histogram: list[int] = field(default_factory=list)
    average_degree: float = 0.0
    max_degree: int = 0


def connected_components(graph: CanonicalGraph) -> int:
    """
    Count connected components, treating every edge as undirected.

    Relation and direction are ignored. Endpoints that are not nodes of
    the graph are ignored. An isolated node is its own component.
    """
    node_ids = graph.node_ids()
    adjacency: dict[str, list[str]] = defaultdict(list)
    for edge in graph.edges:
        if edge.source in node_ids and edge.target in node_ids:
            adjacency[edge.source].append(edge.target)
            adjacency[edge.target].append(edge.source)

    visited: set[str] = set()
    components = 0

    for node in graph.nodes:
        if node.id in visited:
            continue
        components += 1
        visited.add(node.id)
        stack = [node.id]
        while stack:
            current = stack.pop()
            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)

    return components


def node_degrees(graph: CanonicalGraph) -> dict[str, int]:
    """Undirected degree per node; a self-loop adds 2 to its node."""
    degrees = {node.id: 0 for node in graph.nodes}
    for edge in graph.edges:
        if edge.source in degrees:
            degrees[edge.source] += 1
        if edge.target in degrees:
            degrees[edge.target] += 1
    return degrees


def degree_histogram(graph: CanonicalGraph, buckets: int = 10) -> DegreeHistogram:
    """
    Bucket node degrees into a fixed number of bins.

    Bucket width is ceil(max_degree / buckets); the last bucket absorbs
    everything above its lower bound.

    Args:
        graph: Canonical graph
        buckets: Number of bins (>= 1)

    Returns:
        DegreeHistogram with counts, average and max degree
    """
    if buckets < 1:
        raise ValueError(f"buckets must be >= 1, got {buckets}")

    degrees = list(node_degrees(graph).values())
    histogram = [0] * buckets
    if not degrees:
        return DegreeHistogram(histogram=histogram)

    max_degree = max(degrees)
    bucket_width = math.ceil(max(max_degree, 1) / buckets)

    for degree in degrees:
        histogram[min(degree // bucket_width, buckets - 1)] += 1

    average = sum(degrees) / len(degrees) if graph.edges else 0.0
    return DegreeHistogram(
        histogram=histogram,
        average_degree=average,
        max_degree=max_degree,
    )


def graph_stats(graph: CanonicalGraph, filters: FilterConfig | None = None) -> GraphStats:
    """Compute the telemetry tuple for a graph and the active filters."""
    filters = filters or FilterConfig()
    stats = GraphStats(
        total_nodes=graph.node_count,
        total_edges=graph.edge_count,
        active_filter_count=filters.active_filter_count,
        connected_components=connected_components(graph),
    )
    logger.debug(f"Graph stats: {stats}")
    return stats


def format_report(stats: GraphStats, degrees: DegreeHistogram) -> str:
    """Format statistics as a human-readable string."""
    lines = [
        "=== Graph Report ===",
        "",
        f"  Nodes: {stats.total_nodes}",
        f"  Edges: {stats.total_edges}",
        f"  Connected components: {stats.connected_components}",
        f"  Active filters: {stats.active_filter_count}",
        "",
        "Degree distribution:",
        f"  Average degree: {degrees.average_degree:.2f}",
        f"  Max degree: {degrees.max_degree}",
    ]

    peak = max(degrees.histogram, default=0)
    for index, count in enumerate(degrees.histogram):
        bar = "#" * (round(count / peak * 20) if peak else 0)
        lines.append(f"  [{index:2d}] {count:5d} {bar}")

    return "\n".join(lines)
