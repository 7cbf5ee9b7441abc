#!/usr/bin/env python
"""Print statistics for a graph dataset.

Loads a portable or native JSON dataset the same way the API does and
prints node/edge counts, connected components and the degree histogram.

Usage:
    # Report on a dataset
    uv run python scripts/graph_report.py data/graph.json

    # Built-in demo graph, with a search filter applied
    uv run python scripts/graph_report.py --demo --query lemma
"""

import argparse
import logging
import sys

# Add src to path
sys.path.insert(0, "src")

from mathgraph.config import settings
from mathgraph.graph import GraphStore
from mathgraph.graph.statistics import degree_histogram, format_report, graph_stats
from mathgraph.models import CanonicalGraph, FilterConfig
from mathgraph.retrieval import filter_subgraph

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Print statistics for a graph dataset")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("path", nargs="?", help="Path to a JSON dataset")
    source.add_argument("--demo", action="store_true", help="Use the built-in demo graph")
    parser.add_argument("--query", default="", help="Restrict to nodes matching this text")
    parser.add_argument("--exact", action="store_true", help="Near-exact instead of fuzzy search")
    parser.add_argument(
        "--buckets",
        type=int,
        default=settings.histogram_buckets,
        help="Number of degree histogram buckets",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    store = GraphStore()
    if args.demo:
        store.load_demo()
    else:
        try:
            store.load_file(args.path)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot load {args.path}: {e}")
            return 1

    graph = store.graph
    filters = FilterConfig(text_query=args.query, exact_match=args.exact)
    if args.query:
        subgraph = filter_subgraph(graph, filters)
        graph = CanonicalGraph(nodes=tuple(subgraph.nodes), edges=tuple(subgraph.edges))

    stats = graph_stats(graph, filters)
    degrees = degree_histogram(graph, args.buckets)

    print()
    print(format_report(stats, degrees))
    return 0


if __name__ == "__main__":
    sys.exit(main())
