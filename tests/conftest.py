"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from mathgraph.config import Settings, get_test_settings
from mathgraph.graph import GraphStore
from mathgraph.models import CanonicalGraph, Edge, Node, NodeKind, Relation


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def portable_payload() -> dict[str, Any]:
    """Small portable (by-category) payload."""
    return {
        "nodes": {
            "sections": [{"id": "s1", "title": "Intro"}],
            "lemmas": [{"id": "l1"}],
        },
        "edges": {
            "depends_on": [{"from": "s1", "to": "l1", "type": "depends_on"}],
        },
    }


@pytest.fixture
def native_payload() -> dict[str, Any]:
    """Native payload as exported by the document database."""
    return {
        "nodes": [
            {"_id": "sections/s1", "_key": "s1", "type": "section", "title": "Introduction", "doc_id": "doc-1"},
            {"_id": "lemmas/l1", "_key": "l1", "type": "lemma", "normalized_prop": "x > 0"},
            {"_id": "theorems/t1", "_key": "t1", "type": "theorem", "label": "Main Theorem"},
        ],
        "edges": [
            {"_id": "edges/a", "_from": "sections/s1", "_to": "lemmas/l1", "type": "depends_on"},
            {"_id": "edges/b", "_from": "lemmas/l1", "_to": "theorems/t1", "type": "refines"},
            {"_id": "edges/c", "_from": "theorems/t1", "_to": "lemmas/l9", "type": "knn", "weight": 0.5},
        ],
    }


@pytest.fixture
def sample_graph() -> CanonicalGraph:
    """Five statements with one edge of every relation kind."""
    return CanonicalGraph(
        nodes=(
            Node(id="sections/s1", key="s1", kind=NodeKind.SECTION,
                 label="Introduction", title="Introduction", document_id="doc-1"),
            Node(id="lemmas/l1", key="l1", kind=NodeKind.LEMMA,
                 label="Basic Lemma", title="Basic Lemma", document_id="doc-1"),
            Node(id="lemmas/l2", key="l2", kind=NodeKind.LEMMA,
                 label="Compactness Lemma", title="Compactness Lemma", document_id="doc-2"),
            Node(id="theorems/t1", key="t1", kind=NodeKind.THEOREM,
                 label="Main Theorem", title="Main Theorem", document_id="doc-1"),
            Node(id="theorems/t2", key="t2", kind=NodeKind.THEOREM,
                 label="Fixed Point Theorem", title="Fixed Point Theorem", document_id="doc-2"),
        ),
        edges=(
            Edge(id="e1", source="sections/s1", target="lemmas/l1", relation=Relation.DEPENDS_ON),
            Edge(id="e2", source="lemmas/l1", target="theorems/t1", relation=Relation.REFINES),
            Edge(id="e3", source="lemmas/l2", target="theorems/t1", relation=Relation.DEPENDS_ON),
            Edge(id="e4", source="theorems/t2", target="theorems/t1", relation=Relation.CONTRADICTS),
            Edge(id="e5", source="lemmas/l1", target="lemmas/l2", relation=Relation.KNN, weight=0.8),
        ),
    )


@pytest.fixture
def store(sample_graph: CanonicalGraph) -> GraphStore:
    """Store with the sample graph installed."""
    graph_store = GraphStore(prune_dangling_edges=True)
    graph_store.load_graph(sample_graph)
    return graph_store


def make_graph(edges: list[tuple[str, str, str]], extra_nodes: tuple[str, ...] = ()) -> CanonicalGraph:
    """Build a graph of section nodes from (source, target, relation) triples."""
    ids: list[str] = []
    for source, target, _ in edges:
        for node_id in (source, target):
            if node_id not in ids:
                ids.append(node_id)
    for node_id in extra_nodes:
        if node_id not in ids:
            ids.append(node_id)

    return CanonicalGraph(
        nodes=tuple(Node(id=i, key=i, kind=NodeKind.SECTION) for i in ids),
        edges=tuple(
            Edge(id=f"e{n}", source=s, target=t, relation=Relation(r))
            for n, (s, t, r) in enumerate(edges)
        ),
    )


@pytest.fixture
def graph_factory():
    """Factory for small ad-hoc graphs."""
    return make_graph
