"""Unit tests for the versioned graph store."""

import json
from pathlib import Path

import pytest

from mathgraph.graph import FormatError, GraphStore, NodeNotFoundError
from mathgraph.graph.store import DEMO_GRAPH
from mathgraph.models import Relation


class TestGraphStoreLoading:
    """Tests for loading and versioning."""

    def test_initial_snapshot(self) -> None:
        """Test a new store holds an empty version 0 snapshot."""
        store = GraphStore()

        assert store.snapshot.version == 0
        assert store.graph.is_empty
        assert store.snapshot.source_format == "empty"

    def test_load_portable(self, portable_payload: dict) -> None:
        """Test loading a portable payload installs version 1."""
        store = GraphStore()
        snapshot = store.load(portable_payload)

        assert snapshot.version == 1
        assert snapshot.source_format == "portable"
        assert store.graph.node_count == 2
        assert store.graph.edge_count == 1

    def test_versions_increase(self, portable_payload: dict, native_payload: dict) -> None:
        """Test each load produces a new version and keeps old snapshots intact."""
        store = GraphStore()
        first = store.load(portable_payload)
        second = store.load(native_payload)

        assert second.version == first.version + 1
        assert store.snapshot is second
        assert first.graph.node_count == 2
        assert [n.id for n in first.graph.nodes] == ["sections/s1", "lemmas/l1"]

    def test_failed_load_keeps_snapshot(self, portable_payload: dict) -> None:
        """Test a format error leaves the current snapshot active."""
        store = GraphStore()
        snapshot = store.load(portable_payload)

        with pytest.raises(FormatError):
            store.load({"vertices": []})

        assert store.snapshot is snapshot
        assert store.snapshot.version == 1

    def test_prunes_dangling_edges(self, native_payload: dict) -> None:
        """Test dangling edges are dropped at ingestion."""
        store = GraphStore(prune_dangling_edges=True)
        snapshot = store.load(native_payload)

        assert snapshot.dropped_edges == 1
        assert [e.id for e in store.graph.edges] == ["edges/a", "edges/b"]
        assert store.graph.dangling_edges() == []

    def test_keeps_dangling_edges(self, native_payload: dict) -> None:
        """Test pruning can be disabled."""
        store = GraphStore(prune_dangling_edges=False)
        snapshot = store.load(native_payload)

        assert snapshot.dropped_edges == 0
        assert store.graph.edge_count == 3

    def test_load_demo(self) -> None:
        """Test the built-in demo dataset."""
        store = GraphStore()
        snapshot = store.load_demo()

        assert snapshot.source_format == "demo"
        assert snapshot.graph == DEMO_GRAPH
        assert [e.relation for e in store.graph.edges] == [Relation.DEPENDS_ON, Relation.REFINES]

    def test_load_file(self, tmp_path: Path, portable_payload: dict) -> None:
        """Test loading a JSON file from disk."""
        path = tmp_path / "graph.json"
        path.write_text(json.dumps(portable_payload), encoding="utf-8")

        store = GraphStore()
        snapshot = store.load_file(path)

        assert snapshot.source_format == "portable"
        assert store.graph.node_count == 2

    def test_load_file_missing(self, tmp_path: Path) -> None:
        """Test a missing file raises OSError and installs nothing."""
        store = GraphStore()
        with pytest.raises(OSError):
            store.load_file(tmp_path / "nope.json")
        assert store.snapshot.version == 0


class TestGraphStoreLookup:
    """Tests for node and neighbor lookup."""

    def test_get_node(self, store: GraphStore) -> None:
        """Test node lookup by id."""
        assert store.get_node("lemmas/l1").label == "Basic Lemma"

    def test_get_node_missing(self, store: GraphStore) -> None:
        """Test unknown ids raise NodeNotFoundError (a KeyError)."""
        with pytest.raises(NodeNotFoundError):
            store.get_node("lemmas/zzz")
        with pytest.raises(KeyError):
            store.get_node("lemmas/zzz")

    def test_neighbors(self, store: GraphStore) -> None:
        """Test incoming and outgoing neighbors with their edges."""
        neighbors = store.neighbors("lemmas/l1")

        assert neighbors.node.id == "lemmas/l1"
        assert [(n.id, e.id) for n, e in neighbors.outgoing] == [
            ("theorems/t1", "e2"),
            ("lemmas/l2", "e5"),
        ]
        assert [(n.id, e.id) for n, e in neighbors.incoming] == [("sections/s1", "e1")]

    def test_neighbors_isolated(self, graph_factory) -> None:
        """Test a node without edges has no neighbors."""
        store = GraphStore()
        store.load_graph(graph_factory([], extra_nodes=("a",)))
        neighbors = store.neighbors("a")

        assert neighbors.outgoing == []
        assert neighbors.incoming == []

    def test_neighbors_self_loop(self, graph_factory) -> None:
        """Test a self-loop is listed once, as outgoing."""
        store = GraphStore()
        store.load_graph(graph_factory([("a", "a", "knn")]))
        neighbors = store.neighbors("a")

        assert len(neighbors.outgoing) == 1
        assert neighbors.incoming == []

    def test_neighbors_missing(self, store: GraphStore) -> None:
        """Test unknown ids raise NodeNotFoundError."""
        with pytest.raises(NodeNotFoundError):
            store.neighbors("theorems/t9")


class TestGraphStoreUniqueness:
    """Tests for node id uniqueness at ingestion."""

    def test_load_duplicate_keeps_snapshot(self, portable_payload: dict) -> None:
        """Test a payload with a repeated node id is rejected."""
        store = GraphStore()
        snapshot = store.load(portable_payload)

        with pytest.raises(FormatError):
            store.load({
                "nodes": {"sections": [{"id": "s1"}, {"id": "s1"}]},
                "edges": {"depends_on": []},
            })

        assert store.snapshot is snapshot
        assert store.graph.node_count == 2

    def test_load_graph_duplicate(self, sample_graph) -> None:
        """Test canonical graphs with a repeated node id are rejected."""
        store = GraphStore()
        duplicated = sample_graph.__class__(
            nodes=sample_graph.nodes + sample_graph.nodes[:1],
            edges=sample_graph.edges,
        )

        with pytest.raises(FormatError):
            store.load_graph(duplicated)
        assert store.snapshot.version == 0
