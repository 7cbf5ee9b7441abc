"""Unit tests for traversal-first fusion."""

import pytest

from mathgraph.models import CanonicalGraph, Node
from mathgraph.retrieval import FusionWeights, SearchResult, fuse, rank


@pytest.fixture
def nodes(sample_graph: CanonicalGraph) -> dict[str, Node]:
    return {n.key: n for n in sample_graph.nodes}


class TestRank:
    """Tests for rank."""

    def test_default_weights(self, nodes: dict[str, Node]) -> None:
        """Test combined scores with the default 0.6 / 0.4 weights."""
        ranked = rank(
            [nodes["s1"], nodes["l1"], nodes["t1"]],
            [SearchResult(node=nodes["t1"], score=0.0), SearchResult(node=nodes["l1"], score=0.2)],
        )

        assert [r.node.key for r in ranked] == ["t1", "l1", "s1"]
        assert ranked[0].score == pytest.approx(1.0)
        assert ranked[1].score == pytest.approx(0.92)
        assert ranked[2].score == pytest.approx(0.6)

    def test_unmatched_nodes_get_membership_only(self, nodes: dict[str, Node]) -> None:
        """Test nodes without a search match score the traversal weight."""
        ranked = rank([nodes["s1"]], [])

        assert ranked[0].score == pytest.approx(0.6)
        assert ranked[0].search_score is None
        assert not ranked[0].matched_search

    def test_ties_keep_traversal_order(self, nodes: dict[str, Node]) -> None:
        """Test equal scores keep traversal discovery order."""
        ranked = rank([nodes["t2"], nodes["s1"], nodes["l2"]], [])
        assert [r.node.key for r in ranked] == ["t2", "s1", "l2"]

    def test_search_only_nodes_excluded(self, nodes: dict[str, Node]) -> None:
        """Test nodes found only by search are not ranked."""
        ranked = rank([nodes["s1"]], [SearchResult(node=nodes["l2"], score=0.0)])
        assert [r.node.key for r in ranked] == ["s1"]

    def test_custom_weights(self, nodes: dict[str, Node]) -> None:
        """Test explicit weights."""
        ranked = rank(
            [nodes["s1"], nodes["l1"]],
            [SearchResult(node=nodes["s1"], score=0.5)],
            weights=FusionWeights(traversal=0.0, search=1.0),
        )

        assert [r.node.key for r in ranked] == ["s1", "l1"]
        assert ranked[0].score == pytest.approx(0.5)
        assert ranked[1].score == 0.0

    def test_deterministic(self, nodes: dict[str, Node]) -> None:
        """Test identical inputs give identical output."""
        traversal = [nodes["s1"], nodes["l1"], nodes["l2"], nodes["t1"]]
        results = [SearchResult(node=nodes["l2"], score=0.1), SearchResult(node=nodes["s1"], score=0.1)]

        first = [(r.node.id, r.score) for r in rank(traversal, results)]
        second = [(r.node.id, r.score) for r in rank(traversal, results)]
        assert first == second
        assert [n for n, _ in first] == ["sections/s1", "lemmas/l2", "lemmas/l1", "theorems/t1"]


class TestFuse:
    """Tests for fuse."""

    def test_returns_nodes(self, nodes: dict[str, Node]) -> None:
        """Test fuse returns the ordered nodes."""
        fused = fuse([nodes["s1"], nodes["l1"]], [SearchResult(node=nodes["l1"], score=0.0)])
        assert fused == [nodes["l1"], nodes["s1"]]
