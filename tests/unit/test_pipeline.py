"""Unit tests for the exploration pipeline."""

from mathgraph.models import CanonicalGraph, FilterConfig, Relation
from mathgraph.retrieval import explore, filter_subgraph


class TestFilterSubgraph:
    """Tests for filter_subgraph."""

    def test_no_query_keeps_all_nodes(self, sample_graph: CanonicalGraph) -> None:
        """Test all nodes pass and edges are filtered by relation."""
        subgraph = filter_subgraph(
            sample_graph,
            FilterConfig(enabled_relations=frozenset({Relation.DEPENDS_ON})),
        )

        assert len(subgraph.nodes) == 5
        assert [e.id for e in subgraph.edges] == ["e1", "e3"]

    def test_query_keeps_matches(self, sample_graph: CanonicalGraph) -> None:
        """Test only matched nodes and edges between them pass."""
        subgraph = filter_subgraph(sample_graph, FilterConfig(text_query="Lemma", exact_match=True))

        assert [n.id for n in subgraph.nodes] == ["lemmas/l1", "lemmas/l2"]
        assert [e.id for e in subgraph.edges] == ["e5"]

    def test_include_neighbors(self, sample_graph: CanonicalGraph) -> None:
        """Test matched nodes are extended by their neighborhood."""
        subgraph = filter_subgraph(sample_graph, FilterConfig(
            text_query="Basic Lemma",
            exact_match=True,
            include_neighbors=True,
            traversal_depth=1,
        ))

        assert [n.id for n in subgraph.nodes] == [
            "sections/s1", "lemmas/l1", "lemmas/l2", "theorems/t1",
        ]
        assert [e.id for e in subgraph.edges] == ["e1", "e2", "e3", "e5"]

    def test_no_matches(self, sample_graph: CanonicalGraph) -> None:
        """Test an unmatched query leaves an empty subgraph."""
        subgraph = filter_subgraph(sample_graph, FilterConfig(text_query="zzzzzz"))

        assert subgraph.nodes == []
        assert subgraph.edges == []


class TestExplore:
    """Tests for explore."""

    def test_defaults(self, sample_graph: CanonicalGraph) -> None:
        """Test no query and no focus keeps graph order."""
        result = explore(sample_graph)

        assert [n.id for n in result.ranked_nodes] == [n.id for n in sample_graph.nodes]
        assert result.traversal is None
        assert result.stats.total_nodes == 5
        assert result.stats.active_filter_count == 0

    def test_query_ranking(self, sample_graph: CanonicalGraph) -> None:
        """Test a query alone ranks by search relevance."""
        result = explore(sample_graph, FilterConfig(text_query="lemna"))

        assert [n.id for n in result.ranked_nodes[:2]] == ["lemmas/l1", "lemmas/l2"]
        assert result.ranked[0].score == 1 - result.ranked[0].search_score
        assert result.stats.active_filter_count == 1

    def test_focus_fusion(self, sample_graph: CanonicalGraph) -> None:
        """Test focus nodes rank traversal results boosted by search."""
        result = explore(
            sample_graph,
            FilterConfig(text_query="Lemma", exact_match=True),
            focus_nodes=["sections/s1"],
        )

        assert result.traversal is not None
        assert result.traversal.node_ids == {
            "sections/s1", "lemmas/l1", "theorems/t1", "lemmas/l2",
        }
        assert [n.id for n in result.ranked_nodes] == [
            "lemmas/l1", "lemmas/l2", "sections/s1", "theorems/t1",
        ]
        assert [n.id for n in result.subgraph.nodes] == ["lemmas/l1", "lemmas/l2"]

    def test_focus_respects_relations(self, sample_graph: CanonicalGraph) -> None:
        """Test traversal from focus nodes only follows enabled relations."""
        result = explore(
            sample_graph,
            FilterConfig(enabled_relations=frozenset({Relation.DEPENDS_ON})),
            focus_nodes=["sections/s1"],
        )

        assert result.traversal.node_ids == {"sections/s1", "lemmas/l1"}

    def test_to_dict(self, sample_graph: CanonicalGraph) -> None:
        """Test dictionary form."""
        data = explore(sample_graph, focus_nodes=["lemmas/l2"]).to_dict()

        assert set(data) == {"subgraph", "ranked", "traversal", "stats"}
        assert data["stats"]["connected_components"] == 1
