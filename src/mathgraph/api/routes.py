"""API routes for Mathgraph.

Provides:
- /v1/graph/load for replacing the dataset
- /v1/graph/traverse, /v1/graph/search, /v1/graph/explore for querying
- /v1/graph/command for the keyword command stub
- Node inspection and statistics endpoints
"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, Body, HTTPException, Request
from pydantic import BaseModel, Field

from mathgraph.config import settings
from mathgraph.graph import (
    Direction,
    FormatError,
    GraphStore,
    NodeNotFoundError,
    TraversalConfig,
    degree_histogram,
    graph_stats,
    traverse,
)
from mathgraph.models import Edge, FilterConfig, Node, Relation
from mathgraph.query import apply_command, interpret
from mathgraph.retrieval import explore, search

logger = logging.getLogger(__name__)

router = APIRouter()

# Mirrors mathgraph.models.SEARCHABLE_FIELDS
SearchField = Literal["label", "title", "key", "document_id", "content"]


# ============================================================================
# Graph Models
# ============================================================================


class NodeInfo(BaseModel):
    """Node as returned by the API."""

    id: str
    key: str
    kind: str
    label: str | None = None
    title: str | None = None
    document_id: str | None = None
    content: str | None = None


class EdgeInfo(BaseModel):
    """Edge as returned by the API."""

    id: str
    source: str
    target: str
    relation: Relation
    weight: float | None = None


class PathInfo(BaseModel):
    """A traversal path."""

    nodes: list[str]
    edges: list[str]
    length: int


class StatsInfo(BaseModel):
    """Statistics tuple."""

    total_nodes: int
    total_edges: int
    active_filter_count: int
    connected_components: int


class FiltersModel(BaseModel):
    """Filter configuration accepted from clients."""

    text_query: str = ""
    exact_match: bool = False
    include_neighbors: bool = False
    enabled_relations: list[Relation] = Field(
        default_factory=lambda: list(Relation), min_length=1
    )
    traversal_depth: int = Field(default=2, ge=1, le=10)

    def to_config(self) -> FilterConfig:
        return FilterConfig(
            text_query=self.text_query,
            exact_match=self.exact_match,
            include_neighbors=self.include_neighbors,
            enabled_relations=frozenset(self.enabled_relations),
            traversal_depth=self.traversal_depth,
        )

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FiltersModel":
        return cls(
            text_query=config.text_query,
            exact_match=config.exact_match,
            include_neighbors=config.include_neighbors,
            enabled_relations=[r for r in Relation if r in config.enabled_relations],
            traversal_depth=config.traversal_depth,
        )


# ============================================================================
# Request / Response Models
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    graph_version: int
    version: str = "0.1.0"


class LoadResponse(BaseModel):
    """Result of replacing the dataset."""

    version: int
    source_format: str
    node_count: int
    edge_count: int
    dropped_edges: int = 0


class StatsResponse(StatsInfo):
    """Statistics with the degree distribution."""

    degree_histogram: list[int]
    average_degree: float
    max_degree: int


class TraverseRequest(BaseModel):
    """Multi-hop traversal request."""

    start_nodes: list[str]
    relations: list[Relation] = Field(default_factory=lambda: list(Relation))
    max_depth: int = Field(default=2, ge=0, le=10)
    direction: Direction = Direction.OUTBOUND


class TraverseResponse(BaseModel):
    """Reached subgraph and discovered paths."""

    nodes: list[NodeInfo]
    edges: list[EdgeInfo]
    paths: list[PathInfo]


class SearchRequest(BaseModel):
    """Text search request."""

    query: str
    exact: bool = False
    fields: list[SearchField] | None = None
    max_results: int | None = Field(default=None, ge=1)


class SearchHit(BaseModel):
    """One search result (score: lower is better)."""

    node: NodeInfo
    score: float
    matched_fields: list[str] = []


class SearchResponse(BaseModel):
    """Search results, best first."""

    results: list[SearchHit]


class ExploreRequest(BaseModel):
    """Exploration request: filters plus optional focus nodes."""

    filters: FiltersModel = Field(default_factory=FiltersModel)
    focus_nodes: list[str] = []


class RankedInfo(BaseModel):
    """A ranked node (score: higher is better)."""

    node: NodeInfo
    score: float
    search_score: float | None = None


class ExploreResponse(BaseModel):
    """Filtered subgraph, ranking and statistics."""

    nodes: list[NodeInfo]
    edges: list[EdgeInfo]
    ranked: list[RankedInfo]
    paths: list[PathInfo] = []
    stats: StatsInfo


class CommandRequest(BaseModel):
    """Free-text command applied to the current filters."""

    text: str = Field(min_length=1)
    filters: FiltersModel = Field(default_factory=FiltersModel)


class CommandResponse(BaseModel):
    """Updated filters and focus node after a command."""

    kind: str
    filters: FiltersModel
    focus_node: str | None = None


class NeighborInfo(BaseModel):
    """A neighbor and the edge connecting it."""

    node: NodeInfo
    edge: EdgeInfo


class NeighborsResponse(BaseModel):
    """Incoming and outgoing neighbors of a node."""

    node: NodeInfo
    outgoing: list[NeighborInfo]
    incoming: list[NeighborInfo]


# ============================================================================
# Helper Functions
# ============================================================================


def get_store(request: Request) -> GraphStore:
    """Get graph store from app state."""
    return request.app.state.store


def node_info(node: Node) -> NodeInfo:
    return NodeInfo(**node.to_dict())


def edge_info(edge: Edge) -> EdgeInfo:
    return EdgeInfo(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        relation=edge.relation,
        weight=edge.weight,
    )


def stats_info(stats) -> StatsInfo:
    return StatsInfo(**stats.to_dict())


# ============================================================================
# Graph Endpoints (plain functions: FastAPI runs them in its threadpool)
# ============================================================================


@router.post("/v1/graph/load", response_model=LoadResponse)
def load_graph(
    request: Request,
    payload: dict[str, Any] = Body(...),
) -> LoadResponse:
    """
    Replace the current dataset with a raw graph payload.

    Accepts the portable (by-category) or native (flat record) encoding.
    On a format error the previous dataset stays active.
    """
    store = get_store(request)

    try:
        snapshot = store.load(payload)
    except FormatError as e:
        logger.error(f"Rejected graph payload: {e}")
        raise HTTPException(status_code=422, detail=f"Invalid graph data: {e}")

    return LoadResponse(
        version=snapshot.version,
        source_format=snapshot.source_format,
        node_count=snapshot.graph.node_count,
        edge_count=snapshot.graph.edge_count,
        dropped_edges=snapshot.dropped_edges,
    )


@router.get("/v1/graph/stats", response_model=StatsResponse)
def get_stats(request: Request) -> StatsResponse:
    """Statistics for the current dataset with default filters."""
    graph = get_store(request).graph
    stats = graph_stats(graph)
    degrees = degree_histogram(graph, settings.histogram_buckets)

    return StatsResponse(
        **stats.to_dict(),
        degree_histogram=degrees.histogram,
        average_degree=degrees.average_degree,
        max_degree=degrees.max_degree,
    )


@router.post("/v1/graph/traverse", response_model=TraverseResponse)
def traverse_graph(request: Request, body: TraverseRequest) -> TraverseResponse:
    """Depth-bounded traversal from the given start nodes."""
    result = traverse(get_store(request).graph, TraversalConfig(
        start_nodes=tuple(body.start_nodes),
        relations=frozenset(body.relations),
        max_depth=body.max_depth,
        direction=body.direction,
    ))

    return TraverseResponse(
        nodes=[node_info(n) for n in result.nodes],
        edges=[edge_info(e) for e in result.edges],
        paths=[
            PathInfo(nodes=list(p.nodes), edges=list(p.edges), length=p.length)
            for p in result.paths
        ],
    )


@router.post("/v1/graph/search", response_model=SearchResponse)
def search_graph(request: Request, body: SearchRequest) -> SearchResponse:
    """Fuzzy (or near-exact) text search over node fields."""
    results = search(
        get_store(request).graph.nodes,
        body.query,
        fields=body.fields,
        exact=body.exact,
        max_results=body.max_results,
    )

    return SearchResponse(results=[
        SearchHit(
            node=node_info(r.node),
            score=r.score,
            matched_fields=[m.field for m in r.matches],
        )
        for r in results
    ])


@router.post("/v1/graph/explore", response_model=ExploreResponse)
def explore_graph(request: Request, body: ExploreRequest) -> ExploreResponse:
    """Filtered subgraph plus traversal/search ranking for the given filters."""
    result = explore(
        get_store(request).graph,
        filters=body.filters.to_config(),
        focus_nodes=body.focus_nodes,
    )

    return ExploreResponse(
        nodes=[node_info(n) for n in result.subgraph.nodes],
        edges=[edge_info(e) for e in result.subgraph.edges],
        ranked=[
            RankedInfo(node=node_info(r.node), score=r.score, search_score=r.search_score)
            for r in result.ranked
        ],
        paths=[
            PathInfo(nodes=list(p.nodes), edges=list(p.edges), length=p.length)
            for p in (result.traversal.paths if result.traversal else [])
        ],
        stats=stats_info(result.stats),
    )


@router.post("/v1/graph/command", response_model=CommandResponse)
def run_command(request: Request, body: CommandRequest) -> CommandResponse:
    """Apply a keyword command (search / focus / relation filter)."""
    command = interpret(body.text)
    filters, focus = apply_command(
        body.filters.to_config(),
        command,
        graph=get_store(request).graph,
    )

    return CommandResponse(
        kind=command.kind.value,
        filters=FiltersModel.from_config(filters),
        focus_node=focus,
    )


@router.get("/v1/graph/nodes/{node_id:path}/neighbors", response_model=NeighborsResponse)
def get_neighbors(request: Request, node_id: str) -> NeighborsResponse:
    """Incoming and outgoing neighbors of a node."""
    try:
        neighbors = get_store(request).neighbors(node_id)
    except NodeNotFoundError:
        raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")

    return NeighborsResponse(
        node=node_info(neighbors.node),
        outgoing=[
            NeighborInfo(node=node_info(n), edge=edge_info(e))
            for n, e in neighbors.outgoing
        ],
        incoming=[
            NeighborInfo(node=node_info(n), edge=edge_info(e))
            for n, e in neighbors.incoming
        ],
    )


# ============================================================================
# Admin Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        graph_version=get_store(request).snapshot.version,
    )
