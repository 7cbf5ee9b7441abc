"""Raw graph payload classification and normalization.

Two encodings are accepted:

- Portable: `nodes` and `edges` are objects keyed by category
  (sections/lemmas/theorems, depends_on/contradicts/refines/knn), records
  carry collection-local ids.
- Native: flat `nodes` and `edges` arrays of records that already carry
  fully-qualified ids (`_id`/`_key`, `_from`/`_to` as exported by the
  document database, or the plain `id`/`key`, `from`/`to` spellings).

Both are turned into one CanonicalGraph. Normalization is a pure function
of its input; dangling edges are kept here and pruned by the store.
"""

import logging
from enum import Enum
from typing import Any, Iterable

from mathgraph.models import COLLECTION_KINDS, CanonicalGraph, Edge, Node, NodeKind, Relation

logger = logging.getLogger(__name__)

NODE_CATEGORIES = ("sections", "lemmas", "theorems")
EDGE_CATEGORIES = tuple(r.value for r in Relation)

# Collection used when a portable edge endpoint matches no category
FALLBACK_COLLECTION = "sections"


class FormatError(ValueError):
    """Raw input does not match a recognized graph encoding."""


class GraphFormat(str, Enum):
    """Detected shape of a raw graph payload."""

    PORTABLE = "portable"
    NATIVE = "native"
    UNKNOWN = "unknown"


def _first(record: dict[str, Any], *names: str) -> Any:
    """Return the first non-empty value among alternative field names."""
    for name in names:
        value = record.get(name)
        if value not in (None, ""):
            return value
    return None


def classify(raw: Any) -> GraphFormat:
    """
    Classify a raw payload before any field access.

    Args:
        raw: Decoded JSON payload of unknown shape

    Returns:
        NATIVE, PORTABLE or UNKNOWN
    """
    if not isinstance(raw, dict):
        return GraphFormat.UNKNOWN

    nodes = raw.get("nodes")
    edges = raw.get("edges")

    if isinstance(nodes, list) and isinstance(edges, list):
        if nodes and isinstance(nodes[0], dict):
            first = nodes[0]
            has_id = _first(first, "_id", "id") is not None
            has_key = _first(first, "_key", "key") is not None
            if has_id and has_key:
                return GraphFormat.NATIVE
        return GraphFormat.UNKNOWN

    if isinstance(nodes, dict) and isinstance(edges, dict):
        has_nodes = any(isinstance(nodes.get(c), list) for c in NODE_CATEGORIES)
        has_edges = any(isinstance(edges.get(c), list) for c in EDGE_CATEGORIES)
        if has_nodes and has_edges:
            return GraphFormat.PORTABLE

    return GraphFormat.UNKNOWN


def check_unique_ids(nodes: Iterable[Node]) -> None:
    """Raise FormatError if two nodes share an id."""
    seen: set[str] = set()
    for node in nodes:
        if node.id in seen:
            raise FormatError(f"Duplicate node id: {node.id}")
        seen.add(node.id)


def _parse_relation(value: Any, context: str) -> Relation:
    try:
        return Relation(value)
    except ValueError:
        raise FormatError(f"Unknown relation {value!r} in {context}") from None


def _parse_weight(value: Any, context: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise FormatError(f"Non-numeric weight {value!r} in {context}") from None


def _native_kind(record: dict[str, Any], node_id: str) -> NodeKind:
    """Node kind from the record, or from the collection prefix of its id."""
    value = _first(record, "type", "kind")
    if value is not None:
        try:
            return NodeKind(value)
        except ValueError:
            raise FormatError(f"Unknown node kind {value!r} for {node_id}") from None

    collection = node_id.split("/", 1)[0]
    if collection in COLLECTION_KINDS:
        return COLLECTION_KINDS[collection]
    raise FormatError(f"Node {node_id} has no kind and no known collection prefix")


def normalize_native(raw: dict[str, Any]) -> CanonicalGraph:
    """
    Normalize a native (flat record) payload.

    Nodes pass through with `label` resolved by priority
    label -> title -> normalized_prop -> key. Edges pass through unchanged;
    an edge without an id gets `edges/e<N>` from its position.
    """
    nodes: list[Node] = []
    for index, record in enumerate(raw.get("nodes") or []):
        if not isinstance(record, dict):
            raise FormatError(f"Node record #{index} is not an object")
        node_id = _first(record, "_id", "id")
        key = _first(record, "_key", "key")
        if node_id is None or key is None:
            raise FormatError(f"Node record #{index} is missing id or key")
        node_id = str(node_id)
        key = str(key)

        nodes.append(Node(
            id=node_id,
            key=key,
            kind=_native_kind(record, node_id),
            label=_first(record, "label", "title", "normalized_prop") or key,
            title=record.get("title"),
            document_id=_first(record, "doc_id", "document_id"),
            content=record.get("content"),
        ))

    check_unique_ids(nodes)

    edges: list[Edge] = []
    for index, record in enumerate(raw.get("edges") or []):
        if not isinstance(record, dict):
            raise FormatError(f"Edge record #{index} is not an object")
        source = _first(record, "_from", "from", "source")
        target = _first(record, "_to", "to", "target")
        if source is None or target is None:
            raise FormatError(f"Edge record #{index} is missing from/to")
        context = f"edge record #{index}"

        edges.append(Edge(
            id=str(_first(record, "_id", "id") or f"edges/e{index}"),
            source=str(source),
            target=str(target),
            relation=_parse_relation(_first(record, "type", "relation"), context),
            weight=_parse_weight(record.get("weight"), context),
        ))

    return CanonicalGraph(nodes=tuple(nodes), edges=tuple(edges))


def normalize_portable(raw: dict[str, Any]) -> CanonicalGraph:
    """
    Normalize a portable (columnar-by-category) payload.

    Node ids become "<category>/<local-id>". Edge ids come from one counter
    over the whole call ("edges/e0", "edges/e1", ...) in category order
    then list order. Endpoints resolve by searching sections, lemmas, then
    theorems; an unmatched local id falls back to the sections collection.
    """
    raw_nodes: dict[str, Any] = raw.get("nodes") or {}
    raw_edges: dict[str, Any] = raw.get("edges") or {}

    nodes: list[Node] = []
    # local id -> collection, first match wins
    collections: dict[str, str] = {}

    for category in NODE_CATEGORIES:
        records = raw_nodes.get(category)
        if not isinstance(records, list):
            continue
        kind = COLLECTION_KINDS[category]
        for index, record in enumerate(records):
            if not isinstance(record, dict) or record.get("id") in (None, ""):
                raise FormatError(f"{category} record #{index} is missing id")
            local_id = str(record["id"])
            title = record.get("title")

            nodes.append(Node(
                id=f"{category}/{local_id}",
                key=local_id,
                kind=kind,
                label=title or local_id,
                title=title,
                document_id=_first(record, "doc_id", "document_id"),
                content=record.get("content"),
            ))
            collections.setdefault(local_id, category)

    check_unique_ids(nodes)

    def qualify(local_id: Any) -> str:
        local_id = str(local_id)
        return f"{collections.get(local_id, FALLBACK_COLLECTION)}/{local_id}"

    edges: list[Edge] = []
    edge_index = 0
    for category, records in raw_edges.items():
        if category not in EDGE_CATEGORIES:
            logger.debug(f"Skipping unrecognized edge category: {category}")
            continue
        if not isinstance(records, list):
            continue
        for index, record in enumerate(records):
            context = f"{category} record #{index}"
            if not isinstance(record, dict):
                raise FormatError(f"{context} is not an object")
            if record.get("from") is None or record.get("to") is None:
                raise FormatError(f"{context} is missing from/to")

            edges.append(Edge(
                id=f"edges/e{edge_index}",
                source=qualify(record["from"]),
                target=qualify(record["to"]),
                relation=_parse_relation(record.get("type") or category, context),
                weight=_parse_weight(record.get("weight"), context),
            ))
            edge_index += 1

    return CanonicalGraph(nodes=tuple(nodes), edges=tuple(edges))


def normalize(raw: Any) -> tuple[GraphFormat, CanonicalGraph]:
    """
    Classify and normalize a raw payload.

    Returns:
        (detected format, canonical graph)

    Raises:
        FormatError: If the payload matches neither encoding
    """
    graph_format = classify(raw)

    if graph_format == GraphFormat.PORTABLE:
        graph = normalize_portable(raw)
    elif graph_format == GraphFormat.NATIVE:
        graph = normalize_native(raw)
    else:
        raise FormatError("Unknown graph data format")

    logger.debug(
        f"Normalized {graph_format.value} graph: "
        f"{graph.node_count} nodes, {graph.edge_count} edges"
    )
    return graph_format, graph
