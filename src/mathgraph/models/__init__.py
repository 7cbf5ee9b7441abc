"""Mathgraph data models."""

from mathgraph.models.edge import ALL_RELATIONS, Edge, Relation
from mathgraph.models.filters import DEFAULT_TRAVERSAL_DEPTH, FilterConfig
from mathgraph.models.graph import CanonicalGraph, Subgraph
from mathgraph.models.node import COLLECTION_KINDS, SEARCHABLE_FIELDS, Node, NodeKind

__all__ = [
    "Node",
    "NodeKind",
    "COLLECTION_KINDS",
    "SEARCHABLE_FIELDS",
    "Edge",
    "Relation",
    "ALL_RELATIONS",
    "CanonicalGraph",
    "Subgraph",
    "FilterConfig",
    "DEFAULT_TRAVERSAL_DEPTH",
]
