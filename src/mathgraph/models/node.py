"""Node model - sections, lemmas and theorems of the knowledge graph."""

from dataclasses import dataclass
from enum import Enum


class NodeKind(str, Enum):
    """Kind of a graph node."""

    SECTION = "section"
    LEMMA = "lemma"
    THEOREM = "theorem"


# Collection name -> node kind (portable encoding categories)
COLLECTION_KINDS: dict[str, NodeKind] = {
    "sections": NodeKind.SECTION,
    "lemmas": NodeKind.LEMMA,
    "theorems": NodeKind.THEOREM,
}

# Text fields a search may score
SEARCHABLE_FIELDS: tuple[str, ...] = ("label", "title", "key", "document_id", "content")


@dataclass(frozen=True)
class Node:
    """
    A node of the canonical graph.

    `id` is namespaced by collection ("sections/s1") and unique across
    the graph; `key` is the collection-local identifier ("s1").
    """

    id: str
    key: str
    kind: NodeKind
    label: str | None = None
    title: str | None = None
    document_id: str | None = None
    content: str | None = None

    @property
    def display_label(self) -> str:
        """Label shown to users, falling back to title then key."""
        return self.label or self.title or self.key

    def field_value(self, name: str) -> str | None:
        """
        Get a searchable text field by name.

        Raises:
            ValueError: If `name` is not one of SEARCHABLE_FIELDS
        """
        if name not in SEARCHABLE_FIELDS:
            raise ValueError(f"Not a searchable field: {name!r}")
        value = getattr(self, name)
        if value is None:
            return None
        return str(value)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "key": self.key,
            "kind": self.kind.value,
            "label": self.label,
            "title": self.title,
            "document_id": self.document_id,
            "content": self.content,
        }
