"""Keyword-pattern mapping of free-text commands onto filter updates.

This is a stand-in for natural-language query understanding: it only
recognizes a few phrasings and produces one of three effects, a text
search update, a relation filter update, or a focus-node update.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from mathgraph.models import CanonicalGraph, FilterConfig, Node, Relation

logger = logging.getLogger(__name__)


class CommandKind(str, Enum):
    """Effect of an interpreted command."""

    SEARCH = "search"
    FOCUS = "focus"
    FILTER = "filter"


@dataclass(frozen=True)
class QueryCommand:
    """An interpreted command."""

    kind: CommandKind
    text: str = ""  # Search text or focus target
    relations: frozenset[Relation] | None = None  # Relation filter


# (required keywords, relations to enable)
FILTER_PATTERNS: list[tuple[tuple[str, ...], frozenset[Relation]]] = [
    ((r"\bfind\b", r"contradiction"), frozenset({Relation.CONTRADICTS})),
    ((r"\bshow\b", r"dependencies"), frozenset({Relation.DEPENDS_ON})),
]

SEARCH_PATTERN = re.compile(r"(?:search\s+for|find)\s+(.+)", re.IGNORECASE | re.DOTALL)
FOCUS_PATTERN = re.compile(r"(?:center\s+on|focus\s+on)\s+(.+)", re.IGNORECASE | re.DOTALL)


def interpret(text: str) -> QueryCommand:
    """
    Map a command string onto a QueryCommand.

    Unrecognized text becomes a search for the whole string.
    """
    stripped = text.strip()
    lowered = stripped.lower()

    for keywords, relations in FILTER_PATTERNS:
        if all(re.search(k, lowered) for k in keywords):
            return QueryCommand(kind=CommandKind.FILTER, relations=relations)

    match = SEARCH_PATTERN.search(stripped)
    if match:
        return QueryCommand(kind=CommandKind.SEARCH, text=match.group(1).strip())

    match = FOCUS_PATTERN.search(stripped)
    if match:
        return QueryCommand(kind=CommandKind.FOCUS, text=match.group(1).strip())

    return QueryCommand(kind=CommandKind.SEARCH, text=stripped)


def resolve_focus(graph: CanonicalGraph, target: str) -> Node | None:
    """Find a node by id, then key, then label (case-insensitive)."""
    target = target.strip()
    lowered = target.lower()

    for node in graph.nodes:
        if node.id == target:
            return node
    for node in graph.nodes:
        if node.key.lower() == lowered:
            return node
    for node in graph.nodes:
        if node.display_label.lower() == lowered:
            return node
    return None


def apply_command(
    filters: FilterConfig,
    command: QueryCommand,
    graph: CanonicalGraph | None = None,
) -> tuple[FilterConfig, str | None]:
    """
    Apply a command to the current filters.

    Args:
        filters: Current filter configuration (not modified)
        command: Interpreted command
        graph: Graph used to resolve focus targets to node ids

    Returns:
        (new filters, focus node id or None)
    """
    if command.kind == CommandKind.FILTER and command.relations:
        return filters.with_updates(enabled_relations=command.relations), None

    if command.kind == CommandKind.FOCUS:
        focus_id = command.text
        if graph is not None:
            node = resolve_focus(graph, command.text)
            if node is None:
                logger.info(f"Focus target not found: {command.text}")
                return filters, None
            focus_id = node.id
        return filters, focus_id

    return filters.with_updates(text_query=command.text), None
