"""Filter configuration - immutable input to traversal and search calls."""

from dataclasses import dataclass, field, replace

from mathgraph.models.edge import ALL_RELATIONS, Relation

DEFAULT_TRAVERSAL_DEPTH = 2


@dataclass(frozen=True)
class FilterConfig:
    """
    User-facing filter state.

    Never mutated by the core; use `with_updates` to derive a new value.
    """

    text_query: str = ""
    exact_match: bool = False
    include_neighbors: bool = False
    enabled_relations: frozenset[Relation] = field(default_factory=lambda: ALL_RELATIONS)
    traversal_depth: int = DEFAULT_TRAVERSAL_DEPTH

    def __post_init__(self) -> None:
        relations = frozenset(Relation(r) for r in self.enabled_relations)
        if not relations:
            raise ValueError("enabled_relations must not be empty")
        if self.traversal_depth < 1:
            raise ValueError(f"traversal_depth must be positive, got {self.traversal_depth}")
        # frozen: normalize str values coming from callers into Relation members
        object.__setattr__(self, "enabled_relations", relations)

    @property
    def active_filter_count(self) -> int:
        """Number of filters that differ from the defaults."""
        return (
            (1 if self.text_query else 0)
            + (1 if self.include_neighbors else 0)
            + (1 if len(self.enabled_relations) < len(ALL_RELATIONS) else 0)
            + (1 if self.traversal_depth != DEFAULT_TRAVERSAL_DEPTH else 0)
        )

    def with_updates(self, **changes) -> "FilterConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
