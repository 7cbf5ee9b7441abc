"""Keyword command stub producing filter and focus updates."""

from mathgraph.query.commands import (
    CommandKind,
    QueryCommand,
    apply_command,
    interpret,
    resolve_focus,
)

__all__ = [
    "CommandKind",
    "QueryCommand",
    "interpret",
    "apply_command",
    "resolve_focus",
]
