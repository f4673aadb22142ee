"""
Utility functions for the rprune optimizer, including terminal coloring,
a JSON artifact serializer and generic helpers for walking the pydantic AST.
"""

import json
from typing import Any, Iterator, Tuple

from pydantic import BaseModel

from .parser.classes import ASTNode


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class OptimizerArtifactEncoder(json.JSONEncoder):
    """Serializes AST nodes, including the computed `node_type` of each, for stage dumps."""

    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        return super().default(o)


def iter_node_fields(node: ASTNode) -> Iterator[Tuple[str, Any]]:
    """Yields (field_name, value) for every field of a node except its span."""
    for field_name in type(node).model_fields:
        if field_name == "span":
            continue
        yield field_name, getattr(node, field_name)


def count_nodes(value: Any) -> int:
    """Counts the AST nodes reachable from `value` (a node, a list of nodes, or anything else)."""
    if isinstance(value, list):
        return sum(count_nodes(item) for item in value)
    if not isinstance(value, ASTNode):
        return 0
    return 1 + sum(count_nodes(field_value) for _, field_value in iter_node_fields(value))
