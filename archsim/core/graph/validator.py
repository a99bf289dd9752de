from __future__ import annotations

from typing import Dict, List, Mapping

from ..errors import GraphConfigurationError
from .model import Graph

Payload = Mapping[str, object]


def validate_graph(graph: Payload) -> Dict[str, object]:
    """Report every problem with a diagram payload without raising."""
    if not isinstance(graph, Mapping):
        return {"valid": False, "errors": ["Graph must be an object."], "entryNodes": [], "terminalNodes": []}

    nodes = graph.get("nodes", []) or []
    if not nodes:
        return {
            "valid": False,
            "errors": ["Graph must contain at least one node."],
            "entryNodes": [],
            "terminalNodes": [],
        }

    try:
        parsed = Graph.from_dict(graph)
    except GraphConfigurationError as exc:
        return {"valid": False, "errors": exc.errors, "entryNodes": [], "terminalNodes": []}

    errors: List[str] = []
    cycle = parsed.find_cycle()
    if cycle:
        errors.append("Graph must be a DAG.")
        errors.append(f"Cycle detected: {' -> '.join(cycle)}.")

    return {
        "valid": len(errors) == 0,
        "errors": sorted(set(errors)),
        "entryNodes": [node.id for node in parsed.entry_nodes()],
        "terminalNodes": [node.id for node in parsed.terminal_nodes()],
    }
