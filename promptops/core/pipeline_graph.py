"""Structural validation of pipeline graphs.

A pipeline graph is a document of the form::

    {
        "nodes": [{"id": "input", "type": "input"}, {"id": "llm", "type": "llm"}],
        "edges": [{"source": "input", "target": "llm"}],
    }

Validation collects every problem instead of stopping at the first one, so the
editor can show them all at once. Errors are reported in discovery order: node
problems, then edge problems, then the cycle check.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from promptops.core.logging import logger

INTERNAL_ERROR_MESSAGE = "Validation failed due to internal error"


@dataclass
class GraphValidationResult:
    """Outcome of validating a pipeline graph."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API response shape."""
        return {"valid": self.valid, "errors": list(self.errors)}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return None


def has_cycle(node_ids: list[str], adjacency: dict[str, list[str]]) -> bool:
    """Detect a directed cycle reachable from any of ``node_ids``.

    Depth-first search that keeps the nodes of the current path in ``on_stack``; an
    edge into a node on the current path is a back edge. The traversal uses an
    explicit stack of neighbor iterators so deep graphs do not hit the interpreter
    recursion limit. Runs in O(nodes + edges).
    """
    visited: set[str] = set()
    on_stack: set[str] = set()

    for root in node_ids:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(adjacency.get(root, ())))]

        while stack:
            node, neighbors = stack[-1]
            advanced = False
            for neighbor in neighbors:
                if neighbor in on_stack:
                    return True
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    stack.append((neighbor, iter(adjacency.get(neighbor, ()))))
                    advanced = True
                    break
            if not advanced:
                on_stack.discard(node)
                stack.pop()

    return False


def _validate(graph: Any) -> list[str]:
    errors: list[str] = []

    if not isinstance(graph, Mapping):
        return ["Graph must be a valid object"]

    nodes = graph.get("nodes")
    edges = graph.get("edges")
    if not isinstance(nodes, list):
        errors.append("Graph must contain a nodes array")
    if not isinstance(edges, list):
        errors.append("Graph must contain an edges array")
    if errors:
        return errors

    node_ids: list[str] = []
    seen: set[str] = set()
    for node in nodes:
        node_id = _field(node, "id")
        if not _is_non_empty_str(node_id):
            errors.append("Each node must have a string id")
            continue

        if node_id in seen:
            errors.append(f"Duplicate node id: {node_id}")
        else:
            seen.add(node_id)
            node_ids.append(node_id)

        if not _is_non_empty_str(_field(node, "type")):
            errors.append(f"Node {node_id} must have a string type")

    adjacency: dict[str, list[str]] = {}
    for edge in edges:
        source = _field(edge, "source")
        target = _field(edge, "target")
        if not _is_non_empty_str(source):
            errors.append("Each edge must have a string source")
            continue
        if not _is_non_empty_str(target):
            errors.append("Each edge must have a string target")
            continue

        if source not in seen:
            errors.append(f"Edge references non-existent source node: {source}")
        if target not in seen:
            errors.append(f"Edge references non-existent target node: {target}")

        adjacency.setdefault(source, []).append(target)

    if has_cycle(node_ids, adjacency):
        errors.append("Pipeline graph contains cycles")

    return errors


def validate_graph(graph: Any) -> GraphValidationResult:
    """Validate a pipeline graph document.

    Never raises: every problem is reported in the returned error list, and an
    unexpected failure while inspecting the document becomes a single generic error.

    Args:
        graph: The graph document, normally a dict with ``nodes`` and ``edges`` lists.

    Returns:
        GraphValidationResult: ``valid`` is True iff ``errors`` is empty.
    """
    try:
        errors = _validate(graph)
    except Exception as e:
        logger.error(f"Pipeline graph validation failed: {e}", exc_info=True)
        return GraphValidationResult(valid=False, errors=[INTERNAL_ERROR_MESSAGE])
    return GraphValidationResult(valid=not errors, errors=errors)
