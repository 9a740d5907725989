"""Unit tests for pipeline graph validation."""

from unittest.mock import patch

import pytest

from promptops.core.pipeline_graph import (
    INTERNAL_ERROR_MESSAGE,
    GraphValidationResult,
    has_cycle,
    validate_graph,
)


def _node(node_id, node_type="llm"):
    return {"id": node_id, "type": node_type}


def _edge(source, target):
    return {"source": source, "target": target}


class TestValidateGraph:
    """Tests for validate_graph."""

    def test_linear_graph_is_valid(self):
        """A simple input -> llm -> output chain has no errors."""
        graph = {
            "nodes": [_node("input", "input"), _node("llm"), _node("output", "output")],
            "edges": [_edge("input", "llm"), _edge("llm", "output")],
        }

        result = validate_graph(graph)

        assert result.valid is True
        assert result.errors == []

    def test_empty_graph_is_valid(self):
        """Empty node and edge lists are a valid graph."""
        assert validate_graph({"nodes": [], "edges": []}).valid is True

    def test_three_node_cycle(self):
        """A cycle through three nodes is reported once."""
        graph = {
            "nodes": [_node("a"), _node("b"), _node("c")],
            "edges": [_edge("a", "b"), _edge("b", "c"), _edge("c", "a")],
        }

        result = validate_graph(graph)

        assert result.valid is False
        assert result.errors == ["Pipeline graph contains cycles"]

    def test_three_node_cycle_without_types(self):
        """Typeless nodes are reported before the cycle."""
        graph = {
            "nodes": [{"id": "a"}, {"id": "b"}, {"id": "c"}],
            "edges": [_edge("a", "b"), _edge("b", "c"), _edge("c", "a")],
        }

        result = validate_graph(graph)

        assert result.errors == [
            "Node a must have a string type",
            "Node b must have a string type",
            "Node c must have a string type",
            "Pipeline graph contains cycles",
        ]

    def test_self_loop_is_a_cycle(self):
        """An edge from a node to itself is a cycle."""
        result = validate_graph({"nodes": [_node("a")], "edges": [_edge("a", "a")]})

        assert result.errors == ["Pipeline graph contains cycles"]

    def test_diamond_is_not_a_cycle(self):
        """Two paths converging on the same node are not a cycle."""
        graph = {
            "nodes": [_node("a"), _node("b"), _node("c"), _node("d")],
            "edges": [_edge("a", "b"), _edge("a", "c"), _edge("b", "d"), _edge("c", "d")],
        }

        assert validate_graph(graph).valid is True

    @pytest.mark.parametrize(
        "graph, expected",
        [
            (None, ["Graph must be a valid object"]),
            ([1, 2], ["Graph must be a valid object"]),
            ({"edges": []}, ["Graph must contain a nodes array"]),
            ({"nodes": []}, ["Graph must contain an edges array"]),
            (
                {"nodes": {}, "edges": "x"},
                ["Graph must contain a nodes array", "Graph must contain an edges array"],
            ),
        ],
    )
    def test_malformed_documents(self, graph, expected):
        """Documents without node and edge arrays are rejected before any node check."""
        result = validate_graph(graph)

        assert result.valid is False
        assert result.errors == expected

    def test_node_problems_are_all_collected(self):
        """Every bad node is reported, in document order."""
        graph = {
            "nodes": [{"type": "llm"}, {"id": "", "type": "llm"}, {"id": "a"}, _node("a")],
            "edges": [],
        }

        result = validate_graph(graph)

        assert result.errors == [
            "Each node must have a string id",
            "Each node must have a string id",
            "Node a must have a string type",
            "Duplicate node id: a",
        ]

    def test_edge_problems(self):
        """Edges with missing endpoints or unknown nodes are reported."""
        graph = {
            "nodes": [_node("a")],
            "edges": [
                {"target": "a"},
                {"source": "a"},
                _edge("ghost", "a"),
                _edge("a", "phantom"),
            ],
        }

        result = validate_graph(graph)

        assert result.errors == [
            "Each edge must have a string source",
            "Each edge must have a string target",
            "Edge references non-existent source node: ghost",
            "Edge references non-existent target node: phantom",
        ]

    def test_cycle_reported_after_node_and_edge_errors(self):
        """The cycle check runs last, even when other problems were found."""
        graph = {
            "nodes": [_node("a"), {"id": "b"}],
            "edges": [_edge("a", "b"), _edge("b", "a")],
        }

        result = validate_graph(graph)

        assert result.errors == ["Node b must have a string type", "Pipeline graph contains cycles"]

    def test_non_dict_nodes_are_reported(self):
        """Nodes that are not objects have no id."""
        result = validate_graph({"nodes": ["a", 3], "edges": []})

        assert result.errors == ["Each node must have a string id"] * 2

    def test_internal_error_becomes_generic_message(self):
        """An unexpected failure while validating never escapes."""
        with patch(
            "promptops.core.pipeline_graph.has_cycle", side_effect=RuntimeError("boom")
        ):
            result = validate_graph({"nodes": [_node("a")], "edges": []})

        assert result.valid is False
        assert result.errors == [INTERNAL_ERROR_MESSAGE]

    def test_validation_is_repeatable(self):
        """Validating the same document twice gives the same verdict and errors."""
        graph = {
            "nodes": [_node("a"), {"id": "b"}, _node("a"), {"type": "llm"}],
            "edges": [_edge("a", "b"), _edge("b", "a"), _edge("a", "ghost")],
        }

        first = validate_graph(graph)
        second = validate_graph(graph)

        assert first.valid is second.valid is False
        assert first.errors == second.errors
        assert len(first.errors) == 5

    def test_long_chain_does_not_hit_recursion_limit(self):
        """Deep graphs are traversed without recursion."""
        count = 5000
        graph = {
            "nodes": [_node(f"n{i}") for i in range(count)],
            "edges": [_edge(f"n{i}", f"n{i + 1}") for i in range(count - 1)],
        }

        assert validate_graph(graph).valid is True


class TestHasCycle:
    """Tests for the cycle detector on its own."""

    def test_disconnected_components(self):
        """A cycle in a component not reachable from the first node is still found."""
        adjacency = {"a": ["b"], "c": ["d"], "d": ["c"]}

        assert has_cycle(["a", "b", "c", "d"], adjacency) is True

    def test_acyclic(self):
        """A forest has no cycles."""
        assert has_cycle(["a", "b", "c"], {"a": ["b", "c"]}) is False


def test_result_to_dict():
    """The result serializes to the API response shape."""
    result = GraphValidationResult(valid=False, errors=["x"])

    assert result.to_dict() == {"valid": False, "errors": ["x"]}
