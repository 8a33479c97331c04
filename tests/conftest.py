"""Pytest configuration and test helpers."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any

from logicgraph.core import ConversionOptions, LogicGraph, LogicNode, SequentialIds, convert_jsonlogic
from logicgraph.trace import ExecutionStep, ExpressionNode


def convert(value: Any, *, preserve_structure: bool = False) -> LogicGraph:
    """Convert with deterministic ``node-N`` ids."""
    return convert_jsonlogic(
        value,
        ConversionOptions(preserve_structure=preserve_structure, id_generator=SequentialIds()),
    )


def root(graph: LogicGraph) -> LogicNode:
    node = graph.root
    assert node is not None
    return node


def assert_tree(graph: LogicGraph) -> None:
    """Every non-root node has exactly one inbound edge that agrees with it."""
    ids = [node.id for node in graph.nodes]
    assert len(ids) == len(set(ids))

    inbound = Counter(edge.target for edge in graph.edges)
    for node in graph.nodes:
        if node.id == graph.root_id:
            assert inbound[node.id] == 0
            assert node.parent_id is None
            continue
        assert inbound[node.id] == 1, node.id
        (edge,) = graph.inbound_edges(node.id)
        assert edge.source == node.parent_id
        assert edge.arg_index == node.arg_index
        assert edge.branch_type == node.branch_type
        assert edge.target_handle == "left"


def expr_node(node_id: int, expression: Any, *children: ExpressionNode) -> ExpressionNode:
    """Trace node whose text is the compact JSON of ``expression``."""
    return ExpressionNode(
        id=node_id,
        expression=json.dumps(expression, separators=(",", ":")),
        children=children,
    )


def steps(*node_ids: int, errors: dict[int, str] | None = None) -> tuple[ExecutionStep, ...]:
    """One step per trace node id, results equal to the step index."""
    errors = errors or {}
    return tuple(
        ExecutionStep(id=index, node_id=node_id, result=index, error=errors.get(index))
        for index, node_id in enumerate(node_ids)
    )
