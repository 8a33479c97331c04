"""Build a graph from an execution trace and map trace ids onto its nodes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from logicgraph.core.binding import Slot, TraceBinding
from logicgraph.core.builder import GraphBuilder, IdGenerator
from logicgraph.core.converters import GraphConverter
from logicgraph.core.graph import LogicGraph
from logicgraph.core.values import JsonLogicValue
from logicgraph.trace.matching import assign_children
from logicgraph.trace.models import (
    ExpressionNode,
    TracedResult,
    TraceFormatError,
    coerce_traced_result,
    trace_node_id,
)

logger = logging.getLogger(__name__)

TraceNodeMap = dict[str, str]


class TraceCursor:
    """Binds one :class:`ExpressionNode` to the conversion walking it.

    All cursors of a conversion share the same ``trace_map``.
    """

    def __init__(self, node: ExpressionNode, trace_map: TraceNodeMap) -> None:
        self._node = node
        self._map = trace_map
        self._assigned: set[int] = set()

    @property
    def node_id(self) -> str:
        return self._node.node_id

    def register(self, visual_id: str) -> None:
        self._map[self._node.node_id] = visual_id

    def assign(self, slots: Sequence[Slot]) -> list[TraceBinding | None]:
        children = self._node.children
        indices = assign_children(slots, children, taken=self._assigned)
        bindings: list[TraceBinding | None] = []
        for index in indices:
            if index is None:
                bindings.append(None)
                continue
            self._assigned.add(index)
            bindings.append(TraceCursor(children[index], self._map))
        return bindings

    def collapse_into(self, visual_id: str) -> None:
        for node in self._node.walk():
            self._map[node.node_id] = visual_id

    def collapse_unassigned(self, visual_id: str) -> None:
        for index, child in enumerate(self._node.children):
            if index in self._assigned:
                continue
            for node in child.walk():
                self._map[node.node_id] = visual_id


@dataclass(frozen=True)
class TraceConversion:
    """Graph built from a trace plus the ``trace-<id>`` -> node id map."""

    graph: LogicGraph
    trace_node_map: Mapping[str, str] = field(default_factory=dict)

    def resolve(self, trace_id: int) -> str:
        """Visual node for a trace node id, or its raw ``trace-<id>`` string."""
        key = trace_node_id(trace_id)
        return self.trace_node_map.get(key, key)


def trace_to_graph(
    traced: TracedResult | Mapping[str, Any],
    original_value: JsonLogicValue = None,
    preserve_structure: bool = False,
    *,
    id_generator: IdGenerator | None = None,
) -> TraceConversion:
    """Convert a traced evaluation into a graph whose nodes carry trace ids.

    ``original_value`` should be the expression as the user wrote it: the
    trace only holds re-serialized copies, which lose key order. Without it
    the root expression is parsed from the trace.
    """
    traced = coerce_traced_result(traced)
    tree = traced.expression_tree
    if tree is None:
        return TraceConversion(graph=LogicGraph())

    value = original_value
    if value is None:
        try:
            value = tree.parsed()
        except json.JSONDecodeError as exc:
            raise TraceFormatError(f"Root expression of trace node {tree.id} is not valid JSON") from exc

    builder = GraphBuilder(id_generator)
    converter = GraphConverter(builder, preserve_structure=preserve_structure)
    trace_map: TraceNodeMap = {}
    root_id = converter.convert(value, trace=TraceCursor(tree, trace_map))
    graph = builder.build(root_id)
    logger.debug("Mapped %d trace ids onto %d nodes", len(trace_map), len(graph.nodes))
    return TraceConversion(graph=graph, trace_node_map=trace_map)
