"""Literal nodes: primitives, arrays and malformed objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.formatting import expression_text
from logicgraph.core.graph import Archetype, LiteralData, LogicNode, ParentLink
from logicgraph.core.values import JsonLogicValue, value_type

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def convert_literal(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    node_id = converter.open_node(trace)

    # Objects reaching here have zero or several keys: not a valid call.
    invalid_object = isinstance(value, dict)
    payload = LiteralData(
        value=value,
        value_type="array" if invalid_object else value_type(value),
        invalid_object=invalid_object,
    )
    if trace is not None:
        trace.collapse_unassigned(node_id)

    converter.builder.add_node(
        LogicNode(
            id=node_id,
            kind="literal",
            archetype=Archetype.LITERAL,
            payload=payload,
            expression=value,
            expression_text=expression_text(value),
            link=link,
        )
    )
    return node_id
