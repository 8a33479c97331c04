"""Shared construction of operator-style nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.converters._rows import Row
from logicgraph.core.formatting import expression_text
from logicgraph.core.graph import Archetype, LogicNode, NodeKind, OperatorData, ParentLink
from logicgraph.core.operators import OR_ICON, category_icon, operator_meta
from logicgraph.core.values import JsonLogicValue

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def emit_operator_node(
    converter: GraphConverter,
    *,
    node_id: str,
    value: JsonLogicValue,
    operator: str,
    operands_wrapped: bool,
    rows: list[Row],
    kind: NodeKind,
    archetype: Archetype,
    link: ParentLink,
    trace: TraceBinding | None,
    inline_display: str | None = None,
) -> str:
    cells = converter.build_cells(node_id, rows, trace)
    if trace is not None:
        trace.collapse_unassigned(node_id)

    meta = operator_meta(operator)
    icon = OR_ICON if operator == "or" else category_icon(meta.category)
    converter.builder.add_node(
        LogicNode(
            id=node_id,
            kind=kind,
            archetype=archetype,
            payload=OperatorData(
                operator=operator,
                label=meta.label,
                category=meta.category,
                icon=icon,
                cells=cells,
                operands_wrapped=operands_wrapped,
                inline_display=inline_display,
            ),
            expression=value,
            expression_text=expression_text(value),
            link=link,
        )
    )
    return node_id
