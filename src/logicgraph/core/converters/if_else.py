"""If/else chains rendered as one multi-row node."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.converters._operator_node import emit_operator_node
from logicgraph.core.converters._rows import Row
from logicgraph.core.graph import Archetype, BranchType, ParentLink
from logicgraph.core.values import JsonLogicValue, normalize_operands, operator_call

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def if_rows(args: list[JsonLogicValue]) -> list[Row]:
    """Rows for ``[c1, t1, c2, t2, ..., else?]``."""
    rows: list[Row] = []
    for index in range(0, len(args) - 1, 2):
        label = "If" if index == 0 else "Else If"
        rows.append(Row(args[index], "condition", label, BranchType.BRANCH, "diamond"))
        rows.append(Row(args[index + 1], "then", "Then", BranchType.YES, "check"))
    if len(args) % 2 == 1:
        rows.append(Row(args[-1], "else", "Else", BranchType.NO, "x"))
    return rows


def convert_if_else(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    call = operator_call(value)
    assert call is not None
    operator, operands = call
    args = normalize_operands(operands)

    if len(args) == 1:
        # No condition: the sole operand takes the if's place under the parent.
        sole = args[0]
        if trace is None:
            return converter.convert(sole, link)
        (binding,) = trace.assign([converter.slot(sole, inline=False)])
        node_id = converter.convert(sole, link, binding)
        trace.register(node_id)
        trace.collapse_unassigned(node_id)
        return node_id

    return emit_operator_node(
        converter,
        node_id=converter.open_node(trace),
        value=value,
        operator=operator,
        operands_wrapped=isinstance(operands, list),
        rows=if_rows(args),
        kind="branch_table",
        archetype=Archetype.IF_ELSE,
        link=link,
        trace=trace,
    )
