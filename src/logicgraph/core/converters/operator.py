"""Generic operator calls with one row per operand."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.converters._operator_node import emit_operator_node
from logicgraph.core.converters._rows import Row
from logicgraph.core.formatting import expression_text
from logicgraph.core.graph import Archetype, ParentLink
from logicgraph.core.operators import ITERATOR_ARG_ICONS
from logicgraph.core.values import JsonLogicValue, normalize_operands, operator_call

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def convert_operator(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    call = operator_call(value)
    assert call is not None
    operator, operands = call
    args = normalize_operands(operands)

    arg_icons = ITERATOR_ARG_ICONS.get(operator, ())
    rows = [
        Row(arg, icon=arg_icons[index] if index < len(arg_icons) else None)
        for index, arg in enumerate(args)
    ]
    inline_display = None
    if len(args) == 1 and converter.is_simple(args[0]):
        inline_display = expression_text(value)

    return emit_operator_node(
        converter,
        node_id=converter.open_node(trace),
        value=value,
        operator=operator,
        operands_wrapped=isinstance(operands, list),
        rows=rows,
        kind="operator",
        archetype=Archetype.MULTI_OPERAND if len(args) > 1 else Archetype.SINGLE_OPERAND,
        link=link,
        trace=trace,
        inline_display=inline_display,
    )
