"""``switch`` / ``match`` tables: discriminant, case pairs, default."""

from __future__ import annotations

from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.converters._operator_node import emit_operator_node
from logicgraph.core.converters._rows import Row
from logicgraph.core.graph import Archetype, BranchType, ParentLink
from logicgraph.core.values import JsonLogicValue, normalize_operands, operator_call

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def branch_table_rows(args: list[JsonLogicValue]) -> list[Row]:
    """Rows in table order: Match, Case/Then per pair, Default.

    A case entry that is not a ``[case, result]`` pair is kept whole as a
    single "Case" row; a cases argument that is not a non-empty list is kept
    as one "Cases" row.
    """
    rows: list[Row] = []
    if not args:
        return rows
    rows.append(Row(args[0], "discriminant", "Match", BranchType.BRANCH, "target"))

    if len(args) >= 2:
        cases = args[1]
        if isinstance(cases, list) and cases:
            for entry in cases:
                if isinstance(entry, list) and len(entry) == 2:
                    rows.append(Row(entry[0], "case", "Case", BranchType.BRANCH, "diamond"))
                    rows.append(Row(entry[1], "result", "Then", BranchType.YES, "check"))
                else:
                    rows.append(Row(entry, "entry", "Case", BranchType.BRANCH, "diamond"))
        else:
            rows.append(Row(cases, "cases", "Cases", BranchType.BRANCH, "list"))

    if len(args) >= 3:
        rows.append(Row(args[2], "default", "Default", BranchType.NO, "x"))
    rows.extend(Row(extra) for extra in args[3:])
    return rows


def convert_branch_table(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    call = operator_call(value)
    assert call is not None
    operator, operands = call
    return emit_operator_node(
        converter,
        node_id=converter.open_node(trace),
        value=value,
        operator=operator,
        operands_wrapped=isinstance(operands, list),
        rows=branch_table_rows(normalize_operands(operands)),
        kind="branch_table",
        archetype=Archetype.BRANCH_TABLE,
        link=link,
        trace=trace,
    )
