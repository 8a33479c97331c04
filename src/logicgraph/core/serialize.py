"""Rebuild JSONLogic from a converted graph.

Each node keeps enough in its cells (value, role, branch target) to
reproduce the expression it was built from.
"""

from __future__ import annotations

import json
from typing import Any

from logicgraph.core.graph import (
    Archetype,
    BranchCell,
    Cell,
    EditableCell,
    InlineCell,
    LiteralData,
    LogicGraph,
    LogicNode,
    OperatorData,
    StructureData,
    VariableData,
)
from logicgraph.core.values import JsonLogicValue


def graph_to_jsonlogic(graph: LogicGraph, node_id: str | None = None) -> JsonLogicValue:
    """Expression rooted at ``node_id`` (the graph root by default)."""
    target = node_id if node_id is not None else graph.root_id
    if target is None:
        return None
    return node_to_jsonlogic(graph, graph.node(target))


def node_to_jsonlogic(graph: LogicGraph, node: LogicNode) -> JsonLogicValue:
    payload = node.payload
    match payload:
        case LiteralData():
            return payload.value
        case StructureData():
            return _structure_value(graph, payload)
        case VariableData():
            values = [_cell_value(graph, cell) for cell in payload.cells]
            return {payload.operator: _pack(values, payload.operands_wrapped)}
        case OperatorData():
            if node.archetype is Archetype.BRANCH_TABLE:
                values = _branch_table_operands(graph, payload.cells)
            else:
                values = [_cell_value(graph, cell) for cell in payload.cells]
            return {payload.operator: _pack(values, payload.operands_wrapped)}
    raise TypeError(f"Unsupported node payload: {type(payload).__name__}")


def _pack(values: list[JsonLogicValue], wrapped: bool) -> JsonLogicValue:
    if wrapped:
        return values
    return values[0] if values else None


def _cell_value(graph: LogicGraph, cell: Cell) -> JsonLogicValue:
    match cell:
        case InlineCell() | EditableCell():
            return cell.value
        case BranchCell():
            return node_to_jsonlogic(graph, graph.node(cell.branch_id))
    raise TypeError(f"Unsupported cell: {type(cell).__name__}")


def _branch_table_operands(graph: LogicGraph, cells: tuple[Cell, ...]) -> list[JsonLogicValue]:
    head: list[JsonLogicValue] = []
    cases: list[JsonLogicValue] = []
    raw_cases: list[JsonLogicValue] = []
    tail: list[JsonLogicValue] = []
    extras: list[JsonLogicValue] = []
    pending_case: Any = None

    for cell in cells:
        value = _cell_value(graph, cell)
        match cell.role:
            case "discriminant":
                head.append(value)
            case "case":
                pending_case = value
            case "result":
                cases.append([pending_case, value])
            case "entry":
                cases.append(value)
            case "cases":
                raw_cases.append(value)
            case "default":
                tail.append(value)
            case _:
                extras.append(value)

    if raw_cases:
        head.extend(raw_cases)
    elif cases:
        head.append(cases)
    return head + tail + extras


def _structure_value(graph: LogicGraph, payload: StructureData) -> JsonLogicValue:
    value = json.loads(payload.formatted_json)
    for element in payload.elements:
        (step,) = element.path
        child = node_to_jsonlogic(graph, graph.node(element.branch_id))
        if isinstance(value, list):
            value[int(step)] = child
        else:
            value[step] = child
    return value
