"""Variable reference nodes: ``var``, ``val`` and ``exists``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from logicgraph.core.binding import TraceBinding
from logicgraph.core.converters._rows import Row
from logicgraph.core.formatting import expression_text, scalar_text
from logicgraph.core.graph import (
    Archetype,
    BranchType,
    Cell,
    EditableCell,
    LogicNode,
    ParentLink,
    VariableData,
)
from logicgraph.core.values import JsonLogicValue, compact_json, operator_call

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter

_DEFAULT_ICON = "hash"

_MISSING = object()


@dataclass
class _VariableShape:
    path: str = ""
    fields: list[EditableCell] = field(default_factory=list)
    default: JsonLogicValue = _MISSING
    scope_jump: int | None = None
    path_components: tuple[str, ...] | None = None
    extra: list[JsonLogicValue] = field(default_factory=list)


def path_segment(value: JsonLogicValue) -> str:
    """Display text for one path segment (``None`` reads as empty)."""
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        return compact_json(value)
    return scalar_text(value)


def _path_field(index: int, value: JsonLogicValue) -> EditableCell:
    return EditableCell(index=index, field_id="path", value=value, label=path_segment(value))


def _var_shape(operands: JsonLogicValue) -> _VariableShape:
    items = operands if isinstance(operands, list) else [operands]
    shape = _VariableShape()
    if items:
        shape.path = path_segment(items[0])
        shape.fields.append(_path_field(0, items[0]))
    if len(items) >= 2:
        shape.default = items[1]
    shape.extra = items[2:]
    return shape


def _scope_jump(scope: list[JsonLogicValue]) -> int:
    if scope and isinstance(scope[0], (int, float)) and not isinstance(scope[0], bool):
        return int(abs(scope[0]))
    return 0


def _val_shape(operands: JsonLogicValue) -> _VariableShape:
    shape = _VariableShape(scope_jump=0)
    if not isinstance(operands, list):
        parts = [operands]
    elif operands and isinstance(operands[0], list):
        scope = operands[0]
        shape.scope_jump = _scope_jump(scope)
        shape.fields.append(
            EditableCell(
                index=0,
                field_id="scope",
                value=scope,
                label=str(shape.scope_jump),
                role="scope",
            )
        )
        parts = operands[1:]
    else:
        parts = operands

    first = len(shape.fields)
    shape.fields.extend(_path_field(first + offset, part) for offset, part in enumerate(parts))
    shape.path_components = tuple(path_segment(part) for part in parts)
    shape.path = ".".join(shape.path_components)
    return shape


def _exists_shape(operands: JsonLogicValue) -> _VariableShape:
    parts = operands if isinstance(operands, list) else [operands]
    shape = _VariableShape()
    shape.fields.extend(_path_field(index, part) for index, part in enumerate(parts))
    shape.path = ".".join(path_segment(part) for part in parts)
    return shape


def convert_variable(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    """Build a variable node.

    ``val`` takes ``[scope, *path]`` where ``scope`` is a list whose first
    number says how many iteration scopes to climb; a leading non-list item
    is read as a plain path. A ``var`` default that is itself an expression
    becomes a "Default" branch, otherwise it is shown inline.
    """
    call = operator_call(value)
    assert call is not None
    operator, operands = call
    node_id = converter.open_node(trace)

    match operator:
        case "var":
            shape = _var_shape(operands)
        case "val":
            shape = _val_shape(operands)
        case _:
            shape = _exists_shape(operands)

    has_default = shape.default is not _MISSING
    cells: list[Cell] = list(shape.fields)
    rows: list[Row] = []
    if has_default:
        rows.append(Row(shape.default, "default", "Default", BranchType.NO, _DEFAULT_ICON))
    rows.extend(Row(operand) for operand in shape.extra)
    cells.extend(converter.build_cells(node_id, rows, trace, first_index=len(cells)))
    if trace is not None:
        trace.collapse_unassigned(node_id)

    payload = VariableData(
        operator=operator,
        path=shape.path,
        cells=tuple(cells),
        operands_wrapped=isinstance(operands, list),
        default_value=shape.default if has_default else None,
        has_default=has_default,
        scope_jump=shape.scope_jump,
        path_components=shape.path_components,
    )
    converter.builder.add_node(
        LogicNode(
            id=node_id,
            kind="variable",
            archetype=Archetype.VARIABLE,
            payload=payload,
            expression=value,
            expression_text=expression_text(value),
            link=link,
        )
    )
    return node_id
