"""Typed node/edge models produced by graph conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypeAlias

from logicgraph.core._constants import ARG_HANDLE_PREFIX, BRANCH_HANDLE_PREFIX
from logicgraph.core.values import JsonLogicValue, ValueType


class Archetype(Enum):
    """Closed set of visual archetypes a JSONLogic value classifies into."""

    LITERAL = "literal"
    VARIABLE = "variable"
    IF_ELSE = "if_else"
    BRANCH_TABLE = "branch_table"
    MULTI_OPERAND = "multi_operand"
    SINGLE_OPERAND = "single_operand"
    STRUCTURE = "structure"


class BranchType(Enum):
    """How a child hangs off its parent.

    NONE: plain child hanging off the parent's ``arg-N`` handle.
    BRANCH: reached through a branch cell with no polarity.
    YES / NO: then-side and else/default-side branches.
    """

    NONE = "none"
    YES = "yes"
    NO = "no"
    BRANCH = "branch"


NodeKind = Literal["literal", "variable", "operator", "branch_table", "structure"]

CellRole = Literal[
    "operand",
    "condition",
    "then",
    "else",
    "discriminant",
    "case",
    "result",
    "default",
    "cases",
    "entry",
    "path",
    "scope",
]


@dataclass(frozen=True)
class ArgSummary:
    """Collapsed-view summary of an operand."""

    icon: str
    label: str
    value_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"icon": self.icon, "label": self.label, "valueType": self.value_type}


@dataclass(frozen=True)
class InlineCell:
    """Operand rendered directly inside its parent node."""

    index: int
    label: str
    icon: str
    value: JsonLogicValue
    role: CellRole = "operand"
    row_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": "inline",
            "index": self.index,
            "label": self.label,
            "icon": self.icon,
            "role": self.role,
        }
        if self.row_label is not None:
            payload["rowLabel"] = self.row_label
        return payload


@dataclass(frozen=True)
class BranchCell:
    """Operand converted into its own child node."""

    index: int
    branch_id: str
    icon: str
    summary: ArgSummary
    role: CellRole = "operand"
    row_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": "branch",
            "index": self.index,
            "branchId": self.branch_id,
            "icon": self.icon,
            "summary": self.summary.to_dict(),
            "role": self.role,
        }
        if self.row_label is not None:
            payload["rowLabel"] = self.row_label
        return payload


@dataclass(frozen=True)
class EditableCell:
    """In-place primitive field, e.g. a variable's path."""

    index: int
    field_id: str
    value: JsonLogicValue
    label: str
    role: CellRole = "path"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "editable",
            "index": self.index,
            "fieldId": self.field_id,
            "label": self.label,
            "role": self.role,
        }


Cell: TypeAlias = InlineCell | BranchCell | EditableCell


@dataclass(frozen=True)
class ParentLink:
    """Where a node attaches: parent id, argument slot and branch polarity.

    ``handle_index`` is the parent's ``branch-k`` counter for links reached
    through a branch cell; plain links hang off ``arg-<arg_index>`` instead.
    """

    parent_id: str | None = None
    arg_index: int | None = None
    branch_type: BranchType = BranchType.NONE
    handle_index: int | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def source_handle(self) -> str:
        if self.branch_type is BranchType.NONE:
            return f"{ARG_HANDLE_PREFIX}{self.arg_index or 0}"
        return f"{BRANCH_HANDLE_PREFIX}{self.handle_index or 0}"


ROOT_LINK = ParentLink()


@dataclass(frozen=True)
class LiteralData:
    value: JsonLogicValue
    value_type: ValueType
    invalid_object: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"value": self.value, "valueType": self.value_type}
        if self.invalid_object:
            payload["invalidObject"] = True
        return payload


@dataclass(frozen=True)
class VariableData:
    operator: str
    path: str
    cells: tuple[Cell, ...]
    operands_wrapped: bool
    default_value: JsonLogicValue | None = None
    has_default: bool = False
    scope_jump: int | None = None
    path_components: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "operator": self.operator,
            "path": self.path,
            "cells": [cell.to_dict() for cell in self.cells],
        }
        if self.has_default:
            payload["defaultValue"] = self.default_value
        if self.scope_jump is not None:
            payload["scopeJump"] = self.scope_jump
        if self.path_components is not None:
            payload["pathComponents"] = list(self.path_components)
        return payload


@dataclass(frozen=True)
class OperatorData:
    """Payload shared by operator and branch-table nodes."""

    operator: str
    label: str
    category: str
    icon: str
    cells: tuple[Cell, ...]
    operands_wrapped: bool
    inline_display: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "operator": self.operator,
            "label": self.label,
            "category": self.category,
            "icon": self.icon,
            "cells": [cell.to_dict() for cell in self.cells],
        }
        if self.inline_display is not None:
            payload["inlineDisplay"] = self.inline_display
        return payload


@dataclass(frozen=True)
class StructureElement:
    """Location of one embedded expression inside a structure node's text."""

    path: tuple[str, ...]
    branch_id: str
    key: str | None = None
    start_offset: int = 0
    end_offset: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "expression",
            "path": list(self.path),
            "key": self.key,
            "branchId": self.branch_id,
            "startOffset": self.start_offset,
            "endOffset": self.end_offset,
        }


@dataclass(frozen=True)
class StructureData:
    is_array: bool
    formatted_json: str
    elements: tuple[StructureElement, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isArray": self.is_array,
            "formattedJson": self.formatted_json,
            "elements": [element.to_dict() for element in self.elements],
        }


NodePayload: TypeAlias = LiteralData | VariableData | OperatorData | StructureData


@dataclass(frozen=True)
class LogicNode:
    """One visual node. Ids are assigned once and never change."""

    id: str
    kind: NodeKind
    archetype: Archetype
    payload: NodePayload
    expression: JsonLogicValue
    expression_text: str
    link: ParentLink = ROOT_LINK
    position: tuple[float, float] = (0.0, 0.0)

    @property
    def parent_id(self) -> str | None:
        return self.link.parent_id

    @property
    def arg_index(self) -> int | None:
        return self.link.arg_index

    @property
    def branch_type(self) -> BranchType:
        return self.link.branch_type

    @property
    def cells(self) -> tuple[Cell, ...]:
        if isinstance(self.payload, (OperatorData, VariableData)):
            return self.payload.cells
        return ()

    def to_dict(self) -> dict[str, Any]:
        data = self.payload.to_dict()
        data.update(
            {
                "archetype": self.archetype.value,
                "expression": self.expression,
                "expressionText": self.expression_text,
                "parentId": self.parent_id,
                "argIndex": self.arg_index,
                "branchType": self.branch_type.value,
            }
        )
        x, y = self.position
        return {"id": self.id, "type": self.kind, "position": {"x": x, "y": y}, "data": data}


@dataclass(frozen=True)
class LogicEdge:
    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str
    arg_index: int | None = None
    branch_type: BranchType = BranchType.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
        }


@dataclass(frozen=True)
class LogicGraph:
    """Result of one conversion: nodes in creation order, edges, root id."""

    nodes: tuple[LogicNode, ...] = ()
    edges: tuple[LogicEdge, ...] = ()
    root_id: str | None = None
    _by_id: dict[str, LogicNode] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._by_id.update((node.id, node) for node in self.nodes)

    def node(self, node_id: str) -> LogicNode:
        return self._by_id[node_id]

    @property
    def root(self) -> LogicNode | None:
        if self.root_id is None:
            return None
        return self._by_id.get(self.root_id)

    def parent_map(self) -> dict[str, str]:
        """Child id -> parent id for every non-root node."""
        return {node.id: node.parent_id for node in self.nodes if node.parent_id is not None}

    def inbound_edges(self, node_id: str) -> list[LogicEdge]:
        return [edge for edge in self.edges if edge.target == node_id]

    def children(self, node_id: str) -> list[LogicNode]:
        return [self._by_id[edge.target] for edge in self.edges if edge.source == node_id]

    def to_dict(self) -> dict[str, Any]:
        """Renderer payload: ``{"nodes": [...], "edges": [...], "rootId": ...}``."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "rootId": self.root_id,
        }
