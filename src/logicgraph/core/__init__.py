"""Expression-to-graph conversion."""

from logicgraph.core.builder import GraphBuilder, SequentialIds, Uuid4Ids
from logicgraph.core.classifier import classify
from logicgraph.core.convert import ConversionOptions, convert_jsonlogic
from logicgraph.core.graph import (
    Archetype,
    ArgSummary,
    BranchCell,
    BranchType,
    EditableCell,
    InlineCell,
    LiteralData,
    LogicEdge,
    LogicGraph,
    LogicNode,
    OperatorData,
    ParentLink,
    StructureData,
    StructureElement,
    VariableData,
)
from logicgraph.core.serialize import graph_to_jsonlogic
from logicgraph.core.tree import (
    ClonedSubtree,
    can_delete,
    clone_subtree,
    delete_subtree,
    descendant_ids,
    hidden_node_ids,
)

__all__ = [
    "Archetype",
    "ArgSummary",
    "BranchCell",
    "BranchType",
    "ClonedSubtree",
    "ConversionOptions",
    "EditableCell",
    "GraphBuilder",
    "InlineCell",
    "LiteralData",
    "LogicEdge",
    "LogicGraph",
    "LogicNode",
    "OperatorData",
    "ParentLink",
    "SequentialIds",
    "StructureData",
    "StructureElement",
    "Uuid4Ids",
    "VariableData",
    "can_delete",
    "classify",
    "clone_subtree",
    "convert_jsonlogic",
    "delete_subtree",
    "descendant_ids",
    "graph_to_jsonlogic",
    "hidden_node_ids",
]
