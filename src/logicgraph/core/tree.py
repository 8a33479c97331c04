"""Subtree queries and edits on a converted graph.

Graphs are immutable: edits return a new :class:`LogicGraph` and leave the
input untouched. Children are found through edges, so every archetype is
handled the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace

from logicgraph.core.builder import IdGenerator, Uuid4Ids
from logicgraph.core.graph import (
    ROOT_LINK,
    BranchCell,
    Cell,
    LogicEdge,
    LogicGraph,
    LogicNode,
    OperatorData,
    StructureData,
    VariableData,
)

logger = logging.getLogger(__name__)


def _child_map(graph: LogicGraph) -> dict[str, list[str]]:
    children: dict[str, list[str]] = {}
    for edge in graph.edges:
        children.setdefault(edge.source, []).append(edge.target)
    return children


def _walk(children: Mapping[str, list[str]], start: str) -> list[str]:
    found: list[str] = []
    queue = list(children.get(start, ()))
    while queue:
        node_id = queue.pop(0)
        found.append(node_id)
        queue.extend(children.get(node_id, ()))
    return found


def descendant_ids(graph: LogicGraph, node_id: str) -> list[str]:
    """Ids below ``node_id`` in breadth-first order, excluding the node itself."""
    graph.node(node_id)
    return _walk(_child_map(graph), node_id)


def can_delete(graph: LogicGraph, node_id: str) -> bool:
    """The root stays; any other node can be removed with its subtree."""
    return graph.node(node_id).parent_id is not None


def _drop_branch(node: LogicNode, branch_id: str) -> LogicNode:
    payload = node.payload
    match payload:
        case OperatorData() | VariableData():
            cells = tuple(
                cell for cell in payload.cells if not (isinstance(cell, BranchCell) and cell.branch_id == branch_id)
            )
            return replace(node, payload=replace(payload, cells=cells))
        case StructureData():
            elements = tuple(element for element in payload.elements if element.branch_id != branch_id)
            return replace(node, payload=replace(payload, elements=elements))
    return node


def delete_subtree(graph: LogicGraph, node_id: str) -> LogicGraph:
    """Remove ``node_id`` and everything below it.

    The parent loses the branch cell (or structure element) that pointed at
    the removed node. Its stored ``expression`` is left as it was.
    """
    node = graph.node(node_id)
    if not can_delete(graph, node_id):
        raise ValueError(f"Cannot delete the root node {node_id!r}")
    removed = {node_id, *descendant_ids(graph, node_id)}
    nodes = tuple(
        _drop_branch(other, node_id) if other.id == node.parent_id else other
        for other in graph.nodes
        if other.id not in removed
    )
    edges = tuple(edge for edge in graph.edges if edge.source not in removed and edge.target not in removed)
    logger.debug("Deleted %d nodes under %s", len(removed), node_id)
    return LogicGraph(nodes=nodes, edges=edges, root_id=graph.root_id)


@dataclass(frozen=True)
class ClonedSubtree:
    """Copy of a subtree under fresh ids.

    ``root_id`` is the copy's top node. It keeps the original's parent link
    so it can be attached in the same slot; :meth:`detached` drops it.
    """

    nodes: tuple[LogicNode, ...]
    edges: tuple[LogicEdge, ...]
    root_id: str
    id_map: dict[str, str] = field(default_factory=dict)

    def detached(self) -> LogicGraph:
        """The copy as a standalone graph rooted at ``root_id``."""
        nodes = tuple(replace(node, link=ROOT_LINK) if node.id == self.root_id else node for node in self.nodes)
        return LogicGraph(nodes=nodes, edges=self.edges, root_id=self.root_id)


def _remap_cell(cell: Cell, id_map: Mapping[str, str]) -> Cell:
    if isinstance(cell, BranchCell) and cell.branch_id in id_map:
        return replace(cell, branch_id=id_map[cell.branch_id])
    return cell


def _remap_node(node: LogicNode, id_map: Mapping[str, str]) -> LogicNode:
    payload = node.payload
    match payload:
        case OperatorData() | VariableData():
            payload = replace(payload, cells=tuple(_remap_cell(cell, id_map) for cell in payload.cells))
        case StructureData():
            payload = replace(
                payload,
                elements=tuple(
                    replace(element, branch_id=id_map.get(element.branch_id, element.branch_id))
                    for element in payload.elements
                ),
            )
    link = node.link
    if link.parent_id in id_map:
        link = replace(link, parent_id=id_map[link.parent_id])
    return replace(node, id=id_map[node.id], payload=payload, link=link)


def clone_subtree(
    graph: LogicGraph,
    node_id: str,
    id_generator: IdGenerator | None = None,
) -> ClonedSubtree:
    """Copy ``node_id`` and its descendants, remapping every internal reference."""
    new_id = id_generator or Uuid4Ids()
    order = [node_id, *descendant_ids(graph, node_id)]
    id_map = {old: new_id() for old in order}

    nodes = tuple(_remap_node(graph.node(old), id_map) for old in order)
    edges: list[LogicEdge] = []
    for edge in graph.edges:
        if edge.target == node_id or edge.target not in id_map:
            continue
        source, target = id_map[edge.source], id_map[edge.target]
        edges.append(
            replace(
                edge,
                id=f"{source}-{edge.source_handle}-{target}",
                source=source,
                target=target,
            )
        )
    return ClonedSubtree(nodes=nodes, edges=tuple(edges), root_id=id_map[node_id], id_map=id_map)


def hidden_node_ids(
    graph: LogicGraph,
    collapsed_nodes: Iterable[str] = (),
    collapsed_cells: Mapping[str, Iterable[int]] | None = None,
) -> set[str]:
    """Nodes hidden by collapsing.

    A collapsed node stays visible and hides everything below it. A
    collapsed cell (``collapsed_cells[node_id]`` lists cell indices) hides
    the branch child of that cell and its subtree.
    """
    children = _child_map(graph)
    hidden: set[str] = set()
    for node_id in collapsed_nodes:
        hidden.update(_walk(children, node_id))

    for node_id, indices in (collapsed_cells or {}).items():
        wanted = set(indices)
        for cell in graph.node(node_id).cells:
            if isinstance(cell, BranchCell) and cell.index in wanted:
                hidden.add(cell.branch_id)
                hidden.update(_walk(children, cell.branch_id))
    return hidden
