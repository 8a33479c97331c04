"""Subtree queries, deletion, cloning and collapse visibility."""

from __future__ import annotations

import pytest

from logicgraph.core import (
    BranchCell,
    LogicGraph,
    LogicNode,
    SequentialIds,
    StructureData,
    can_delete,
    clone_subtree,
    delete_subtree,
    descendant_ids,
    graph_to_jsonlogic,
    hidden_node_ids,
)
from tests.conftest import assert_tree, convert, root

OR_BRANCH = {"or": [{"==": [{"var": "b"}, 2]}, {"!": {"var": "c"}}]}
VALUE = {"and": [{">": [{"var": "a"}, 1]}, OR_BRANCH]}


def _by_operator(graph: LogicGraph, operator: str) -> LogicNode:
    (node,) = [node for node in graph.nodes if getattr(node.payload, "operator", None) == operator]
    return node


def _ids(graph: LogicGraph, *operators: str) -> set[str]:
    return {_by_operator(graph, operator).id for operator in operators}


def test_descendants_cover_the_whole_subtree() -> None:
    graph = convert(VALUE)
    top = root(graph)
    assert set(descendant_ids(graph, top.id)) == {node.id for node in graph.nodes} - {top.id}
    assert set(descendant_ids(graph, _by_operator(graph, "or").id)) == _ids(graph, "==", "!")
    assert descendant_ids(graph, _by_operator(graph, ">").id) == []


def test_descendants_are_breadth_first() -> None:
    graph = convert(VALUE)
    order = descendant_ids(graph, root(graph).id)
    assert set(order[:2]) == _ids(graph, ">", "or")


def test_unknown_node_raises() -> None:
    graph = convert(VALUE)
    with pytest.raises(KeyError):
        descendant_ids(graph, "missing")


def test_only_the_root_cannot_be_deleted() -> None:
    graph = convert(VALUE)
    assert can_delete(graph, root(graph).id) is False
    assert all(can_delete(graph, node.id) for node in graph.nodes if node.id != graph.root_id)
    with pytest.raises(ValueError, match="root"):
        delete_subtree(graph, root(graph).id)


def test_delete_removes_the_subtree_and_the_parent_branch() -> None:
    graph = convert(VALUE)
    target = _by_operator(graph, "or").id
    pruned = delete_subtree(graph, target)

    assert_tree(pruned)
    assert {node.id for node in pruned.nodes} == {graph.root_id} | _ids(graph, ">")
    branch_ids = [cell.branch_id for cell in root(pruned).cells if isinstance(cell, BranchCell)]
    assert branch_ids == [_by_operator(graph, ">").id]
    assert graph_to_jsonlogic(pruned) == {"and": [{">": [{"var": "a"}, 1]}]}
    assert len(graph.nodes) == 5


def test_delete_inside_a_structure_drops_the_element() -> None:
    graph = convert({"a": {"+": [1, 2]}, "b": 1}, preserve_structure=True)
    child = _by_operator(graph, "+")
    pruned = delete_subtree(graph, child.id)

    payload = root(pruned).payload
    assert isinstance(payload, StructureData)
    assert payload.elements == ()
    assert pruned.edges == ()


def test_clone_remaps_every_reference() -> None:
    graph = convert(VALUE)
    source = _by_operator(graph, "or")
    clone = clone_subtree(graph, source.id, SequentialIds(prefix="copy-"))

    assert set(clone.id_map) == {source.id} | _ids(graph, "==", "!")
    assert all(new.startswith("copy-") for new in clone.id_map.values())
    assert clone.root_id == clone.id_map[source.id]
    assert len(clone.nodes) == 3
    assert len(clone.edges) == 2

    top = clone.nodes[0]
    assert top.id == clone.root_id
    assert top.parent_id == graph.root_id
    branch_ids = {cell.branch_id for cell in top.cells if isinstance(cell, BranchCell)}
    assert branch_ids == {clone.id_map[old] for old in _ids(graph, "==", "!")}
    for edge in clone.edges:
        assert edge.source == clone.root_id
        assert edge.id == f"{edge.source}-{edge.source_handle}-{edge.target}"


def test_detached_clone_rebuilds_the_subtree_expression() -> None:
    graph = convert(VALUE)
    detached = clone_subtree(graph, _by_operator(graph, "or").id, SequentialIds(prefix="copy-")).detached()

    assert_tree(detached)
    assert root(detached).parent_id is None
    assert graph_to_jsonlogic(detached) == OR_BRANCH


def test_collapsed_node_hides_its_descendants_only() -> None:
    graph = convert(VALUE)
    collapsed = _by_operator(graph, "or").id
    assert hidden_node_ids(graph, [collapsed]) == _ids(graph, "==", "!")
    assert hidden_node_ids(graph) == set()


def test_collapsed_cell_hides_its_branch() -> None:
    graph = convert(VALUE)
    top = root(graph)
    target = _by_operator(graph, "or").id
    (index,) = [cell.index for cell in top.cells if isinstance(cell, BranchCell) and cell.branch_id == target]

    hidden = hidden_node_ids(graph, collapsed_cells={top.id: [index]})
    assert hidden == {target} | _ids(graph, "==", "!")
