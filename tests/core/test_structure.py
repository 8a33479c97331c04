"""Structure-preserving conversion of JSON templates."""

from __future__ import annotations

import json

from logicgraph.core import Archetype, BranchType, StructureData
from tests.conftest import assert_tree, convert, root


def test_object_template_with_embedded_expression() -> None:
    graph = convert({"name": {"var": "user.name"}, "age": 3}, preserve_structure=True)
    assert_tree(graph)
    node = root(graph)

    assert node.archetype is Archetype.STRUCTURE
    payload = node.payload
    assert isinstance(payload, StructureData)
    assert payload.is_array is False
    assert json.loads(payload.formatted_json) == {"name": "{{EXPR}}", "age": 3}

    (element,) = payload.elements
    assert element.path == ("name",)
    assert element.key == "name"
    assert element.start_offset == 12
    assert payload.formatted_json[element.start_offset : element.end_offset] == '"{{EXPR}}"'

    child = graph.node(element.branch_id)
    assert child.archetype is Archetype.VARIABLE
    (edge,) = graph.edges
    assert (edge.source_handle, edge.branch_type) == ("branch-0", BranchType.BRANCH)


def test_array_template_offsets_follow_element_order() -> None:
    graph = convert([{"var": "a"}, 1, {"+": [1, 2]}], preserve_structure=True)
    assert_tree(graph)
    payload = root(graph).payload

    assert payload.is_array is True
    assert [element.path for element in payload.elements] == [("0",), ("2",)]
    assert [element.key for element in payload.elements] == [None, None]
    first, second = payload.elements
    assert first.end_offset <= second.start_offset
    for element in payload.elements:
        assert payload.formatted_json[element.start_offset : element.end_offset] == '"{{EXPR}}"'
    assert [edge.source_handle for edge in graph.edges] == ["branch-0", "branch-1"]


def test_nested_data_structures_become_structure_nodes() -> None:
    graph = convert({"outer": {"b": 1, "c": 2}, "flag": True}, preserve_structure=True)
    assert_tree(graph)
    parent = root(graph)
    (child,) = graph.children(parent.id)
    assert child.archetype is Archetype.STRUCTURE
    assert child.payload.elements == ()
    assert json.loads(child.payload.formatted_json) == {"b": 1, "c": 2}


def test_empty_containers_stay_inline() -> None:
    graph = convert({"items": [], "meta": {}}, preserve_structure=True)
    payload = root(graph).payload
    assert payload.elements == ()
    assert json.loads(payload.formatted_json) == {"items": [], "meta": {}}


def test_structures_inside_operators() -> None:
    graph = convert({"cat": [{"a": 1, "b": 2}]}, preserve_structure=True)
    assert_tree(graph)
    operator = root(graph)
    (child,) = graph.children(operator.id)
    assert child.archetype is Archetype.STRUCTURE


def test_non_ascii_text_is_kept_verbatim() -> None:
    payload = root(convert({"label": "café", "x": {"var": "x"}}, preserve_structure=True)).payload
    assert "café" in payload.formatted_json


def test_literal_placeholder_text_keeps_the_expression_offsets() -> None:
    graph = convert({"note": "{{EXPR}}", "b": {"var": "x"}}, preserve_structure=True)
    payload = root(graph).payload

    assert json.loads(payload.formatted_json) == {"note": "{{EXPR}}", "b": "{{EXPR}}"}
    (element,) = payload.elements
    assert element.key == "b"
    assert (element.start_offset, element.end_offset) == (31, 41)
    assert element.start_offset == payload.formatted_json.rfind('"{{EXPR}}"')
