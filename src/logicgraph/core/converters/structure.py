"""Structure nodes: JSON templates with embedded expressions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from logicgraph.core._constants import EXPR_PLACEHOLDER_QUOTED, STRUCTURE_INDENT
from logicgraph.core.binding import TraceBinding
from logicgraph.core.formatting import expression_text
from logicgraph.core.graph import (
    Archetype,
    BranchType,
    LogicNode,
    ParentLink,
    StructureData,
    StructureElement,
)
from logicgraph.core.values import JsonLogicValue, is_data_structure, is_expression

if TYPE_CHECKING:
    from logicgraph.core.converters.base import GraphConverter


def is_embedded_branch(item: JsonLogicValue) -> bool:
    """Items rendered as their own node rather than inline JSON."""
    return is_expression(item) or is_data_structure(item)


def _entries(value: dict | list) -> list[tuple[str, str | None, JsonLogicValue]]:
    if isinstance(value, list):
        return [(str(index), None, item) for index, item in enumerate(value)]
    return [(key, key, item) for key, item in value.items()]


def _unique_markers(value: JsonLogicValue, count: int) -> list[str]:
    source = json.dumps(value, ensure_ascii=False)
    salt = 0
    while f"EXPR:{salt}:" in source:
        salt += 1
    return [f"{{{{EXPR:{salt}:{index}}}}}" for index in range(count)]


def render_template(value: dict | list, markers: dict[str, str]) -> tuple[str, list[tuple[int, int]]]:
    """Pretty-print ``value`` with placeholders at the paths in ``markers``.

    Each embedded path is first rendered as a marker that does not occur
    anywhere in ``value``, then swapped for the placeholder in document
    order.
    """
    rendered: dict | list
    if isinstance(value, list):
        rendered = [markers.get(str(index), item) for index, item in enumerate(value)]
    else:
        rendered = {key: markers.get(key, item) for key, item in value.items()}
    text = json.dumps(rendered, indent=STRUCTURE_INDENT, ensure_ascii=False)

    offsets: list[tuple[int, int]] = []
    for marker in markers.values():
        quoted = json.dumps(marker)
        start = text.find(quoted)
        text = text[:start] + EXPR_PLACEHOLDER_QUOTED + text[start + len(quoted) :]
        offsets.append((start, start + len(EXPR_PLACEHOLDER_QUOTED)))
    return text, offsets


def convert_structure(
    converter: GraphConverter,
    value: JsonLogicValue,
    link: ParentLink,
    trace: TraceBinding | None,
) -> str:
    node_id = converter.open_node(trace)
    is_array = isinstance(value, list)

    embedded = [(path, key, item) for path, key, item in _entries(value) if is_embedded_branch(item)]
    slots = [converter.slot(item, inline=False) for _, _, item in embedded]
    bindings = trace.assign(slots) if trace is not None else [None] * len(slots)

    branch_ids: dict[str, str] = {}
    for index, ((path, _key, item), binding) in enumerate(zip(embedded, bindings)):
        child_link = ParentLink(
            parent_id=node_id,
            arg_index=index,
            branch_type=BranchType.BRANCH,
            handle_index=index,
        )
        branch_ids[path] = converter.convert(item, child_link, binding)
    if trace is not None:
        trace.collapse_unassigned(node_id)

    markers = dict(zip(branch_ids, _unique_markers(value, len(branch_ids))))
    formatted, offsets = render_template(value, markers)
    elements = tuple(
        StructureElement(
            path=(path,),
            key=key,
            branch_id=branch_ids[path],
            start_offset=start,
            end_offset=end,
        )
        for (path, key, _item), (start, end) in zip(embedded, offsets)
    )

    converter.builder.add_node(
        LogicNode(
            id=node_id,
            kind="structure",
            archetype=Archetype.STRUCTURE,
            payload=StructureData(is_array=is_array, formatted_json=formatted, elements=elements),
            expression=value,
            expression_text=expression_text(value),
            link=link,
        )
    )
    return node_id
