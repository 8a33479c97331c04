"""Recursive converter shared by every node archetype."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import assert_never

from logicgraph.core.binding import Slot, TraceBinding
from logicgraph.core.builder import GraphBuilder
from logicgraph.core.classifier import classify
from logicgraph.core.converters._rows import Row, branch_summary
from logicgraph.core.converters.branch_table import convert_branch_table
from logicgraph.core.converters.if_else import convert_if_else
from logicgraph.core.converters.literal import convert_literal
from logicgraph.core.converters.operator import convert_operator
from logicgraph.core.converters.structure import convert_structure
from logicgraph.core.converters.variable import convert_variable
from logicgraph.core.formatting import operand_label, operand_type_icon
from logicgraph.core.graph import (
    ROOT_LINK,
    Archetype,
    BranchCell,
    Cell,
    InlineCell,
    ParentLink,
)
from logicgraph.core.values import JsonLogicValue, is_simple_operand

logger = logging.getLogger(__name__)


class GraphConverter:
    """Turns a JSONLogic value into nodes on a :class:`GraphBuilder`.

    When a :class:`TraceBinding` is passed to :meth:`convert`, each level
    asks it for the recorded children matching the operands it visits, so
    the resulting nodes carry trace ids. Without one, ids come from the
    builder's generator.
    """

    def __init__(self, builder: GraphBuilder, *, preserve_structure: bool = False) -> None:
        self.builder = builder
        self.preserve_structure = preserve_structure

    def convert(
        self,
        value: JsonLogicValue,
        link: ParentLink = ROOT_LINK,
        trace: TraceBinding | None = None,
    ) -> str:
        """Convert ``value`` and return the id of the node that represents it."""
        archetype = classify(value, self.preserve_structure)
        match archetype:
            case Archetype.LITERAL:
                return convert_literal(self, value, link, trace)
            case Archetype.VARIABLE:
                return convert_variable(self, value, link, trace)
            case Archetype.IF_ELSE:
                return convert_if_else(self, value, link, trace)
            case Archetype.BRANCH_TABLE:
                return convert_branch_table(self, value, link, trace)
            case Archetype.MULTI_OPERAND | Archetype.SINGLE_OPERAND:
                return convert_operator(self, value, link, trace)
            case Archetype.STRUCTURE:
                return convert_structure(self, value, link, trace)
            case _:
                assert_never(archetype)

    def is_simple(self, operand: JsonLogicValue) -> bool:
        return is_simple_operand(operand, preserve_structure=self.preserve_structure)

    def slot(self, operand: JsonLogicValue, *, inline: bool) -> Slot:
        positional = not inline and classify(operand, self.preserve_structure) is not Archetype.LITERAL
        return Slot(operand=operand, inline=inline, allow_positional=positional)

    def open_node(self, trace: TraceBinding | None) -> str:
        """Pick the id for a new node and register it with ``trace``."""
        if trace is not None and self.builder.reserve(trace.node_id):
            node_id = trace.node_id
        else:
            if trace is not None:
                logger.debug("Trace id %s already taken, using a fresh node id", trace.node_id)
            node_id = self.builder.new_id()
        if trace is not None:
            trace.register(node_id)
        return node_id

    def build_cells(
        self,
        node_id: str,
        rows: Sequence[Row],
        trace: TraceBinding | None,
        *,
        first_index: int = 0,
    ) -> tuple[Cell, ...]:
        """Route each row inline or into a child node.

        Simple operands become inline cells. Everything else is converted
        recursively and hangs off ``branch-k``, where ``k`` counts branch
        cells only.
        """
        slots = [self.slot(row.operand, inline=self.is_simple(row.operand)) for row in rows]
        bindings: list[TraceBinding | None]
        if trace is not None:
            bindings = trace.assign(slots)
        else:
            bindings = [None] * len(slots)

        cells: list[Cell] = []
        branch_index = 0
        for offset, (row, slot, binding) in enumerate(zip(rows, slots, bindings)):
            index = first_index + offset
            icon = row.icon or operand_type_icon(row.operand)
            if slot.inline:
                if binding is not None:
                    binding.collapse_into(node_id)
                cells.append(
                    InlineCell(
                        index=index,
                        label=operand_label(row.operand),
                        icon=icon,
                        value=row.operand,
                        role=row.role,
                        row_label=row.row_label,
                    )
                )
                continue

            link = ParentLink(
                parent_id=node_id,
                arg_index=index,
                branch_type=row.branch_type,
                handle_index=branch_index,
            )
            child_id = self.convert(row.operand, link, binding)
            cells.append(
                BranchCell(
                    index=index,
                    branch_id=child_id,
                    icon=icon,
                    summary=branch_summary(row.operand),
                    role=row.role,
                    row_label=row.row_label,
                )
            )
            branch_index += 1
        return tuple(cells)

