"""Pairing an expression's operands with the evaluator's recorded children."""

from __future__ import annotations

import json
import logging
from collections.abc import Collection, Sequence

from logicgraph.core.binding import Slot
from logicgraph.core.values import canonical_json, compact_json
from logicgraph.trace.models import ExpressionNode

logger = logging.getLogger(__name__)


def child_key(child: ExpressionNode) -> str | None:
    """Canonical text of a child's expression, or None if it does not parse."""
    try:
        return canonical_json(child.parsed())
    except json.JSONDecodeError:
        logger.debug("Trace node %d has unparseable expression %r", child.id, child.expression)
        return None


def _matches(operand_key: str, operand_text: str, child: ExpressionNode, key: str | None) -> bool:
    if key is None:
        return child.expression == operand_text
    return key == operand_key


def assign_children(
    slots: Sequence[Slot],
    children: Sequence[ExpressionNode],
    taken: Collection[int] = (),
) -> list[int | None]:
    """Return, per slot, the index of the child it claims (or None).

    Two passes over the slots. First each slot claims the first unused child
    whose expression is structurally equal to its operand. Then slots left
    without a child, and that allow it, take the remaining children in
    order. Children listed in ``taken`` are never handed out.
    """
    keys = [child_key(child) for child in children]
    used = set(taken)
    assignment: list[int | None] = [None] * len(slots)

    for position, slot in enumerate(slots):
        operand_key = canonical_json(slot.operand)
        operand_text = compact_json(slot.operand)
        for index, child in enumerate(children):
            if index not in used and _matches(operand_key, operand_text, child, keys[index]):
                assignment[position] = index
                used.add(index)
                break

    free = (index for index in range(len(children)) if index not in used)
    for position, slot in enumerate(slots):
        if assignment[position] is not None or not slot.allow_positional:
            continue
        index = next(free, None)
        if index is None:
            break
        logger.debug(
            "Positional match: operand %s -> trace node %d",
            compact_json(slot.operand),
            children[index].id,
        )
        assignment[position] = index
    return assignment
