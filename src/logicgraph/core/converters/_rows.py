"""Row plans handed from archetype converters to cell routing."""

from __future__ import annotations

from dataclasses import dataclass

from logicgraph.core._constants import BRANCH_LABEL_LIMIT
from logicgraph.core.formatting import arg_summary, expression_text
from logicgraph.core.graph import ArgSummary, BranchType, CellRole
from logicgraph.core.values import JsonLogicValue


@dataclass(frozen=True)
class Row:
    """A planned cell: which operand goes where, and how its child hangs."""

    operand: JsonLogicValue
    role: CellRole = "operand"
    row_label: str | None = None
    branch_type: BranchType = BranchType.BRANCH
    icon: str | None = None


def branch_summary(operand: JsonLogicValue) -> ArgSummary:
    summary = arg_summary(operand)
    return ArgSummary(
        icon=summary.icon,
        label=expression_text(operand, BRANCH_LABEL_LIMIT),
        value_type=summary.value_type,
    )
