"""Map a JSONLogic value onto the archetype of the node that renders it."""

from __future__ import annotations

from logicgraph.core.graph import Archetype
from logicgraph.core.operators import BRANCH_TABLE_OPERATORS, IF_OPERATORS, VARIABLE_OPERATORS
from logicgraph.core.values import JsonLogicValue, is_data_structure, normalize_operands, operator_call


def classify(value: JsonLogicValue, preserve_structure: bool = False) -> Archetype:
    """Return the archetype for ``value``.

    Total and side-effect free: any JSON value classifies, and objects with
    zero or several keys fall back to ``Archetype.LITERAL``.
    """
    if preserve_structure and is_data_structure(value):
        return Archetype.STRUCTURE

    call = operator_call(value)
    if call is None:
        return Archetype.LITERAL

    operator, operands = call
    if operator in VARIABLE_OPERATORS:
        return Archetype.VARIABLE
    if operator in IF_OPERATORS:
        return Archetype.IF_ELSE
    if operator in BRANCH_TABLE_OPERATORS:
        return Archetype.BRANCH_TABLE
    if len(normalize_operands(operands)) > 1:
        return Archetype.MULTI_OPERAND
    return Archetype.SINGLE_OPERAND
