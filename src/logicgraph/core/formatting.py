"""Human-readable text for expressions, operands and evaluation results."""

from __future__ import annotations

import json
from typing import Any

from logicgraph.core._constants import EXPRESSION_TEXT_LIMIT, SHORT_LABEL_LIMIT
from logicgraph.core.graph import ArgSummary
from logicgraph.core.operators import TYPE_ICONS, VARIABLE_OPERATORS, operator_meta
from logicgraph.core.values import (
    UNDEFINED,
    JsonLogicValue,
    looks_like_date,
    normalize_operands,
    operator_call,
)

COMPARISON_OPERATORS = frozenset({"==", "===", "!=", "!==", ">", ">=", "<", "<="})
ARITHMETIC_BINARY_OPERATORS = frozenset({"+", "-", "*", "/", "%"})
ITERATOR_OPERATORS = frozenset({"map", "reduce", "filter", "some", "none", "all"})
UNARY_OPERATORS = frozenset({"!", "!!"})
_LOGICAL_JOINERS = {"and": " AND ", "or": " OR "}

RESULT_STRING_LIMIT = 15


def truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def scalar_text(value: Any) -> str:
    """JSON-style text for a scalar: ``true``, ``null``, ``3`` (not ``3.0``)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _first_operand(operands: JsonLogicValue) -> JsonLogicValue:
    if isinstance(operands, list):
        return operands[0] if operands else None
    return operands


def _path_text(operands: JsonLogicValue) -> str:
    path = _first_operand(operands)
    return "" if path is None else scalar_text(path)


def _segments_text(operands: JsonLogicValue) -> str:
    """Dotted path for ``val`` or ``exists`` operands, skipping a leading scope."""
    parts = normalize_operands(operands)
    if parts and isinstance(parts[0], list):
        parts = parts[1:]
    return ".".join("" if part is None else scalar_text(part) for part in parts)


def _needs_parens(value: JsonLogicValue, parent_op: str) -> bool:
    call = operator_call(value)
    if call is None:
        return False
    sub_op = call[0]
    if {parent_op, sub_op} == {"and", "or"}:
        return True
    if parent_op in COMPARISON_OPERATORS and sub_op in _LOGICAL_JOINERS:
        return True
    return parent_op in {"*", "/"} and sub_op in {"+", "-"}


def _to_text(value: JsonLogicValue) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, list):
        return "[" + ", ".join(_to_text(item) for item in value) + "]"
    if not isinstance(value, dict):
        return scalar_text(value)

    call = operator_call(value)
    if call is None:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    op, operands = call

    match op:
        case "var":
            return _path_text(operands)
        case "val":
            return f"val({_segments_text(operands)})"
        case "exists":
            return f"exists({_segments_text(operands)})"

    args = normalize_operands(operands)

    def wrap(arg: JsonLogicValue) -> str:
        text = _to_text(arg)
        return f"({text})" if _needs_parens(arg, op) else text

    if op in COMPARISON_OPERATORS or op in ARITHMETIC_BINARY_OPERATORS:
        if len(args) >= 2:
            return f" {op} ".join(wrap(arg) for arg in args)
    if op in _LOGICAL_JOINERS:
        return _LOGICAL_JOINERS[op].join(wrap(arg) for arg in args)
    if op in UNARY_OPERATORS:
        arg = args[0] if args else None
        sub = operator_call(arg)
        if sub is not None and (sub[0] in _LOGICAL_JOINERS or sub[0] in COMPARISON_OPERATORS):
            return f"{op}({_to_text(arg)})"
        return f"{op}{_to_text(arg)}"
    if op in ITERATOR_OPERATORS:
        source = args[0] if args else None
        return f"{op}({_to_text(source)}, ...)"
    if op in {"if", "?:"}:
        return _if_text(args)
    if op in {"switch", "match"}:
        return _switch_text(op, args)
    return f"{op}(" + ", ".join(_to_text(arg) for arg in args) + ")"


def _if_text(args: list[JsonLogicValue]) -> str:
    parts: list[str] = []
    index = 0
    while index < len(args):
        if index + 1 < len(args):
            prefix = "if" if index == 0 else "else if"
            parts.append(f"{prefix} {_to_text(args[index])} then {_to_text(args[index + 1])}")
            index += 2
        else:
            parts.append(f"else {_to_text(args[index])}")
            index += 1
    return " ".join(parts)


def _switch_text(op: str, args: list[JsonLogicValue]) -> str:
    parts = [f"{op}({_to_text(args[0] if args else None)})"]
    if len(args) >= 2 and isinstance(args[1], list):
        for case in args[1]:
            if isinstance(case, list) and len(case) >= 2:
                parts.append(f"{_to_text(case[0])}: {_to_text(case[1])}")
    if len(args) >= 3:
        parts.append(f"default: {_to_text(args[2])}")
    return ", ".join(parts)


def expression_text(value: JsonLogicValue, max_length: int = EXPRESSION_TEXT_LIMIT) -> str:
    """Readable one-line rendering of ``value``, truncated to ``max_length``.

    Comparisons and arithmetic render infix, ``and``/``or`` as ``AND``/``OR``
    chains with parentheses where precedence requires them, ``if`` as an
    if/else-if/else chain and ``switch`` as ``switch(x), case: result``.
    """
    return truncate(_to_text(value), max_length)


def arg_summary(value: JsonLogicValue) -> ArgSummary:
    """Icon + short label describing an operand in collapsed views."""
    if value is None:
        return ArgSummary(icon=TYPE_ICONS["null"], label="null", value_type="null")
    if isinstance(value, bool):
        icon = TYPE_ICONS["boolean_true"] if value else TYPE_ICONS["boolean_false"]
        return ArgSummary(icon=icon, label=scalar_text(value), value_type="boolean")
    if isinstance(value, (int, float)):
        return ArgSummary(icon=TYPE_ICONS["number"], label=scalar_text(value), value_type="number")
    if isinstance(value, str):
        if looks_like_date(value):
            return ArgSummary(icon=TYPE_ICONS["date"], label=value, value_type="date")
        return ArgSummary(
            icon=TYPE_ICONS["string"],
            label=f'"{truncate(value, SHORT_LABEL_LIMIT)}"',
            value_type="string",
        )
    if isinstance(value, list):
        label = "[]" if not value else f"[{len(value)} items]"
        return ArgSummary(icon=TYPE_ICONS["array"], label=label, value_type="array")

    call = operator_call(value)
    if call is None:
        return ArgSummary(icon=TYPE_ICONS["expression"], label="...", value_type="expression")
    op, operands = call
    match op:
        case "var":
            label = _path_text(operands) or "var"
            return ArgSummary(icon=TYPE_ICONS["variable"], label=label, value_type="expression")
        case "val":
            label = f"val({_segments_text(operands)})"
            return ArgSummary(icon=TYPE_ICONS["variable"], label=label, value_type="expression")
        case "exists":
            label = f"exists({_segments_text(operands)})"
            return ArgSummary(icon=TYPE_ICONS["variable"], label=label, value_type="expression")
    count = len(operands) if isinstance(operands, list) else 1
    plural = "" if count == 1 else "s"
    label = f"{operator_meta(op).label} ({count} arg{plural})"
    return ArgSummary(icon=TYPE_ICONS["expression"], label=label, value_type="expression")


def operand_label(operand: JsonLogicValue) -> str:
    """Label shown inside an inline cell."""
    if isinstance(operand, str):
        return f'"{operand}"'
    if isinstance(operand, list):
        return "[]" if not operand else "[...]"
    if not isinstance(operand, dict):
        return scalar_text(operand)

    call = operator_call(operand)
    if call is None:
        return "..."
    op, operands = call
    match op:
        case "var":
            return scalar_text(_first_operand(operands))
        case "val":
            return f"val({_segments_text(operands)})"
        case "exists":
            return f"exists({_segments_text(operands)})"
    return "..."


def format_value(value: JsonLogicValue) -> str:
    """Text for a literal node; short arrays are spelled out."""
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, list):
        if len(value) <= 3:
            return "[" + ", ".join(format_value(item) for item in value) + "]"
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return scalar_text(value)


def format_result_value(value: Any) -> str:
    """Compact text for an evaluation result badge."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, str):
        if len(value) > RESULT_STRING_LIMIT:
            return f'"{value[:12]}..."'
        return f'"{value}"'
    if isinstance(value, list):
        return "[]" if not value else f"[{len(value)}]"
    if isinstance(value, dict):
        return "{}" if not value else f"{{{len(value)}}}"
    return scalar_text(value)


def operand_type_icon(operand: JsonLogicValue) -> str:
    """Icon for a cell holding ``operand``."""
    if operand is None:
        return TYPE_ICONS["null"]
    if isinstance(operand, bool):
        return TYPE_ICONS["boolean"]
    if isinstance(operand, (int, float)):
        return TYPE_ICONS["number"]
    if isinstance(operand, str):
        return TYPE_ICONS["date"] if looks_like_date(operand) else TYPE_ICONS["string"]
    if isinstance(operand, list):
        return TYPE_ICONS["array"]
    call = operator_call(operand)
    if call is not None and call[0] in VARIABLE_OPERATORS:
        return TYPE_ICONS["variable"]
    return TYPE_ICONS["expression"]
