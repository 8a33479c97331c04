"""Predicates and helpers over raw JSONLogic values."""

from __future__ import annotations

import json
import re
from typing import Any, Literal, TypeAlias

from logicgraph.core.operators import VARIABLE_OPERATORS, is_operator

JsonLogicValue: TypeAlias = Any

ValueType = Literal["boolean", "number", "string", "null", "array", "object"]

_DATE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}-\d{2}"),
    re.compile(r"^\d{2}/\d{2}/\d{4}"),
    re.compile(r"^\d{2}-\d{2}-\d{4}"),
)


def operator_call(value: JsonLogicValue) -> tuple[str, JsonLogicValue] | None:
    """Return ``(operator, raw_operands)`` for a single-key object, else None."""
    if not isinstance(value, dict) or len(value) != 1:
        return None
    ((operator, operands),) = value.items()
    return operator, operands


def normalize_operands(operands: JsonLogicValue) -> list[JsonLogicValue]:
    """Wrap a bare operand in a list; lists pass through unchanged."""
    if isinstance(operands, list):
        return operands
    return [operands]


def is_variable_reference(value: JsonLogicValue) -> bool:
    call = operator_call(value)
    return call is not None and call[0] in VARIABLE_OPERATORS


def is_expression(value: JsonLogicValue) -> bool:
    """True for a single-key object whose key is a known operator."""
    call = operator_call(value)
    return call is not None and is_operator(call[0])


def is_data_structure(value: JsonLogicValue) -> bool:
    """True for objects/arrays meant to be walked rather than called.

    Non-empty arrays, objects with two or more keys, and single-key objects
    whose key is not a known operator all qualify.
    """
    if isinstance(value, list):
        return len(value) > 0
    if not isinstance(value, dict):
        return False
    if len(value) > 1:
        return True
    return len(value) == 1 and not is_operator(next(iter(value)))


def is_simple_operand(value: JsonLogicValue, *, preserve_structure: bool = False) -> bool:
    """Return True when ``value`` renders inline inside its parent's cell.

    Literals and variable references are simple. Other operator calls are
    complex, and so are data structures when structure preservation is on.
    """
    if preserve_structure and is_data_structure(value):
        return False
    if not isinstance(value, dict):
        return True
    if len(value) != 1:
        return True
    return is_variable_reference(value)


def value_type(value: JsonLogicValue) -> ValueType:
    """JSON type tag for ``value`` (bool is checked before number)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def looks_like_date(text: str) -> bool:
    return any(pattern.match(text) for pattern in _DATE_PATTERNS)


def _normalize_numbers(value: JsonLogicValue) -> JsonLogicValue:
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [_normalize_numbers(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_numbers(item) for key, item in value.items()}
    return value


def canonical_json(value: JsonLogicValue) -> str:
    """Compact, key-sorted JSON text used for structural comparison.

    Integral floats compare equal to ints (``1.0`` matches ``1``), matching
    how JSON engines re-serialize numbers.
    """
    return json.dumps(
        _normalize_numbers(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def compact_json(value: JsonLogicValue) -> str:
    """Compact JSON text preserving key order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class _Undefined:
    """Marker for "no value produced", distinct from JSON ``null``."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()
