"""Readable text for expressions, operands and results."""

from __future__ import annotations

import pytest

from logicgraph.core.formatting import (
    arg_summary,
    expression_text,
    format_result_value,
    format_value,
    operand_label,
    scalar_text,
    truncate,
)
from logicgraph.core.values import UNDEFINED


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ({">": [{"var": "age"}, 18]}, "age > 18"),
        ({"and": [{"or": [{"var": "a"}, {"var": "b"}]}, {"var": "c"}]}, "(a OR b) AND c"),
        ({"*": [{"+": [1, 2]}, 3]}, "(1 + 2) * 3"),
        ({"==": [{"and": [True, False]}, False]}, "(true AND false) == false"),
        ({"!": {"var": "x"}}, "!x"),
        ({"!": {"==": [1, 2]}}, "!(1 == 2)"),
        ({"map": [{"var": "items"}, {"*": [{"var": ""}, 2]}]}, "map(items, ...)"),
        ({"if": [{"var": "a"}, "x", "y"]}, 'if a then "x" else "y"'),
        ({"if": [{"var": "a"}, 1, {"var": "b"}, 2, 3]}, "if a then 1 else if b then 2 else 3"),
        ({"switch": [{"var": "k"}, [[1, "a"]], "z"]}, 'switch(k), 1: "a", default: "z"'),
        ({"val": [[-1], "index"]}, "val(index)"),
        ({"exists": ["user", "name"]}, "exists(user.name)"),
        ({"exists": "name"}, "exists(name)"),
        ({"cat": ["a", {"var": "b"}]}, 'cat("a", b)'),
        ({"a": 1, "b": 2}, '{"a":1,"b":2}'),
        ([1, "two"], '[1, "two"]'),
        (1.0, "1"),
        (None, "null"),
    ],
)
def test_expression_text(value: object, expected: str) -> None:
    assert expression_text(value) == expected


def test_expression_text_truncates() -> None:
    value = {"cat": ["x" * 200]}
    text = expression_text(value, 40)
    assert len(text) == 40
    assert text.endswith("...")


def test_truncate_and_scalar_text() -> None:
    assert truncate("abcdef", 5) == "ab..."
    assert truncate("abc", 5) == "abc"
    assert scalar_text(True) == "true"
    assert scalar_text(2.5) == "2.5"


def test_arg_summary_labels() -> None:
    assert arg_summary({"+": [1, 2]}).label == "Add (2 args)"
    assert arg_summary({"abs": -1}).label == "Absolute (1 arg)"
    assert arg_summary({"var": "x"}).label == "x"
    assert arg_summary([]).label == "[]"
    assert arg_summary([1, 2]).label == "[2 items]"
    assert arg_summary("2024-01-01").value_type == "date"
    assert arg_summary("a" * 30).label == '"' + "a" * 17 + '..."'
    assert arg_summary(False).icon == "x"


def test_operand_labels() -> None:
    assert operand_label("hi") == '"hi"'
    assert operand_label({"var": ["x", 1]}) == "x"
    assert operand_label({"val": []}) == "val()"
    assert operand_label({"val": "n"}) == "val(n)"
    assert operand_label([1]) == "[...]"
    assert operand_label({"a": 1, "b": 2}) == "..."


def test_format_value_spells_out_short_arrays() -> None:
    assert format_value([1, "a"]) == '[1, "a"]'
    assert format_value([1, 2, 3, 4]) == "[4 items]"


def test_format_result_value() -> None:
    assert format_result_value(UNDEFINED) == "undefined"
    assert format_result_value(None) == "null"
    assert format_result_value(True) == "true"
    assert format_result_value("short") == '"short"'
    assert format_result_value("a" * 20) == '"' + "a" * 12 + '..."'
    assert format_result_value([1, 2]) == "[2]"
    assert format_result_value({}) == "{}"
    assert format_result_value({"a": 1}) == "{1}"
