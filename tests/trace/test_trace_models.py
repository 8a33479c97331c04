"""Parsing and validation of evaluator trace payloads."""

from __future__ import annotations

import pytest

from logicgraph.trace import (
    UNDEFINED,
    Evaluator,
    ExecutionStep,
    ExpressionNode,
    TracedResult,
    TraceFormatError,
)
from logicgraph.trace.models import coerce_traced_result


def _payload() -> dict:
    return {
        "result": True,
        "expression_tree": {
            "id": 0,
            "expression": '{"==":[1,1]}',
            "children": [
                {"id": 1, "expression": "1", "children": []},
                {"id": 2, "expression": "1"},
            ],
        },
        "steps": [
            {"id": 0, "node_id": 1, "result": 1},
            {"id": 1, "node_id": 2, "result": 1},
            {"id": 2, "node_id": 0, "result": True, "iteration_index": 0, "iteration_total": 2},
        ],
    }


def test_from_dict_builds_typed_models() -> None:
    traced = TracedResult.from_dict(_payload())

    assert traced.result is True
    tree = traced.expression_tree
    assert tree is not None
    assert tree.node_id == "trace-0"
    assert [child.id for child in tree.children] == [1, 2]
    assert [node.id for node in tree.walk()] == [0, 1, 2]
    assert tree.parsed() == {"==": [1, 1]}

    last = traced.steps[-1]
    assert last.visual_id == "trace-0"
    assert (last.iteration_index, last.iteration_total) == (0, 2)


def test_round_trip_through_dict() -> None:
    payload = _payload()
    traced = TracedResult.from_dict(payload)
    assert TracedResult.from_dict(traced.to_dict()) == traced


def test_missing_result_is_undefined_not_null() -> None:
    step = ExecutionStep.from_dict({"node_id": 3}, index=4)
    assert step.result is UNDEFINED
    assert step.id == 4

    null_step = ExecutionStep.from_dict({"node_id": 3, "result": None})
    assert null_step.result is None


def test_non_string_error_is_stringified() -> None:
    step = ExecutionStep.from_dict({"node_id": 0, "error": {"type": "NaN"}})
    assert step.error == "{'type': 'NaN'}"


def test_non_string_expression_is_serialized() -> None:
    node = ExpressionNode.from_dict({"id": 0, "expression": {"var": "a"}})
    assert node.expression == '{"var":"a"}'


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"expression": "1"}, "missing 'id'"),
        ({"id": "0", "expression": "1"}, "must be an int"),
        ({"id": True, "expression": "1"}, "must be an int"),
        ({"id": 0, "expression": "1", "children": {}}, "children must be a list"),
        ({"id": 0, "expression": "1", "children": ""}, "children must be a list"),
        ({"id": 0, "expression": "1", "children": 0}, "children must be a list"),
        ([], "must be an object"),
    ],
)
def test_invalid_expression_nodes_raise(payload: object, message: str) -> None:
    with pytest.raises(TraceFormatError, match=message):
        ExpressionNode.from_dict(payload)


def test_invalid_steps_raise() -> None:
    with pytest.raises(TraceFormatError, match="Step 1"):
        TracedResult.from_dict({"steps": [{"node_id": 0}, {"node_id": "x"}]})
    with pytest.raises(TraceFormatError, match="steps must be a list"):
        TracedResult.from_dict({"steps": {}})
    with pytest.raises(TraceFormatError, match="steps must be a list"):
        TracedResult.from_dict({"steps": False})


def test_missing_or_null_lists_are_empty() -> None:
    assert ExpressionNode.from_dict({"id": 0, "expression": "1", "children": None}).children == ()
    assert ExpressionNode.from_dict({"id": 0, "expression": "1"}).children == ()
    assert TracedResult.from_dict({"steps": None}).steps == ()


def test_trace_format_error_is_a_value_error() -> None:
    assert issubclass(TraceFormatError, ValueError)


def test_coerce_accepts_models_and_dicts() -> None:
    traced = TracedResult()
    assert coerce_traced_result(traced) is traced
    assert coerce_traced_result({"steps": []}).steps == ()


class _RecordingEvaluator:
    def evaluate(self, expression: object, data: object) -> object:
        return True

    def evaluate_with_trace(self, expression: object, data: object) -> dict:
        return {
            "result": True,
            "expression_tree": {"id": 0, "expression": '{"var":"a"}', "children": []},
            "steps": [{"id": 0, "node_id": 0, "result": True}],
        }


def test_evaluator_output_coerces_to_a_traced_result() -> None:
    evaluator: Evaluator = _RecordingEvaluator()
    traced = coerce_traced_result(evaluator.evaluate_with_trace({"var": "a"}, {"a": True}))
    assert traced.result is True
    assert traced.steps[0].visual_id == "trace-0"
