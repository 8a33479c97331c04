"""Per-node evaluation results collected from trace steps."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from logicgraph.core.formatting import format_result_value
from logicgraph.core.values import UNDEFINED, value_type
from logicgraph.trace.models import TracedResult

ResultType = Literal["boolean", "number", "string", "null", "array", "object", "undefined"]


@dataclass(frozen=True)
class EvaluationResult:
    value: Any
    error: str | None
    type: ResultType

    @property
    def display(self) -> str:
        return format_result_value(self.value)


def result_type(value: Any) -> ResultType:
    if value is UNDEFINED:
        return "undefined"
    return value_type(value)


def evaluation_results(traced: TracedResult) -> dict[str, EvaluationResult]:
    """``trace-<id>`` -> result of the last step that ran that node."""
    results: dict[str, EvaluationResult] = {}
    for step in traced.steps:
        results[step.visual_id] = EvaluationResult(
            value=step.result,
            error=step.error,
            type=result_type(step.result),
        )
    return results


def results_by_node(
    results: Mapping[str, EvaluationResult],
    trace_node_map: Mapping[str, str],
) -> dict[str, EvaluationResult]:
    """Re-key results by visual node id.

    Only trace nodes that own their visual node contribute, so a collapsed
    operand never overwrites the result of the node it was folded into.
    """
    by_node: dict[str, EvaluationResult] = {}
    for trace_id, result in results.items():
        if trace_node_map.get(trace_id) == trace_id:
            by_node[trace_id] = result
    return by_node
