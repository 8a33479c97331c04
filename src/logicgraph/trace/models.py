"""Typed models for the evaluator's execution trace."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from logicgraph.core._constants import TRACE_ID_PREFIX
from logicgraph.core.values import UNDEFINED, JsonLogicValue


class TraceFormatError(ValueError):
    """Raised when a trace payload is structurally invalid."""


def trace_node_id(trace_id: int) -> str:
    """Visual id claimed by the trace node ``trace_id``."""
    return f"{TRACE_ID_PREFIX}{trace_id}"


def _require_int(payload: Mapping[str, Any], key: str, where: str) -> int:
    if key not in payload:
        raise TraceFormatError(f"{where} is missing {key!r}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TraceFormatError(f"{where} {key!r} must be an int, got {type(value).__name__}")
    return value


def _optional_int(payload: Mapping[str, Any], key: str, where: str) -> int | None:
    if payload.get(key) is None:
        return None
    return _require_int(payload, key, where)


def _require_mapping(payload: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise TraceFormatError(f"{where} must be an object, got {type(payload).__name__}")
    return payload


@dataclass(frozen=True)
class ExpressionNode:
    """One sub-expression the evaluator visited, with its JSON text."""

    id: int
    expression: str
    children: tuple[ExpressionNode, ...] = ()

    @property
    def node_id(self) -> str:
        return trace_node_id(self.id)

    def parsed(self) -> JsonLogicValue:
        """Expression text decoded; raises ``json.JSONDecodeError`` if invalid."""
        return json.loads(self.expression)

    def walk(self) -> Iterator[ExpressionNode]:
        """Yield this node and every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    @classmethod
    def from_dict(cls, payload: Any) -> ExpressionNode:
        data = _require_mapping(payload, "Expression node")
        node_id = _require_int(data, "id", "Expression node")
        expression = data.get("expression", "")
        if not isinstance(expression, str):
            expression = json.dumps(expression, separators=(",", ":"), ensure_ascii=False)
        children = data.get("children")
        if children is None:
            children = []
        if not isinstance(children, list):
            raise TraceFormatError(f"Expression node {node_id} children must be a list")
        return cls(
            id=node_id,
            expression=expression,
            children=tuple(cls.from_dict(child) for child in children),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "expression": self.expression,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class ExecutionStep:
    """One evaluation step: which trace node ran and what it produced."""

    id: int
    node_id: int
    result: Any = UNDEFINED
    error: str | None = None
    context: Any = None
    iteration_index: int | None = None
    iteration_total: int | None = None

    @property
    def visual_id(self) -> str:
        return trace_node_id(self.node_id)

    @classmethod
    def from_dict(cls, payload: Any, *, index: int = 0) -> ExecutionStep:
        where = f"Step {index}"
        data = _require_mapping(payload, where)
        error = data.get("error")
        if error is not None and not isinstance(error, str):
            error = str(error)
        step_id = _optional_int(data, "id", where)
        return cls(
            id=index if step_id is None else step_id,
            node_id=_require_int(data, "node_id", where),
            result=data["result"] if "result" in data else UNDEFINED,
            error=error,
            context=data.get("context"),
            iteration_index=_optional_int(data, "iteration_index", where),
            iteration_total=_optional_int(data, "iteration_total", where),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id, "node_id": self.node_id, "error": self.error}
        if self.result is not UNDEFINED:
            payload["result"] = self.result
        if self.context is not None:
            payload["context"] = self.context
        if self.iteration_index is not None:
            payload["iteration_index"] = self.iteration_index
        if self.iteration_total is not None:
            payload["iteration_total"] = self.iteration_total
        return payload


@dataclass(frozen=True)
class TracedResult:
    """Evaluator output in trace mode."""

    result: Any = UNDEFINED
    expression_tree: ExpressionNode | None = None
    steps: tuple[ExecutionStep, ...] = field(default_factory=tuple)
    error: str | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> TracedResult:
        data = _require_mapping(payload, "Traced result")
        tree = data.get("expression_tree")
        steps = data.get("steps")
        if steps is None:
            steps = []
        if not isinstance(steps, list):
            raise TraceFormatError("Traced result steps must be a list")
        error = data.get("error")
        return cls(
            result=data["result"] if "result" in data else UNDEFINED,
            expression_tree=ExpressionNode.from_dict(tree) if tree is not None else None,
            steps=tuple(ExecutionStep.from_dict(step, index=index) for index, step in enumerate(steps)),
            error=None if error is None else str(error),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "expression_tree": self.expression_tree.to_dict() if self.expression_tree else None,
            "steps": [step.to_dict() for step in self.steps],
        }
        if self.result is not UNDEFINED:
            payload["result"] = self.result
        if self.error is not None:
            payload["error"] = self.error
        return payload


class Evaluator(Protocol):
    """External JSONLogic engine. Only its boundary is defined here."""

    def evaluate(self, expression: JsonLogicValue, data: JsonLogicValue) -> Any:
        """Evaluate ``expression`` against ``data`` and return the result."""

    def evaluate_with_trace(
        self,
        expression: JsonLogicValue,
        data: JsonLogicValue,
    ) -> TracedResult | Mapping[str, Any]:
        """Evaluate and return the trace, as a model or its dict form."""


def coerce_traced_result(traced: TracedResult | Mapping[str, Any]) -> TracedResult:
    if isinstance(traced, TracedResult):
        return traced
    return TracedResult.from_dict(traced)
