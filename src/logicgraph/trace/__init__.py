"""Execution trace models and trace-to-graph correlation."""

from logicgraph.trace.correlator import TraceConversion, TraceCursor, trace_to_graph
from logicgraph.trace.matching import assign_children
from logicgraph.trace.models import (
    UNDEFINED,
    Evaluator,
    ExecutionStep,
    ExpressionNode,
    TracedResult,
    TraceFormatError,
)
from logicgraph.trace.results import EvaluationResult, evaluation_results, results_by_node

__all__ = [
    "UNDEFINED",
    "EvaluationResult",
    "Evaluator",
    "ExecutionStep",
    "ExpressionNode",
    "TraceConversion",
    "TraceCursor",
    "TraceFormatError",
    "TracedResult",
    "assign_children",
    "evaluation_results",
    "results_by_node",
    "trace_to_graph",
]
