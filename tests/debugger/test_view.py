"""Node highlighting derived from playback position."""

from __future__ import annotations

from logicgraph.debugger import DebuggerState, DebugView, GoToStep, Initialize, reduce
from logicgraph.trace import TracedResult, trace_to_graph
from tests.conftest import expr_node, steps

SOME = {"some": [{"var": "items"}, {">=": [{"var": "qty"}, 1]}]}
TREE = expr_node(
    0,
    SOME,
    expr_node(1, {"var": "items"}),
    expr_node(2, {">=": [{"var": "qty"}, 1]}, expr_node(3, {"var": "qty"}), expr_node(4, 1)),
)


def _view(*node_ids: int, index: int, errors: dict[int, str] | None = None) -> DebugView:
    conversion = trace_to_graph(TracedResult(expression_tree=TREE), SOME)
    state = reduce(DebuggerState(), Initialize(steps(*node_ids, errors=errors)))
    state = reduce(state, GoToStep(index))
    return DebugView.from_conversion(state, conversion)


def test_executed_nodes_are_strictly_before_the_cursor() -> None:
    view = _view(1, 2, index=1)
    assert view.executed_node_ids == frozenset({"trace-0"})
    assert view.current_node_id == "trace-2"


def test_path_walks_up_to_the_root() -> None:
    view = _view(3, index=0)
    assert view.current_node_id == "trace-2"
    assert view.path_node_ids == frozenset({"trace-2", "trace-0"})


def test_node_state_flags() -> None:
    view = _view(1, 3, index=1)

    current = view.node_state("trace-2")
    assert current is not None
    assert current.is_current and current.is_on_path
    assert current.step is not None and current.step.node_id == 3
    assert not current.is_pending

    parent = view.node_state("trace-0")
    assert parent.is_executed and parent.is_on_path
    assert not parent.is_current
    assert parent.step is None


def test_untouched_nodes_are_pending() -> None:
    view = _view(1, index=0)
    state = view.node_state("trace-2")
    assert state.is_pending
    assert not (state.is_current or state.is_executed or state.is_on_path or state.is_error)


def test_errors_cover_every_step() -> None:
    view = _view(1, 3, errors={1: "boom"}, index=0)
    assert view.error_node_ids == frozenset({"trace-2"})
    assert view.node_state("trace-2").is_error


def test_unmapped_trace_ids_fall_back_to_the_raw_id() -> None:
    view = _view(42, index=0)
    assert view.current_node_id == "trace-42"
    assert view.path_node_ids == frozenset({"trace-42"})


def test_sentinel_state_has_no_overlay() -> None:
    view = DebugView(DebuggerState(), {}, {})
    assert view.is_overlay_active is False
    assert view.current_node_id is None
    assert view.executed_node_ids == frozenset()
    assert view.path_node_ids == frozenset()
    assert view.node_state("trace-0") is None


def test_empty_trace_has_no_overlay() -> None:
    state = reduce(DebuggerState(), Initialize())
    view = DebugView(state, {}, {})
    assert view.node_state("anything") is None


def test_parent_cycles_do_not_loop() -> None:
    state = reduce(DebuggerState(), Initialize(steps(1)))
    view = DebugView(state, {"trace-1": "a"}, {"a": "b", "b": "a"})
    assert view.path_node_ids == frozenset({"a", "b"})
