"""DebugSession: dispatch, listeners and the playback timer."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

import pytest

from logicgraph.debugger import DebuggerState, DebugSession, DebugSessionError, PlaybackState
from logicgraph.trace import TracedResult
from tests.conftest import expr_node, steps

VALUE = {"+": [1, {"*": [2, 3]}]}


def _traced(*node_ids: int) -> TracedResult:
    tree = expr_node(0, VALUE, expr_node(1, 1), expr_node(2, {"*": [2, 3]}, expr_node(3, 2), expr_node(4, 3)))
    return TracedResult(result=7, expression_tree=tree, steps=steps(*node_ids))


def _wait_until(predicate: Callable[[], bool], timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_from_trace_initializes_playback() -> None:
    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE) as session:
        state = session.state
        assert state.is_active
        assert state.current_step_index == 0
        assert state.playback_state is PlaybackState.STOPPED
        assert session.conversion.graph.root_id == "trace-0"
        assert session.view.current_node_id == "trace-0"


def test_manual_stepping_does_not_start_the_timer() -> None:
    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE) as session:
        session.step_forward()
        session.step_forward()
        assert session.state.current_step_index == 2
        session.step_backward()
        session.go_to_step(3)
        assert session.state.current_step_index == 3
        assert not session.is_timer_running


def test_playback_runs_to_the_end_and_pauses() -> None:
    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE, playback_speed=5) as session:
        session.play()
        assert _wait_until(lambda: session.state.playback_state is PlaybackState.PAUSED)
        assert session.state.current_step_index == 3
        assert _wait_until(lambda: not session.is_timer_running)


def test_leaving_playback_stops_the_timer() -> None:
    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE, playback_speed=10_000) as session:
        session.play()
        assert session.is_timer_running
        session.pause()
        assert not session.is_timer_running

        session.play()
        session.stop()
        assert not session.is_timer_running
        assert session.state.current_step_index == 0


def test_speed_change_during_playback_keeps_playing() -> None:
    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE, playback_speed=10_000) as session:
        session.play()
        state = session.set_speed(20_000)
        assert state.playback_speed == 20_000
        assert state.is_playing
        assert session.is_timer_running


def test_listeners_receive_each_new_state() -> None:
    seen: list[DebuggerState] = []
    with DebugSession.from_trace(_traced(1, 2), VALUE) as session:
        unsubscribe = session.subscribe(seen.append)
        session.step_forward()
        unsubscribe()
        session.step_backward()
    assert [state.current_step_index for state in seen] == [1]


def test_listeners_are_notified_from_timer_ticks() -> None:
    done = threading.Event()

    def on_state(state: DebuggerState) -> None:
        if state.playback_state is PlaybackState.PAUSED:
            done.set()

    with DebugSession.from_trace(_traced(1, 2, 0), VALUE, playback_speed=5) as session:
        session.subscribe(on_state)
        session.play()
        assert done.wait(timeout=3.0)


def test_failing_listener_does_not_stop_playback() -> None:
    seen: list[int] = []

    def broken(state: DebuggerState) -> None:
        raise RuntimeError("listener failed")

    with DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE, playback_speed=5) as session:
        session.subscribe(broken)
        session.subscribe(lambda state: seen.append(state.current_step_index))
        session.play()
        assert _wait_until(lambda: session.state.playback_state is PlaybackState.PAUSED)
        assert _wait_until(lambda: not session.is_timer_running)
        assert session.state.current_step_index == 3
    assert seen[-1] == 3


def test_load_trace_keeps_speed_and_resets_position() -> None:
    with DebugSession(playback_speed=250) as session:
        assert session.state.current_step_index == -1
        traced = _traced(1, 2)
        first = DebugSession.from_trace(traced, VALUE)
        first.close()
        state = session.load_trace(first.conversion, traced.steps)
        assert state.playback_speed == 250
        assert state.current_step_index == 0
        assert state.is_active


def test_close_stops_the_timer_and_rejects_actions() -> None:
    session = DebugSession.from_trace(_traced(1, 3, 2, 0), VALUE, playback_speed=10_000)
    session.play()
    session.close()
    session.close()

    assert session.closed
    assert not session.is_timer_running
    with pytest.raises(DebugSessionError):
        session.step_forward()


def test_invalid_speed_raises_before_dispatch() -> None:
    with DebugSession.from_trace(_traced(1), VALUE) as session:
        with pytest.raises(ValueError):
            session.set_speed(0)
        assert session.state.playback_speed == 500
