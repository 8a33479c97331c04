"""Mutable owner of one debugger state, with a playback timer."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from logicgraph.core.graph import LogicGraph
from logicgraph.core.values import JsonLogicValue
from logicgraph.debugger.state import (
    Action,
    AutoStepForward,
    DebuggerState,
    GoToStep,
    Initialize,
    Pause,
    Play,
    Reset,
    SetSpeed,
    StepBackward,
    StepForward,
    Stop,
    reduce,
)
from logicgraph.debugger.view import DebugView
from logicgraph.trace.correlator import TraceConversion, trace_to_graph
from logicgraph.trace.models import ExecutionStep, TracedResult, coerce_traced_result

logger = logging.getLogger(__name__)

Listener = Callable[[DebuggerState], None]


class DebugSessionError(RuntimeError):
    """Raised when a closed session is used."""


class _PlaybackTimer:
    """Repeating tick on a daemon thread until stopped."""

    def __init__(self, interval_ms: int, on_tick: Callable[[_PlaybackTimer], None]) -> None:
        self.interval_ms = interval_ms
        self._on_tick = on_tick
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True, name="logicgraph-playback")

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        interval = self.interval_ms / 1000.0
        while not self._stop_event.wait(interval):
            self._on_tick(self)


class DebugSession:
    """Dispatches debugger actions and keeps the playback timer in step.

    The timer runs only while the state is PLAYING: it is started on entry,
    stopped on any transition out, restarted when the speed changes during
    playback, and stopped by :meth:`close`. Listeners are called with the
    new state after every dispatch, outside the session lock.
    """

    def __init__(
        self,
        conversion: TraceConversion | None = None,
        *,
        playback_speed: int | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._state = DebuggerState()
        if playback_speed is not None:
            self._state = reduce(self._state, SetSpeed(playback_speed))
        self._conversion = conversion or TraceConversion(graph=LogicGraph())
        self._listeners: list[Listener] = []
        self._timer: _PlaybackTimer | None = None
        self._closed = False

    @classmethod
    def from_trace(
        cls,
        traced: TracedResult | Mapping[str, Any],
        original_value: JsonLogicValue = None,
        *,
        preserve_structure: bool = False,
        playback_speed: int | None = None,
    ) -> DebugSession:
        traced = coerce_traced_result(traced)
        conversion = trace_to_graph(traced, original_value, preserve_structure)
        session = cls(conversion, playback_speed=playback_speed)
        session.load_trace(conversion, traced.steps)
        return session

    # State access

    @property
    def state(self) -> DebuggerState:
        with self._lock:
            return self._state

    @property
    def conversion(self) -> TraceConversion:
        with self._lock:
            return self._conversion

    @property
    def view(self) -> DebugView:
        with self._lock:
            return DebugView.from_conversion(self._state, self._conversion)

    @property
    def is_timer_running(self) -> bool:
        with self._lock:
            return self._timer is not None and not self._timer.stopped

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # Control surface

    def load_trace(self, conversion: TraceConversion, steps: Iterable[ExecutionStep]) -> DebuggerState:
        """Swap in a new trace and re-initialize; playback speed is kept."""
        with self._lock:
            self._require_open_locked()
            self._conversion = conversion
        return self.dispatch(Initialize(tuple(steps)))

    def play(self) -> DebuggerState:
        return self.dispatch(Play())

    def pause(self) -> DebuggerState:
        return self.dispatch(Pause())

    def stop(self) -> DebuggerState:
        return self.dispatch(Stop())

    def reset(self) -> DebuggerState:
        return self.dispatch(Reset())

    def step_forward(self) -> DebuggerState:
        return self.dispatch(StepForward())

    def step_backward(self) -> DebuggerState:
        return self.dispatch(StepBackward())

    def go_to_step(self, index: int) -> DebuggerState:
        return self.dispatch(GoToStep(index))

    def set_speed(self, milliseconds: int) -> DebuggerState:
        return self.dispatch(SetSpeed(milliseconds))

    def dispatch(self, action: Action) -> DebuggerState:
        with self._lock:
            self._require_open_locked()
            new_state = self._apply_locked(action)
            listeners = list(self._listeners)
        self._notify(listeners, new_state)
        return new_state

    def close(self) -> None:
        """Stop the timer and refuse further actions. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            timer = self._timer
            self._timer = None
            if timer is not None:
                timer.stop()
        if timer is not None:
            timer.join(timeout=1.0)
        logger.debug("Debug session closed")

    def __enter__(self) -> DebugSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Internals

    def _require_open_locked(self) -> None:
        if self._closed:
            raise DebugSessionError("Debug session is closed")

    def _apply_locked(self, action: Action) -> DebuggerState:
        previous = self._state
        self._state = reduce(previous, action)
        self._sync_timer_locked(previous, self._state)
        return self._state

    def _sync_timer_locked(self, previous: DebuggerState, current: DebuggerState) -> None:
        if not current.is_playing:
            self._stop_timer_locked()
            return
        timer = self._timer
        if (
            timer is not None
            and previous.is_playing
            and timer.interval_ms == current.playback_speed
            and not timer.stopped
        ):
            return
        self._stop_timer_locked()
        self._timer = _PlaybackTimer(current.playback_speed, self._on_tick)
        self._timer.start()
        logger.debug("Playback timer started at %d ms", current.playback_speed)

    def _stop_timer_locked(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer = None
        logger.debug("Playback timer stopped")

    def _on_tick(self, timer: _PlaybackTimer) -> None:
        with self._lock:
            if self._closed or timer is not self._timer or timer.stopped:
                return
            new_state = self._apply_locked(AutoStepForward())
            listeners = list(self._listeners)
        self._notify(listeners, new_state)

    def _notify(self, listeners: list[Listener], state: DebuggerState) -> None:
        # A failing listener must not stop the others or kill the timer thread.
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("Debugger listener %r failed", listener)
