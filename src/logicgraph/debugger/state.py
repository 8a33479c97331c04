"""Immutable trace playback state and its pure reducer.

Each action returns a new :class:`DebuggerState`; nothing is mutated in
place. ``current_step_index == -1`` is the "no overlay" state before any
trace has been loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, cast

from pyrsistent import PRecord, PVector, field, pvector

from logicgraph.core._constants import DEFAULT_PLAYBACK_SPEED_MS
from logicgraph.trace.models import ExecutionStep


class PlaybackState(Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class DebuggerState(PRecord):
    """Snapshot of trace playback.

    Attributes:
        is_active: True once a non-empty trace has been loaded.
        steps: Execution steps in evaluation order.
        current_step_index: Index into ``steps``; -1 before initialization.
        playback_state: Playing, paused or stopped.
        playback_speed: Milliseconds between automatic steps.
    """

    is_active = field(type=bool, initial=False)
    steps = field(type=PVector, initial=pvector())
    current_step_index = field(type=int, initial=-1)
    playback_state = field(type=PlaybackState, initial=PlaybackState.STOPPED)
    playback_speed = field(type=int, initial=DEFAULT_PLAYBACK_SPEED_MS)

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def is_playing(self) -> bool:
        return self.playback_state is PlaybackState.PLAYING

    @property
    def current_step(self) -> ExecutionStep | None:
        if 0 <= self.current_step_index < len(self.steps):
            return cast(ExecutionStep, self.steps[self.current_step_index])
        return None


@dataclass(frozen=True)
class Initialize:
    steps: tuple[ExecutionStep, ...] = ()


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class StepForward:
    pass


@dataclass(frozen=True)
class AutoStepForward:
    """Timer tick while playing."""


@dataclass(frozen=True)
class StepBackward:
    pass


@dataclass(frozen=True)
class GoToStep:
    index: int


@dataclass(frozen=True)
class SetSpeed:
    milliseconds: int

    def __post_init__(self) -> None:
        if self.milliseconds <= 0:
            raise ValueError(f"Playback speed must be positive, got {self.milliseconds}")


@dataclass(frozen=True)
class Reset:
    pass


Action: TypeAlias = (
    Initialize
    | Play
    | Pause
    | Stop
    | StepForward
    | AutoStepForward
    | StepBackward
    | GoToStep
    | SetSpeed
    | Reset
)


def _clamp(index: int, last: int) -> int:
    return max(0, min(index, last))


def reduce(state: DebuggerState, action: Action) -> DebuggerState:
    """Apply ``action`` to ``state``. Boundary moves settle in PAUSED."""
    index = state.current_step_index
    last = state.last_index

    match action:
        case Initialize(steps=steps):
            return state.set(
                is_active=bool(steps),
                steps=pvector(steps),
                current_step_index=0,
                playback_state=PlaybackState.STOPPED,
            )
        case Play():
            if not state.steps:
                return state
            start = 0 if index >= last else index
            return state.set(current_step_index=start, playback_state=PlaybackState.PLAYING)
        case Pause():
            return state.set(playback_state=PlaybackState.PAUSED)
        case Stop() | Reset():
            return state.set(current_step_index=0, playback_state=PlaybackState.STOPPED)
        case StepForward():
            if index < last:
                return state.set(current_step_index=index + 1, playback_state=PlaybackState.PAUSED)
            return state.set(playback_state=PlaybackState.PAUSED)
        case AutoStepForward():
            if index < last:
                return state.set(current_step_index=index + 1)
            return state.set(playback_state=PlaybackState.PAUSED)
        case StepBackward():
            if index > 0:
                return state.set(current_step_index=index - 1, playback_state=PlaybackState.PAUSED)
            return state.set(playback_state=PlaybackState.PAUSED)
        case GoToStep(index=target):
            return state.set(current_step_index=_clamp(target, last), playback_state=PlaybackState.PAUSED)
        case SetSpeed(milliseconds=milliseconds):
            return state.set(playback_speed=milliseconds)
    raise TypeError(f"Unknown debugger action: {action!r}")
