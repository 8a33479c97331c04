"""Trace playback: immutable state, derived view and the owning session."""

from logicgraph.debugger.session import DebugSession, DebugSessionError
from logicgraph.debugger.state import (
    Action,
    AutoStepForward,
    DebuggerState,
    GoToStep,
    Initialize,
    Pause,
    Play,
    PlaybackState,
    Reset,
    SetSpeed,
    StepBackward,
    StepForward,
    Stop,
    reduce,
)
from logicgraph.debugger.view import DebugView, NodeDebugState

__all__ = [
    "Action",
    "AutoStepForward",
    "DebugSession",
    "DebugSessionError",
    "DebugView",
    "DebuggerState",
    "GoToStep",
    "Initialize",
    "NodeDebugState",
    "Pause",
    "Play",
    "PlaybackState",
    "Reset",
    "SetSpeed",
    "StepBackward",
    "StepForward",
    "Stop",
    "reduce",
]
