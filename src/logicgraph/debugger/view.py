"""Per-node highlighting derived from playback state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cached_property

from logicgraph.debugger.state import DebuggerState
from logicgraph.trace.correlator import TraceConversion
from logicgraph.trace.models import ExecutionStep, trace_node_id


@dataclass(frozen=True)
class NodeDebugState:
    is_current: bool
    is_executed: bool
    is_on_path: bool
    is_error: bool
    is_pending: bool
    step: ExecutionStep | None = None


class DebugView:
    """Read-only projection of a :class:`DebuggerState` onto graph nodes."""

    def __init__(
        self,
        state: DebuggerState,
        trace_node_map: Mapping[str, str],
        parent_map: Mapping[str, str],
    ) -> None:
        self.state = state
        self._trace_node_map = trace_node_map
        self._parent_map = parent_map

    @classmethod
    def from_conversion(cls, state: DebuggerState, conversion: TraceConversion) -> DebugView:
        return cls(state, conversion.trace_node_map, conversion.graph.parent_map())

    @property
    def is_overlay_active(self) -> bool:
        return self.state.is_active and self.state.current_step is not None

    def resolve(self, step: ExecutionStep) -> str:
        """Visual node for ``step``, or its raw ``trace-<id>`` when unmapped."""
        key = trace_node_id(step.node_id)
        return self._trace_node_map.get(key, key)

    @cached_property
    def current_node_id(self) -> str | None:
        step = self.state.current_step
        if not self.state.is_active or step is None:
            return None
        return self.resolve(step)

    @cached_property
    def executed_node_ids(self) -> frozenset[str]:
        if not self.is_overlay_active:
            return frozenset()
        done = self.state.steps[: self.state.current_step_index]
        return frozenset(self.resolve(step) for step in done)

    @cached_property
    def path_node_ids(self) -> frozenset[str]:
        node_id = self.current_node_id
        path: set[str] = set()
        while node_id is not None and node_id not in path:
            path.add(node_id)
            node_id = self._parent_map.get(node_id)
        return frozenset(path)

    @cached_property
    def error_node_ids(self) -> frozenset[str]:
        if not self.is_overlay_active:
            return frozenset()
        return frozenset(self.resolve(step) for step in self.state.steps if step.error is not None)

    def node_state(self, node_id: str) -> NodeDebugState | None:
        """Highlight flags for ``node_id``; None when no overlay applies."""
        if not self.is_overlay_active:
            return None
        is_current = node_id == self.current_node_id
        is_executed = node_id in self.executed_node_ids
        is_on_path = node_id in self.path_node_ids
        is_error = node_id in self.error_node_ids
        return NodeDebugState(
            is_current=is_current,
            is_executed=is_executed,
            is_on_path=is_on_path,
            is_error=is_error,
            is_pending=not (is_current or is_executed or is_on_path or is_error),
            step=self.state.current_step if is_current else None,
        )
