"""Boundary between graph conversion and trace correlation.

Conversion walks an expression and, when a trace is attached, asks the
trace binding which recorded child belongs to each operand it visits. The
binding owns the trace-id -> node-id map; the converter never touches it
directly.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from logicgraph.core.values import JsonLogicValue


@dataclass(frozen=True)
class Slot:
    """One operand a converter is about to visit, in encounter order."""

    operand: JsonLogicValue
    inline: bool
    allow_positional: bool


class TraceBinding(Protocol):
    """A recorded trace node attached to the value being converted."""

    @property
    def node_id(self) -> str:
        """Visual id this trace node claims (``trace-<id>``)."""

    def register(self, visual_id: str) -> None:
        """Map this trace node's own id onto ``visual_id``."""

    def assign(self, slots: Sequence[Slot]) -> list[TraceBinding | None]:
        """Hand out unused children to ``slots``; None where nothing matched."""

    def collapse_into(self, visual_id: str) -> None:
        """Map this node and every descendant onto ``visual_id``."""

    def collapse_unassigned(self, visual_id: str) -> None:
        """Map children never handed out by :meth:`assign` onto ``visual_id``."""
