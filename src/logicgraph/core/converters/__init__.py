"""Per-archetype converters and the recursive dispatcher."""

from logicgraph.core.converters.base import GraphConverter

__all__ = ["GraphConverter"]
