"""Entry point: JSONLogic value to :class:`LogicGraph`."""

from __future__ import annotations

from dataclasses import dataclass

from logicgraph.core.builder import GraphBuilder, IdGenerator
from logicgraph.core.converters import GraphConverter
from logicgraph.core.graph import LogicGraph
from logicgraph.core.values import JsonLogicValue


@dataclass(frozen=True)
class ConversionOptions:
    """Knobs for one conversion.

    ``preserve_structure`` renders multi-key objects and non-empty arrays as
    structure nodes instead of literals. ``id_generator`` defaults to a fresh
    :class:`~logicgraph.core.builder.SequentialIds` per call.
    """

    preserve_structure: bool = False
    id_generator: IdGenerator | None = None


def convert_jsonlogic(value: JsonLogicValue, options: ConversionOptions | None = None) -> LogicGraph:
    """Convert any JSON value into a node/edge tree. Never raises on odd shapes.

    A top-level ``None`` means "no expression" and yields an empty graph.
    """
    if value is None:
        return LogicGraph()
    options = options or ConversionOptions()
    builder = GraphBuilder(options.id_generator)
    converter = GraphConverter(builder, preserve_structure=options.preserve_structure)
    root_id = converter.convert(value)
    return builder.build(root_id)
