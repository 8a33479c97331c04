"""Graph accumulator and node id generators."""

from __future__ import annotations

import itertools
import logging
import uuid
from typing import Protocol

from logicgraph.core._constants import TARGET_HANDLE
from logicgraph.core.graph import LogicEdge, LogicGraph, LogicNode

logger = logging.getLogger(__name__)


class IdGenerator(Protocol):
    def __call__(self) -> str: ...


class SequentialIds:
    """Deterministic ids: ``node-1``, ``node-2``, ..."""

    def __init__(self, prefix: str = "node-", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


class Uuid4Ids:
    """Random UUID4 ids, for graphs merged into a shared canvas."""

    def __call__(self) -> str:
        return str(uuid.uuid4())


class GraphBuilder:
    """Accumulates nodes and edges for a single conversion.

    Single-writer: one builder belongs to one conversion call and is handed
    down the recursive descent by reference. Adding a node also adds its
    inbound edge, so every non-root node gets exactly one.
    """

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._ids: IdGenerator = id_generator or SequentialIds()
        self._nodes: list[LogicNode] = []
        self._edges: list[LogicEdge] = []
        self._seen: set[str] = set()
        self._reserved: set[str] = set()

    def new_id(self) -> str:
        node_id = self._ids()
        while node_id in self._reserved:
            node_id = self._ids()
        self._reserved.add(node_id)
        return node_id

    def reserve(self, node_id: str) -> bool:
        """Claim an externally chosen id; False when it is already taken."""
        if node_id in self._reserved:
            return False
        self._reserved.add(node_id)
        return True

    def add_node(self, node: LogicNode) -> None:
        if node.id in self._seen:
            raise ValueError(f"Duplicate node id: {node.id!r}")
        self._seen.add(node.id)
        self._reserved.add(node.id)
        self._nodes.append(node)

        link = node.link
        if link.parent_id is None:
            return
        handle = link.source_handle
        self._edges.append(
            LogicEdge(
                id=f"{link.parent_id}-{handle}-{node.id}",
                source=link.parent_id,
                target=node.id,
                source_handle=handle,
                target_handle=TARGET_HANDLE,
                arg_index=link.arg_index,
                branch_type=link.branch_type,
            )
        )

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def build(self, root_id: str | None) -> LogicGraph:
        logger.debug("Built graph with %d nodes, %d edges", len(self._nodes), len(self._edges))
        return LogicGraph(nodes=tuple(self._nodes), edges=tuple(self._edges), root_id=root_id)
