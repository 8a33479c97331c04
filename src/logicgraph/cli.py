"""Command-line front end: render a graph or replay a recorded trace."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from logicgraph.core import ConversionOptions, LogicGraph, LogicNode, convert_jsonlogic
from logicgraph.core.formatting import format_result_value, format_value
from logicgraph.core.graph import BranchCell, LiteralData
from logicgraph.debugger import DebugSession, DebugView, DebuggerState, NodeDebugState
from logicgraph.trace import (
    EvaluationResult,
    TraceFormatError,
    TracedResult,
    evaluation_results,
    results_by_node,
)

logger = logging.getLogger(__name__)

_STATE_STYLES = (
    ("is_current", "bold reverse"),
    ("is_error", "bold red"),
    ("is_executed", "green"),
    ("is_on_path", "yellow"),
)


def _read_json(source: str) -> Any:
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")
    logger.debug("Read %d characters from %s", len(text), "stdin" if source == "-" else source)
    return json.loads(text)


def _node_style(state: NodeDebugState | None) -> str:
    if state is None:
        return ""
    for flag, style in _STATE_STYLES:
        if getattr(state, flag):
            return style
    return "dim"


def _node_label(node: LogicNode, view: DebugView | None) -> Text:
    label = Text()
    label.append(f"[{node.kind}] ", style="cyan")
    text = format_value(node.payload.value) if isinstance(node.payload, LiteralData) else node.expression_text
    label.append(text, style=_node_style(view.node_state(node.id) if view else None))
    if view is not None and node.id == view.current_node_id:
        step = view.state.current_step
        if step is not None:
            result = step.error or format_result_value(step.result)
            label.append(f"  => {result}", style="bold")
    return label


def _row_labels(node: LogicNode) -> dict[str, str]:
    return {
        cell.branch_id: cell.row_label or f"arg {cell.index}"
        for cell in node.cells
        if isinstance(cell, BranchCell)
    }


def render_tree(graph: LogicGraph, view: DebugView | None = None) -> Tree | Text:
    """Rich tree of ``graph``, highlighted by ``view`` when given."""
    root = graph.root
    if root is None:
        return Text("(empty expression)", style="dim")

    def grow(branch: Tree, node: LogicNode) -> None:
        rows = _row_labels(node)
        for child in graph.children(node.id):
            prefix = rows.get(child.id)
            label = _node_label(child, view)
            if prefix:
                label = Text.assemble((f"{prefix}: ", "magenta"), label)
            grow(branch.add(label), child)

    tree = Tree(_node_label(root, view))
    grow(tree, root)
    return tree


def render_steps(state: DebuggerState, view: DebugView) -> Table:
    table = Table(title="Execution steps")
    table.add_column("#", justify="right")
    table.add_column("Node")
    table.add_column("Result")
    table.add_column("Error", style="red")
    for index, step in enumerate(state.steps):
        style = "bold reverse" if index == state.current_step_index else ""
        table.add_row(
            str(index),
            Text(view.resolve(step)),
            Text(format_result_value(step.result)),
            Text(step.error or ""),
            style=style,
        )
    return table


def render_results(graph: LogicGraph, results: dict[str, EvaluationResult]) -> Table:
    """Final value of every node that produced one, in graph order."""
    table = Table(title="Node results")
    table.add_column("Node")
    table.add_column("Expression")
    table.add_column("Value")
    table.add_column("Type")
    for node in graph.nodes:
        result = results.get(node.id)
        if result is None:
            continue
        table.add_row(
            Text(node.id),
            Text(node.expression_text),
            Text(result.error or result.display),
            result.type,
        )
    return table


def _cmd_graph(args: argparse.Namespace, console: Console) -> int:
    value = _read_json(args.expression)
    graph = convert_jsonlogic(value, ConversionOptions(preserve_structure=args.preserve_structure))
    if args.json:
        console.print_json(json.dumps(graph.to_dict(), ensure_ascii=False))
    else:
        console.print(render_tree(graph))
    return 0


def _play_to_end(session: DebugSession, console: Console) -> None:
    finished = threading.Event()

    def on_change(state: DebuggerState) -> None:
        step = state.current_step
        if step is not None:
            line = f"step {state.current_step_index}: {format_result_value(step.result)}"
            console.print(line, markup=False)
        if not state.is_playing:
            finished.set()

    unsubscribe = session.subscribe(on_change)
    try:
        session.play()
        finished.wait()
    finally:
        unsubscribe()


def _cmd_replay(args: argparse.Namespace, console: Console) -> int:
    traced = TracedResult.from_dict(_read_json(args.trace))
    original = _read_json(args.expression) if args.expression else None

    with DebugSession.from_trace(
        traced,
        original,
        preserve_structure=args.preserve_structure,
        playback_speed=args.speed,
    ) as session:
        if args.play:
            _play_to_end(session, console)
        elif args.step is not None:
            session.go_to_step(args.step)
        view = session.view
        console.print(render_tree(session.conversion.graph, view))
        console.print(render_steps(session.state, view))
        if args.results:
            results = results_by_node(evaluation_results(traced), session.conversion.trace_node_map)
            console.print(render_results(session.conversion.graph, results))
    if traced.error:
        console.print(Text.assemble(("Evaluation error: ", "red"), traced.error))
    return 0


def _parse_speed(value: str) -> int:
    try:
        speed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid --speed value {value!r}") from exc
    if speed <= 0:
        raise argparse.ArgumentTypeError(f"--speed must be positive, got {speed}")
    return speed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logicgraph",
        description="Render JSONLogic expressions as graphs and replay evaluation traces.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    graph = subparsers.add_parser("graph", help="Print the node graph for an expression.")
    graph.add_argument("expression", help="JSON file with the expression ('-' for stdin).")
    graph.add_argument(
        "--preserve-structure",
        action="store_true",
        help="Render objects and arrays as templates with embedded expressions.",
    )
    graph.add_argument("--json", action="store_true", help="Print the renderer payload as JSON.")
    graph.set_defaults(handler=_cmd_graph)

    replay = subparsers.add_parser("replay", help="Step through a recorded evaluation trace.")
    replay.add_argument("trace", help="JSON file with the traced result ('-' for stdin).")
    replay.add_argument(
        "--expression",
        default=None,
        help="JSON file with the original expression (keeps key order).",
    )
    replay.add_argument("--preserve-structure", action="store_true")
    position = replay.add_mutually_exclusive_group()
    position.add_argument("--step", type=int, default=None, help="Show the graph at this step.")
    position.add_argument("--play", action="store_true", help="Play the trace to the end.")
    replay.add_argument("--results", action="store_true", help="Also print the final value of each node.")
    replay.add_argument(
        "--speed",
        type=_parse_speed,
        default=None,
        help="Milliseconds between steps while playing (default: 500).",
    )
    replay.set_defaults(handler=_cmd_replay)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    console = Console()
    try:
        return args.handler(args, console)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON: {exc}", file=sys.stderr)
        return 1
    except TraceFormatError as exc:
        print(f"Invalid trace: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
