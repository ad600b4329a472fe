"""
vsgraph compiler — Script Emitter
==================================
Turns a topologically ordered node list into VapourSynth script text.

Output structure
----------------
    import vapoursynth as vs
    core = vs.core
    src_<id>_0 = core.ffms2.Source("in.mp4")
    fx_<id>_1 = core.std.Crop(src_<id>_0, left=10)
    fx_<id>_1.set_output(0)

  • one statement per Source / Filter node, in sorted order
  • then one set_output statement per Output node, in sorted order

Variable naming
---------------
    Source →  src_<node id>_<position>
    Filter →  fx_<node id>_<position>

where <node id> is safe_identifier(node.id) and <position> is the 0-based
index of the statement among the data-flow statements. Names are stable
across re-compiles of the same graph and unique per node.

Input resolution
----------------
A node's input variable is whatever variable was bound to the output
connector feeding its single input connector, looked up through the
connection set. No incoming connection (or a producer that was not emitted)
raises CompileFailed(DANGLING_INPUT) instead of referencing an undefined name.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from vsgraph.core.GraphPrimitives import (
    Connection,
    Connector,
    FilterNode,
    Node,
    OutputNode,
    SourceNode,
)
from .errors import CompileError, CompileErrorKind, CompileFailed
from .templates import (
    PREAMBLE,
    RUNTIME_HANDLE,
    CodeWriter,
    render_literal,
    safe_identifier,
    source_adapter,
    string_literal,
)

logger = logging.getLogger(__name__)


# ── Input resolution ──────────────────────────────────────────────────────────

def _incoming_map(connections: Sequence[Connection]) -> Dict[Connector, Connection]:
    incoming: Dict[Connector, Connection] = {}
    for conn in connections:
        incoming.setdefault(conn.target, conn)
    return incoming


def _input_var(
    node: Node,
    incoming: Dict[Connector, Connection],
    variables: Dict[Connector, str],
) -> str:
    conn = incoming.get(node.input_connector)
    var = variables.get(conn.source) if conn is not None else None
    if var is None:
        raise CompileFailed(CompileError(
            CompileErrorKind.DANGLING_INPUT,
            f"{node.kind.value} node '{node.title}' has no connected input",
            (node.id,),
        ))
    return var


# ── Statement builders ────────────────────────────────────────────────────────

def _source_statement(node: SourceNode, var: str) -> str:
    target = source_adapter(node.source_plugin)
    return f"{var} = {RUNTIME_HANDLE}.{target}({string_literal(node.file_path)})"


def _filter_statement(node: FilterNode, var: str, in_var: str) -> str:
    args = [in_var]
    for param in node.parameters:
        if not param.is_set():
            continue
        args.append(f"{param.name}={render_literal(param.value, param.kind)}")
    call = f"{RUNTIME_HANDLE}.{node.plugin_namespace}.{node.function_name}"
    return f"{var} = {call}({', '.join(args)})"


def _output_statement(node: OutputNode, in_var: str) -> str:
    return f"{in_var}.set_output({node.output_index})"


# ── Public API ────────────────────────────────────────────────────────────────

def emit(
    ordered_nodes: Sequence[Node],
    connections: Sequence[Connection],
    *,
    annotate: bool = False,
) -> str:
    """
    Emit the script for an already validated and sorted node sequence.

    Args:
        ordered_nodes:  Output of scheduler.sort().
        connections:    The full connection set.
        annotate:       Prefix every statement with a comment naming its node.

    Returns:
        The complete script, newline-terminated.

    Raises:
        CompileFailed: DANGLING_INPUT when an input connector has no producer.
    """
    incoming = _incoming_map(connections)
    variables: Dict[Connector, str] = {}
    outputs: List[OutputNode] = []

    w = CodeWriter()
    w.extend(PREAMBLE)

    position = 0
    for node in ordered_nodes:
        if isinstance(node, SourceNode):
            var = f"src_{safe_identifier(node.id)}_{position}"
            if annotate:
                w.comment(f"Source: {node.title}")
            w.writeln(_source_statement(node, var))
            variables[node.output_connector] = var
            position += 1

        elif isinstance(node, FilterNode):
            in_var = _input_var(node, incoming, variables)
            var = f"fx_{safe_identifier(node.id)}_{position}"
            if annotate:
                w.comment(f"Filter: {node.title}")
            w.writeln(_filter_statement(node, var, in_var))
            variables[node.output_connector] = var
            position += 1

        elif isinstance(node, OutputNode):
            outputs.append(node)

        else:
            raise TypeError(f"Unknown node type {type(node).__name__}")

    for node in outputs:
        in_var = _input_var(node, incoming, variables)
        if annotate:
            w.comment(f"Output {node.output_index}")
        w.writeln(_output_statement(node, in_var))

    logger.debug("emit: %d data-flow statement(s), %d output(s)", position, len(outputs))
    return w.result()


__all__ = ["emit"]
