"""
vsgraph Compiler
================
Compiles an authored node graph into a VapourSynth script.

Pipeline:
    nodes, connections  →  [validator]  →  ok / CompileError
    nodes, connections  →  [scheduler]  →  ordered live nodes
    ordered nodes       →  [emitter]    →  script str

Public API
----------
    from vsgraph.compiler import compile_graph

    result = compile_graph(graph.nodes, graph.connections)
    if result.ok:
        print(result.script)
    else:
        print(result.error.kind, result.error.message)

The compiler performs no I/O and keeps no state between calls; concurrent
calls are safe as long as the caller does not mutate the input mid-call.
"""

from __future__ import annotations

import logging
from typing import Sequence

from vsgraph.core.GraphPrimitives import Connection, Graph, Node
from .emitter import emit
from .errors import CompileError, CompileErrorKind, CompileFailed, CompileResult
from .scheduler import sort
from .validator import validate

logger = logging.getLogger(__name__)


def compile_graph(
    nodes: Sequence[Node],
    connections: Sequence[Connection],
    *,
    annotate: bool = False,
) -> CompileResult:
    """
    Compile a node set and a connection set into a script.

    Args:
        nodes:        All nodes, in insertion order.
        connections:  All connections.
        annotate:     Add a comment line naming each statement's node.

    Returns:
        CompileResult with either ``script`` or ``error`` set.
    """
    nodes = list(nodes)
    connections = list(connections)
    logger.debug("compile: %d node(s), %d connection(s)", len(nodes), len(connections))

    error = validate(nodes, connections)
    if error is not None:
        logger.info("compile failed: %s", error)
        return CompileResult.failure(error)

    ordered = sort(nodes, connections)
    try:
        script = emit(ordered, connections, annotate=annotate)
    except CompileFailed as exc:
        logger.info("compile failed: %s", exc.error)
        return CompileResult.failure(exc.error)

    return CompileResult.success(script)


def compile_network(graph: Graph, *, annotate: bool = False) -> CompileResult:
    """Compile a Graph arena (convenience wrapper around compile_graph)."""
    return compile_graph(graph.nodes, graph.connections, annotate=annotate)


__all__ = [
    "CompileError",
    "CompileErrorKind",
    "CompileFailed",
    "CompileResult",
    "compile_graph",
    "compile_network",
    "emit",
    "sort",
    "validate",
]
