"""
vsgraph compiler — Graph Validator
===================================
Structural preconditions checked before ordering and emission:

  1. at least one Source node    → MISSING_SOURCE   (checked first)
  2. at least one Output node    → MISSING_OUTPUT
  3. no directed cycle           → CYCLE_DETECTED

The cycle walk covers the whole connection set, not only what is reachable
from the Source, so a loop between two filters that never reaches an Output
is still reported.

More than one Source node is accepted: each connected Source gets its own
variable in the emitted script.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from vsgraph.core.GraphPrimitives import Connection, Node, OutputNode, SourceNode
from .errors import CompileError, CompileErrorKind

logger = logging.getLogger(__name__)


# ── DFS colours ───────────────────────────────────────────────────────────────

WHITE = 0   # not visited
GREY  = 1   # on the current DFS path
BLACK = 2   # finished


def successors(nodes: Sequence[Node], connections: Sequence[Connection]) -> Dict[str, List[str]]:
    """node id → downstream node ids, in connection order. Unknown endpoints are skipped."""
    adjacency: Dict[str, List[str]] = {n.id: [] for n in nodes}
    for conn in connections:
        if conn.source_node_id in adjacency and conn.target_node_id in adjacency:
            adjacency[conn.source_node_id].append(conn.target_node_id)
    return adjacency


def find_cycle(nodes: Sequence[Node], connections: Sequence[Connection]) -> Optional[List[str]]:
    """
    Return the node ids of one directed cycle (in traversal order), or None.

    Iterative three-colour DFS started from every node in insertion order;
    meeting a GREY node during descent closes a cycle.
    """
    adjacency = successors(nodes, connections)
    colour: Dict[str, int] = {nid: WHITE for nid in adjacency}

    for root in adjacency:
        if colour[root] != WHITE:
            continue

        colour[root] = GREY
        path: List[str] = [root]
        stack = [(root, iter(adjacency[root]))]

        while stack:
            nid, children = stack[-1]
            child = next(children, None)

            if child is None:
                colour[nid] = BLACK
                stack.pop()
                path.pop()
                continue

            if colour[child] == GREY:
                return path[path.index(child):]
            if colour[child] == WHITE:
                colour[child] = GREY
                path.append(child)
                stack.append((child, iter(adjacency[child])))

    return None


# ── Public API ────────────────────────────────────────────────────────────────

def validate(nodes: Sequence[Node], connections: Sequence[Connection]) -> Optional[CompileError]:
    """
    Check the graph's structural preconditions.

    Returns:
        None when the graph may be compiled, otherwise the first CompileError
        found. Pure: nothing is mutated.
    """
    if not any(isinstance(n, SourceNode) for n in nodes):
        return CompileError(CompileErrorKind.MISSING_SOURCE, "No source node found")

    if not any(isinstance(n, OutputNode) for n in nodes):
        return CompileError(CompileErrorKind.MISSING_OUTPUT, "No output node found")

    cycle = find_cycle(nodes, connections)
    if cycle is not None:
        logger.debug("cycle through %s", " -> ".join(cycle))
        return CompileError(
            CompileErrorKind.CYCLE_DETECTED,
            f"Cycle detected in node graph ({len(cycle)} node(s))",
            tuple(cycle),
        )

    return None


__all__ = ["find_cycle", "successors", "validate"]
