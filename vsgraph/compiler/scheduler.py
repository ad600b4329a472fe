"""
vsgraph compiler — Topological Sorter
======================================
Orders the nodes of a validated (acyclic) graph so that every producer comes
before each of its consumers.

Live nodes
----------
Only nodes that contribute to an output are ordered: every Output node plus
all of its transitive upstream producers. A node that feeds no Output (an
unconnected Source, an orphan Filter, a dead-end chain) is left out.

Determinism
-----------
Kahn's algorithm with a min-heap keyed on each node's position in the input
node list: whenever several nodes are ready, the one inserted first wins.
Re-sorting an unchanged graph therefore yields the same order, and the
emitted script is byte-identical.
"""

from __future__ import annotations

import heapq
import logging
from typing import Dict, List, Sequence, Set

from vsgraph.core.GraphPrimitives import Connection, Node, OutputNode

logger = logging.getLogger(__name__)


def _predecessors(nodes: Sequence[Node], connections: Sequence[Connection]) -> Dict[str, List[str]]:
    preds: Dict[str, List[str]] = {n.id: [] for n in nodes}
    for conn in connections:
        if conn.source_node_id in preds and conn.target_node_id in preds:
            preds[conn.target_node_id].append(conn.source_node_id)
    return preds


def live_node_ids(nodes: Sequence[Node], connections: Sequence[Connection]) -> Set[str]:
    """Ids of the Output nodes and everything upstream of them."""
    preds = _predecessors(nodes, connections)
    live: Set[str] = set()
    stack = [n.id for n in nodes if isinstance(n, OutputNode)]
    while stack:
        nid = stack.pop()
        if nid in live:
            continue
        live.add(nid)
        stack.extend(preds[nid])
    return live


def sort(nodes: Sequence[Node], connections: Sequence[Connection]) -> List[Node]:
    """
    Topologically order the live nodes of an acyclic graph.

    Args:
        nodes:        All nodes, in insertion order (the tie-break order).
        connections:  All connections.

    Returns:
        The live nodes, producers before consumers.
    """
    live = live_node_ids(nodes, connections)
    position = {n.id: i for i, n in enumerate(nodes)}
    by_id = {n.id: n for n in nodes}

    children: Dict[str, List[str]] = {nid: [] for nid in live}
    indegree: Dict[str, int] = {nid: 0 for nid in live}
    for conn in connections:
        src, dst = conn.source_node_id, conn.target_node_id
        if src in live and dst in live:
            children[src].append(dst)
            indegree[dst] += 1

    ready = [position[nid] for nid, d in indegree.items() if d == 0]
    heapq.heapify(ready)

    order: List[Node] = []
    while ready:
        node = nodes[heapq.heappop(ready)]
        order.append(node)
        for child in children[node.id]:
            indegree[child] -= 1
            if indegree[child] == 0:
                heapq.heappush(ready, position[child])

    if len(order) != len(live):
        # only reachable when called on a graph that skipped validation
        stuck = sorted((nid for nid, d in indegree.items() if d > 0), key=position.get)
        raise ValueError(f"Graph contains a cycle through {stuck}")

    skipped = len(by_id) - len(order)
    if skipped:
        logger.debug("sort: %d node(s) feed no output and were left out", skipped)
    return order


__all__ = ["live_node_ids", "sort"]
