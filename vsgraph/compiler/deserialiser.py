"""
vsgraph — Graph Document (De)serialiser
========================================
Converts a saved graph document (see schema.py) into a live Graph and back.

Pipeline
--------
    graph.vsgraph  →  [schema.validate]          →  dict
    dict           →  [deserialiser.json_to_graph] →  Graph
    Graph          →  [compiler.compile_network]  →  script str

Parameter values
----------------
The editor historically stored every parameter value as a string next to a
type name ("1920" / "int"). Values are coerced to their declared type here so
the emitter can render proper literals. An empty string means "unset" and
becomes None, which the emitter skips. Parameters without a declared type
take the type of their JSON value.
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from vsgraph.core.GraphPrimitives import (
    Connector,
    FilterNode,
    Graph,
    Node,
    OutputNode,
    Parameter,
    SourceNode,
)
from vsgraph.core.Types import NodeKind, ParameterKind, PortDirection
from vsgraph.noderegistry.NodeRegistry import filter_type_for
from .schema import FORMAT_VERSION, SchemaError, load_file, validate

logger = logging.getLogger(__name__)


# ── Parameters ────────────────────────────────────────────────────────────────

def _parse_parameter(param_spec: Dict[str, Any], ctx: str) -> Parameter:
    raw = param_spec.get("value")
    if raw == "":
        raw = None

    type_name = param_spec.get("type")
    try:
        kind = None if type_name is None else ParameterKind.from_name(str(type_name))
        return Parameter(param_spec["name"], raw, kind)
    except ValueError as exc:
        raise SchemaError(f"{ctx}: {exc}") from None


# ── Nodes ─────────────────────────────────────────────────────────────────────

def _position(node_spec: Dict[str, Any]) -> Dict[str, float]:
    return {"x": float(node_spec.get("x") or 0.0), "y": float(node_spec.get("y") or 0.0)}


def _parse_node(node_spec: Dict[str, Any], ctx: str) -> Node:
    node_type = node_spec["type"]
    node_id = node_spec["id"]

    if node_type == NodeKind.SOURCE.value:
        return SourceNode(
            file_path=node_spec.get("filePath") or "",
            source_plugin=node_spec.get("sourcePlugin"),
            id=node_id,
            title=node_spec.get("title") or "Video Source",
            **_position(node_spec),
        )

    if node_type == NodeKind.FILTER.value:
        params = [
            _parse_parameter(p, f"{ctx}.parameters[{j}]")
            for j, p in enumerate(node_spec.get("parameters") or [])
        ]
        return FilterNode(
            display_name=node_spec.get("title") or node_spec["function"],
            plugin_namespace=node_spec["pluginNamespace"],
            function_name=node_spec["function"],
            parameters=tuple(params),
            id=node_id,
            **_position(node_spec),
        )

    return OutputNode(
        output_index=node_spec.get("outputIndex") or 0,
        id=node_id,
        title=node_spec.get("title") or "Output",
        **_position(node_spec),
    )


# ── Public entry points ───────────────────────────────────────────────────────

def json_to_graph(source: Union[str, Path, Dict[str, Any]]) -> Graph:
    """
    Parse a graph document and return a Graph.

    Args:
        source: One of:
            - A file path (str or Path) to a .vsgraph JSON file.
            - A pre-parsed dict matching the graph document schema.

    Raises:
        FileNotFoundError: If a path is given and the file does not exist.
        SchemaError: If the document is malformed.
    """
    data = load_file(source) if isinstance(source, (str, Path)) else source
    validate(data)

    graph = Graph()
    for i, node_spec in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        try:
            node = _parse_node(node_spec, ctx)
        except SchemaError:
            raise
        except ValueError as exc:
            raise SchemaError(f"{ctx}: {exc}") from None
        graph.add_node(node)

    for conn_spec in data["connections"]:
        graph.connect(
            Connector(conn_spec["sourceNodeId"], conn_spec["sourceConnectorName"], PortDirection.OUTPUT),
            Connector(conn_spec["targetNodeId"], conn_spec["targetConnectorName"], PortDirection.INPUT),
        )

    logger.debug(
        "json_to_graph: %d node(s), %d connection(s)",
        len(graph.nodes), len(graph.connections),
    )
    return graph


def node_to_json(node: Node) -> Dict[str, Any]:
    """A single node in graph document form."""
    data: Dict[str, Any] = {
        "id": node.id,
        "type": node.kind.value,
        "title": node.title,
        "x": node.x,
        "y": node.y,
    }
    if isinstance(node, SourceNode):
        data["filePath"] = node.file_path
        data["sourcePlugin"] = node.source_plugin
    elif isinstance(node, FilterNode):
        data["filterType"] = filter_type_for(node.plugin_namespace, node.function_name)
        data["pluginNamespace"] = node.plugin_namespace
        data["function"] = node.function_name
        data["parameters"] = [
            {"name": p.name, "value": p.value, "type": p.kind.value}
            for p in node.parameters
        ]
    elif isinstance(node, OutputNode):
        data["outputIndex"] = node.output_index
    else:
        raise TypeError(f"Unknown node type {type(node).__name__}")
    return data


def graph_to_json(
    graph: Graph,
    name: str = "",
    description: str = "",
    created_at: Optional[datetime.datetime] = None,
) -> Dict[str, Any]:
    """Serialise a Graph into a graph document (the inverse of json_to_graph)."""
    created_at = created_at or datetime.datetime.now()
    connections: List[Dict[str, str]] = [
        {
            "sourceNodeId": c.source.node_id,
            "sourceConnectorName": c.source.name,
            "targetNodeId": c.target.node_id,
            "targetConnectorName": c.target.name,
        }
        for c in graph.connections
    ]
    return {
        "version": FORMAT_VERSION,
        "name": name,
        "description": description,
        "createdAt": created_at.isoformat(timespec="seconds"),
        "nodes": [node_to_json(n) for n in graph.nodes],
        "connections": connections,
    }


__all__ = ["graph_to_json", "json_to_graph", "node_to_json"]
