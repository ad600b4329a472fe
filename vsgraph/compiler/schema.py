"""
vsgraph — Graph Document Schema + Validator
============================================
Defines the serialisation format of saved node graphs (``.vsgraph`` files)
and a lightweight validator that runs without any third-party JSON Schema
library.

Canonical JSON format
---------------------

    {
      "version":     "1.0",                       // format version (str, optional)
      "name":        "denoise-and-crop",          // human label (str, optional)
      "description": "",                          // (str, optional)
      "createdAt":   "2025-01-01T12:00:00",       // ISO timestamp (str, optional)
      "nodes": [
        {
          "id":    "a1b2",                        // unique within the graph (str, required)
          "type":  "Source",                      // Source | Filter | Output (required)
          "title": "Video Source",                // display title (str, optional)
          "x": 100.0, "y": 100.0,                 // canvas position (number, optional)

          "filePath":     "C:\\videos\\in.mp4",   // Source
          "sourcePlugin": "ffms2",                // Source (optional hint)

          "filterType":      "crop",              // Filter (palette key, optional)
          "pluginNamespace": "std",               // Filter (required)
          "function":        "Crop",              // Filter (required)
          "parameters": [                         // Filter (optional, ordered)
            {"name": "left", "value": "10", "type": "int"}
          ],

          "outputIndex": 0                        // Output (int >= 0, unique)
        }
      ],
      "connections": [
        {
          "sourceNodeId": "a1b2", "sourceConnectorName": "clip",
          "targetNodeId": "c3d4", "targetConnectorName": "clip"
        }
      ]
    }

Schema errors describe malformed documents. They are distinct from compile
errors (missing source/output, cycles, dangling inputs), which are reported
by the compiler on a well-formed graph.
"""

from __future__ import annotations

import json
import keyword
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple, Union

from vsgraph.core.Types import NodeKind, ParameterKind


FORMAT_VERSION = "1.0"

# connector names per node type (inputs, outputs)
CONNECTORS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    NodeKind.SOURCE.value: ((), ("clip",)),
    NodeKind.FILTER.value: (("clip",), ("clip",)),
    NodeKind.OUTPUT.value: (("clip",), ()),
}


# ── Validation helpers ────────────────────────────────────────────────────────

class SchemaError(ValueError):
    """Raised when a graph document fails structural validation."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise SchemaError(message)


def _require_keys(obj: Dict, keys: List[str], context: str) -> None:
    for key in keys:
        _require(key in obj, f"{context}: missing required field '{key}'")


def _optional_str(obj: Dict, key: str, context: str) -> None:
    if obj.get(key) is not None:
        _require(isinstance(obj[key], str), f"{context}.{key} must be a string")


def _is_python_name(value: Any) -> bool:
    return isinstance(value, str) and value.isidentifier() and not keyword.iskeyword(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ── Per-type node checks ──────────────────────────────────────────────────────

def _validate_source(node: Dict, ctx: str) -> None:
    _optional_str(node, "filePath", ctx)
    _optional_str(node, "sourcePlugin", ctx)


def _validate_filter(node: Dict, ctx: str) -> None:
    for key in ("pluginNamespace", "function"):
        _require(
            _is_python_name(node.get(key)),
            f"{ctx}: filter node requires an identifier '{key}'",
        )
    _optional_str(node, "filterType", ctx)

    params = node.get("parameters")
    if params is None:
        return
    _require(isinstance(params, list), f"{ctx}.parameters must be a list")
    seen: Set[str] = set()
    for j, param in enumerate(params):
        pctx = f"{ctx}.parameters[{j}]"
        _require(isinstance(param, dict), f"{pctx}: each parameter must be a JSON object")
        _require_keys(param, ["name"], pctx)
        _require(_is_python_name(param["name"]), f"{pctx}.name must be a valid identifier")
        _require(param["name"] not in seen, f"{pctx}: duplicate parameter '{param['name']}'")
        seen.add(param["name"])
        if param.get("type") is not None:
            try:
                ParameterKind.from_name(str(param["type"]))
            except ValueError as exc:
                raise SchemaError(f"{pctx}: {exc}") from None


def _validate_output(node: Dict, ctx: str, seen_indices: Set[int]) -> None:
    index = node.get("outputIndex", 0)
    if index is None:
        index = 0
    _require(
        isinstance(index, int) and not isinstance(index, bool),
        f"{ctx}.outputIndex must be an integer",
    )
    _require(index >= 0, f"{ctx}.outputIndex must be non-negative")
    _require(index not in seen_indices, f"{ctx}: duplicate output index {index}")
    seen_indices.add(index)


# ── Public validator ─────────────────────────────────────────────────────────

def validate(data: Dict[str, Any]) -> None:
    """
    Validate a parsed graph document.

    Args:
        data: A pre-parsed dict (result of json.load / json.loads).

    Raises:
        SchemaError: On any structural violation.
    """
    _require(isinstance(data, dict), "graph document must be a JSON object at the top level")
    _require_keys(data, ["nodes", "connections"], "graph root")
    _require(isinstance(data["nodes"], list), "nodes must be a list")
    _require(isinstance(data["connections"], list), "connections must be a list")
    for key in ("version", "name", "description", "createdAt"):
        _optional_str(data, key, "graph root")

    # ── Validate nodes ──────────────────────────────────────────────────────

    node_types: Dict[str, str] = {}
    output_indices: Set[int] = set()

    for i, node in enumerate(data["nodes"]):
        ctx = f"nodes[{i}]"
        _require(isinstance(node, dict), f"{ctx}: each node must be a JSON object")
        _require_keys(node, ["id", "type"], ctx)
        _require(isinstance(node["id"], str) and node["id"] != "", f"{ctx}.id must be a non-empty string")
        _require(node["id"] not in node_types, f"{ctx}: duplicate node id '{node['id']}'")
        _require(
            node["type"] in CONNECTORS,
            f"{ctx}: unknown node type '{node['type']}'",
        )
        _optional_str(node, "title", ctx)
        for key in ("x", "y"):
            if node.get(key) is not None:
                _require(_is_number(node[key]), f"{ctx}.{key} must be a number")

        node_types[node["id"]] = node["type"]

        if node["type"] == NodeKind.SOURCE.value:
            _validate_source(node, ctx)
        elif node["type"] == NodeKind.FILTER.value:
            _validate_filter(node, ctx)
        else:
            _validate_output(node, ctx, output_indices)

    # ── Validate connections ────────────────────────────────────────────────

    fields = ["sourceNodeId", "sourceConnectorName", "targetNodeId", "targetConnectorName"]
    connected_targets: Set[Tuple[str, str]] = set()

    for i, conn in enumerate(data["connections"]):
        ctx = f"connections[{i}]"
        _require(isinstance(conn, dict), f"{ctx}: each connection must be a JSON object")
        _require_keys(conn, fields, ctx)
        for field in fields:
            _require(isinstance(conn[field], str), f"{ctx}.{field} must be a string")

        src_type = node_types.get(conn["sourceNodeId"])
        dst_type = node_types.get(conn["targetNodeId"])
        _require(src_type is not None, f"{ctx}: sourceNodeId '{conn['sourceNodeId']}' not found in nodes")
        _require(dst_type is not None, f"{ctx}: targetNodeId '{conn['targetNodeId']}' not found in nodes")

        _require(
            conn["sourceConnectorName"] in CONNECTORS[src_type][1],
            f"{ctx}: {src_type} node has no output connector '{conn['sourceConnectorName']}'",
        )
        _require(
            conn["targetConnectorName"] in CONNECTORS[dst_type][0],
            f"{ctx}: {dst_type} node has no input connector '{conn['targetConnectorName']}'",
        )

        target = (conn["targetNodeId"], conn["targetConnectorName"])
        _require(target not in connected_targets, f"{ctx}: input connector already connected")
        connected_targets.add(target)


def load_file(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        try:
            return json.load(fh)
        except json.JSONDecodeError as exc:
            raise SchemaError(f"{path.name}: invalid JSON ({exc})") from exc


def validate_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load and validate a graph document.

    Returns:
        The parsed dict on success.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaError: If the file is not JSON or the graph structure is invalid.
    """
    data = load_file(path)
    validate(data)
    return data


__all__ = ["CONNECTORS", "FORMAT_VERSION", "SchemaError", "load_file", "validate", "validate_file"]
