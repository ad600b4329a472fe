"""
Graph serializer — converts compiler and registry objects into JSON-safe
dicts matching the wire shapes the node editor UI expects.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from vsgraph.compiler.errors import CompileResult
from vsgraph.core.GraphPrimitives import Node
from vsgraph.noderegistry.NodeRegistry import FilterPreset

# ── Wire shapes (dicts, not TypedDicts, for easy JSON serialisation) ──────────

# SerializedPreset keys: filterType, name, category, pluginNamespace, function,
#                        parameters[{name, type, default}]
# SerializedCompile keys: ok, script, error{kind, message, nodeIds}, order


def serialize_preset(preset: FilterPreset) -> Dict[str, Any]:
    return {
        "filterType": preset.filter_type,
        "name": preset.display_name,
        "category": preset.category,
        "pluginNamespace": preset.plugin_namespace,
        "function": preset.function_name,
        "parameters": [
            {"name": name, "type": kind.value, "default": value}
            for name, kind, value in preset.defaults
        ],
    }


def serialize_palette(presets: Sequence[FilterPreset]) -> List[Dict[str, Any]]:
    return [serialize_preset(p) for p in presets]


def serialize_compile_result(
    result: CompileResult,
    order: Optional[Sequence[Node]] = None,
) -> Dict[str, Any]:
    if not result.ok:
        return {"ok": False, "script": None, "error": result.error.to_dict(), "order": []}
    return {
        "ok": True,
        "script": result.script,
        "error": None,
        # node ids in emission order, so the UI can number its nodes
        "order": [n.id for n in order or []],
    }
