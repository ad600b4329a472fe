"""
Graph REST routes — compile service for the node editor.

All routes are mounted under /api by main.py.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from vsgraph.compiler import compile_network
from vsgraph.compiler.deserialiser import json_to_graph, node_to_json
from vsgraph.compiler.scheduler import sort
from vsgraph.compiler.schema import SchemaError
from vsgraph.noderegistry.NodeRegistry import create_filter_node, list_filters
from vsgraph.server.serializers.graph_serializer import (
    serialize_compile_result,
    serialize_palette,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ── GET /filters ──────────────────────────────────────────────────────────────

@router.get("/filters")
async def get_filters() -> List[Dict[str, Any]]:
    return serialize_palette(list_filters())


# ── POST /filters/:filterType/nodes ───────────────────────────────────────────

class CreateFilterNodeBody(BaseModel):
    x: float = 0.0
    y: float = 0.0


@router.post("/filters/{filter_type}/nodes", status_code=201)
async def create_filter(filter_type: str, body: CreateFilterNodeBody) -> Dict[str, Any]:
    try:
        node = create_filter_node(filter_type, x=body.x, y=body.y)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return node_to_json(node)


# ── POST /compile ─────────────────────────────────────────────────────────────

# Raw JSON body: malformed documents are SchemaErrors (400), 422 is for compile errors.
@router.post("/compile")
async def compile_graph_document(
    document: Any = Body(...),
    annotate: bool = Query(False),
) -> JSONResponse:
    # json_to_graph reads a str as a file path
    if not isinstance(document, dict):
        raise HTTPException(status_code=400, detail="graph document must be a JSON object")
    try:
        graph = json_to_graph(document)
    except SchemaError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    result = compile_network(graph, annotate=annotate)
    if not result.ok:
        logger.info("[compile] %s rejected: %s", document.get("name") or "<unnamed>", result.error)
        return JSONResponse(status_code=422, content=serialize_compile_result(result))

    order = sort(graph.nodes, graph.connections)
    return JSONResponse(content=serialize_compile_result(result, order))
