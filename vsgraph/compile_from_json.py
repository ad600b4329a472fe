"""
compile_from_json.py — CLI for the vsgraph compiler
====================================================
Compiles a saved node graph (.vsgraph JSON) into a VapourSynth script (.vpy).

Usage
-----
    python -m vsgraph.compile_from_json <graph.vsgraph> [options]

Options
-------
    --out       <dir>   Output directory (default: current directory)
    --print             Print the generated script to stdout instead of writing a file
    --annotate          Add a comment line naming the node behind each statement

Examples
--------
    # Compile next to the current directory:
    python -m vsgraph.compile_from_json graphs/denoise.vsgraph

    # Write into a scripts/ folder:
    python -m vsgraph.compile_from_json graphs/denoise.vsgraph --out scripts/

    # Inspect the script without writing a file:
    python -m vsgraph.compile_from_json graphs/denoise.vsgraph --print --annotate

Exit status is 0 on success and 1 on a schema or compile error.
"""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from pathlib import Path

from vsgraph.compiler import compile_network
from vsgraph.compiler.deserialiser import json_to_graph
from vsgraph.compiler.schema import SchemaError, validate_file

logger = logging.getLogger("vsgraph.compile_from_json")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="compile_from_json",
        description="Compile a vsgraph node graph to a VapourSynth script.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "graph_json",
        metavar="graph.vsgraph",
        help="Path to the graph document to compile.",
    )
    p.add_argument(
        "--out",
        metavar="DIR",
        default=".",
        help="Output directory for the compiled .vpy file (default: current directory).",
    )
    p.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the generated script to stdout instead of writing a file.",
    )
    p.add_argument(
        "--annotate",
        action="store_true",
        help="Prefix every statement with a comment naming its node.",
    )
    return p


def _graph_name_to_filename(graph_name: str) -> str:
    """Turn 'Denoise and Crop' → 'denoise_and_crop.vpy'."""
    safe = re.sub(r"[^a-z0-9_]+", "_", graph_name.lower()).strip("_")
    return f"{safe or 'graph'}.vpy"


def main(argv=None) -> int:
    logging.basicConfig(
        level=os.getenv("VSGRAPH_LOG_LEVEL", "INFO").upper(),
        format="[%(name)s] %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    json_path = Path(args.graph_json)
    if not json_path.exists():
        print(f"[error] File not found: {json_path}", file=sys.stderr)
        return 1

    # ── Validate + deserialise ───────────────────────────────────────────────
    try:
        data = validate_file(json_path)
        graph = json_to_graph(data)
    except SchemaError as exc:
        print(f"[error] Schema validation failed: {exc}", file=sys.stderr)
        return 1

    graph_name = data.get("name") or json_path.stem
    logger.info("graph       : %s", graph_name)
    logger.info("nodes       : %d", len(graph.nodes))
    logger.info("connections : %d", len(graph.connections))

    # ── Compile ──────────────────────────────────────────────────────────────
    result = compile_network(graph, annotate=args.annotate)
    if not result.ok:
        print(f"[error] Compile failed: {result.error}", file=sys.stderr)
        return 1

    # ── Output ───────────────────────────────────────────────────────────────
    if args.print_only:
        sys.stdout.write(result.script)
        return 0

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / _graph_name_to_filename(graph_name)
    out_path.write_text(result.script, encoding="utf-8")

    logger.info("wrote       : %s", out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
