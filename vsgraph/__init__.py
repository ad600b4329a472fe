"""vsgraph — compiles VapourSynth node-editor graphs into .vpy scripts."""

from vsgraph.compiler import CompileError, CompileErrorKind, CompileResult, compile_graph, compile_network

__version__ = "1.0.0"

__all__ = ["CompileError", "CompileErrorKind", "CompileResult", "compile_graph", "compile_network"]
