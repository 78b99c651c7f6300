"""
Tools Package - Compilation, Registry and Dispatch

This package turns API descriptors into tools, keeps the registry of
compiled tools, and dispatches invocation requests against it.
"""

from src.tools.compiler import CompilerAdapters, compile_descriptor, derive_tool_name
from src.tools.dispatcher import RequestDispatcher, find_missing_parameter
from src.tools.normalizer import (
    VISUALIZATION_MARKER,
    is_visualization_complete,
    normalize,
)
from src.tools.registry import ToolRegistry

__all__ = [
    "CompilerAdapters",
    "compile_descriptor",
    "derive_tool_name",
    "RequestDispatcher",
    "find_missing_parameter",
    "VISUALIZATION_MARKER",
    "is_visualization_complete",
    "normalize",
    "ToolRegistry",
]
