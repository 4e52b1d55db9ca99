"""SAST analysis passes (read-only, no transformations)."""

from .hoisting import FunctionTable, collect_functions, function_key

__all__ = ["FunctionTable", "collect_functions", "function_key"]
