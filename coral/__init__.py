"""Coral back end: render a checked Coral tree as C++ source."""

from .backend.cpp import CppBackend, EmitOptions, emit_cpp
from .errors import EmitError, SerializeError, UnsupportedConstruct

__all__ = [
    "CppBackend",
    "EmitError",
    "EmitOptions",
    "SerializeError",
    "UnsupportedConstruct",
    "emit_cpp",
]
