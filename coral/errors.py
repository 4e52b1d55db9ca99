"""Errors raised while emitting or loading a checked tree."""

from __future__ import annotations


class EmitError(Exception):
    """Rendering aborted; no partial output is produced."""

    def __init__(self, msg: str):
        self.msg: str = msg
        super().__init__(msg)


class UnsupportedConstruct(EmitError):
    """A reserved tree variant reached the emitter in strict mode."""

    def __init__(self, node: str):
        self.node: str = node
        super().__init__("unsupported construct: " + node)


class SerializeError(Exception):
    def __init__(self, msg: str, path: str = ""):
        self.msg: str = msg
        self.path: str = path
        if path:
            super().__init__(msg + " at " + path)
        else:
            super().__init__(msg)
