"""Serialization of SAST values to and from JSON-compatible dicts.

Nodes become dicts tagged with "_type" (the node class name) holding one
key per field. Types are written as their kind string ("int", "dyn").
When reading, "_type" may be left out where the field can only hold one
node class (SExpr, Bind, SFuncDecl).
"""

from __future__ import annotations

import json
from dataclasses import MISSING, fields, is_dataclass

from . import sast
from .errors import SerializeError
from .sast import SProgram, Typ

_NODE_TYPES: dict[str, type] = {
    name: cls
    for name, cls in vars(sast).items()
    if isinstance(cls, type) and is_dataclass(cls) and cls.__module__ == sast.__name__
}

# Fields that can only hold one class
_IMPLIED: frozenset[str] = frozenset({"SExpr", "Bind", "SFuncDecl"})

_TYPE_KINDS: frozenset[str] = frozenset(
    {"int", "float", "bool", "str", "dyn", "list", "object", "func", "null"}
)


def to_dict(obj: object) -> object:
    """Recursively convert a SAST value to a JSON-compatible structure."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Typ):
        return obj.kind
    if isinstance(obj, (list, tuple)):
        return [to_dict(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): to_dict(v) for k, v in obj.items()}
    if is_dataclass(obj):
        d: dict[str, object] = {"_type": type(obj).__name__}
        for f in fields(obj):
            d[f.name] = to_dict(getattr(obj, f.name))
        return d
    raise SerializeError("cannot serialize " + type(obj).__name__)


def _typ(value: object, path: str) -> Typ:
    if not isinstance(value, str) or value not in _TYPE_KINDS:
        raise SerializeError("unknown type " + repr(value), path)
    return Typ(value)


def _field_value(annotation: str, value: object, path: str) -> object:
    """Decode value according to a field's (string) annotation."""
    if value is None:
        return None
    annotation = annotation.replace(" | None", "")
    if annotation == "Typ":
        return _typ(value, path)
    if annotation == "dict[str, Typ]":
        if not isinstance(value, dict):
            raise SerializeError("expected object", path)
        return {str(k): _typ(v, path + "." + str(k)) for k, v in value.items()}
    if annotation.startswith("list[") and annotation.endswith("]"):
        if not isinstance(value, list):
            raise SerializeError("expected array", path)
        inner = annotation[5:-1]
        return [_field_value(inner, v, path + "[" + str(i) + "]") for i, v in enumerate(value)]
    if isinstance(value, dict):
        implied = annotation if annotation in _IMPLIED else None
        return _node(value, path, implied)
    if annotation in _NODE_TYPES:
        raise SerializeError("expected " + annotation + " object", path)
    return value


def _node(d: dict[str, object], path: str, implied: str | None) -> object:
    type_name = d.get("_type", implied)
    if not isinstance(type_name, str) or type_name not in _NODE_TYPES:
        raise SerializeError("unknown node type " + repr(type_name), path)
    cls = _NODE_TYPES[type_name]
    kwargs: dict[str, object] = {}
    for f in fields(cls):
        fpath = path + "." + f.name
        if f.name not in d:
            if f.default is not MISSING or f.default_factory is not MISSING:
                continue
            raise SerializeError("missing field '" + f.name + "' on " + type_name, path)
        kwargs[f.name] = _field_value(str(f.type), d[f.name], fpath)
    return cls(**kwargs)


def from_dict(d: object, path: str = "$") -> object:
    """Rebuild a SAST value from the output of to_dict."""
    if not isinstance(d, dict):
        raise SerializeError("expected object", path)
    return _node(d, path, None)


def program_from_dict(d: object) -> SProgram:
    result = from_dict(d)
    if not isinstance(result, SProgram):
        raise SerializeError("expected SProgram, got " + type(result).__name__, "$")
    return result


def to_json(obj: object) -> str:
    """Serialize a SAST value to pretty-printed JSON."""
    return json.dumps(to_dict(obj), indent=2)


def from_json(text: str | bytes) -> SProgram:
    """Parse a JSON-serialized SProgram from text or UTF-8 bytes."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializeError("invalid JSON: " + e.msg + " at line " + str(e.lineno)) from e
    except UnicodeDecodeError as e:
        raise SerializeError("invalid utf-8 in input") from e
    return program_from_dict(data)
