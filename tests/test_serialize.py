"""Tests for SAST (de)serialization."""

import json

import pytest

from conftest import binop, call, lit, twice_fn, var

from coral.errors import SerializeError
from coral.sast import (
    DYN,
    INT,
    Bind,
    SAsn,
    SCast,
    SExpr,
    SFunc,
    SIf,
    SLVar,
    SNop,
    SPrint,
    SProgram,
    SVar,
    STransform,
    Typ,
)
from coral.serialize import from_dict, from_json, program_from_dict, to_dict, to_json


def sample_program() -> SProgram:
    decl = twice_fn()
    return SProgram(
        [
            SFunc(decl),
            SAsn([SLVar(Bind("x", INT))], binop(lit(1), "+", lit(2))),
            SIf(
                binop(var("x"), ">", lit(0)),
                SPrint(call(decl, "twice", [var("x")])),
                SNop(),
            ),
            STransform("y", INT, DYN),
            SPrint(SExpr(SCast(DYN, INT, var("y", DYN)), INT)),
        ],
        {"x": INT, "y": DYN},
    )


def test_to_dict_tags_nodes_and_writes_types_as_strings():
    d = to_dict(SExpr(SVar("x"), INT))
    assert d == {"_type": "SExpr", "exp": {"_type": "SVar", "name": "x"}, "typ": "int"}


def test_program_survives_json():
    program = sample_program()
    assert from_json(to_json(program)) == program


def test_implied_node_types():
    data = {
        "_type": "SProgram",
        "stmts": [{"_type": "SPrint", "expr": {"exp": {"_type": "SVar", "name": "x"}, "typ": "int"}}],
        "globals": {"x": "int"},
    }
    program = program_from_dict(data)
    assert program.stmts == [SPrint(SExpr(SVar("x"), INT))]
    assert program.globals == {"x": Typ("int")}


def test_call_without_decl_defaults_to_none():
    data = {
        "_type": "SCall",
        "callee": {"exp": {"_type": "SVar", "name": "f"}, "typ": "func"},
        "args": [],
    }
    assert from_dict(data).decl is None


def test_globals_keep_order():
    text = json.dumps({"_type": "SProgram", "stmts": [], "globals": {"b": "int", "a": "str"}})
    assert list(from_json(text).globals) == ["b", "a"]


def test_unknown_node_type():
    with pytest.raises(SerializeError) as exc:
        from_dict({"_type": "SGoto"})
    assert "SGoto" in str(exc.value)


def test_unknown_type_kind_reports_path():
    data = {"_type": "SProgram", "stmts": [], "globals": {"x": "integer"}}
    with pytest.raises(SerializeError) as exc:
        program_from_dict(data)
    assert exc.value.path == "$.globals.x"


def test_missing_field():
    with pytest.raises(SerializeError) as exc:
        from_dict({"_type": "SWhile", "body": {"_type": "SNop"}})
    assert "cond" in exc.value.msg


def test_top_level_must_be_program():
    with pytest.raises(SerializeError):
        program_from_dict({"_type": "SNop"})


def test_invalid_json():
    with pytest.raises(SerializeError):
        from_json("{not json")


def test_scalar_where_node_expected_reports_path():
    data = {"_type": "SProgram", "globals": {}, "stmts": [{"_type": "SPrint", "expr": "x"}]}
    with pytest.raises(SerializeError) as exc:
        program_from_dict(data)
    assert exc.value.path == "$.stmts[0].expr"
    assert "expected SExpr object" in exc.value.msg


def test_from_json_accepts_bytes():
    program = SProgram([SPrint(lit(1))], {})
    assert from_json(to_json(program).encode("utf-8")) == program
    with pytest.raises(SerializeError):
        from_json(b'{"_type": "\xff"}')
