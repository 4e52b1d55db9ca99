"""Pytest configuration and SAST builders for the coral test suite."""

import sys
from pathlib import Path

# Add project root to path for coral imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from coral.sast import (  # noqa: E402
    BOOL,
    FLOAT,
    FUNC,
    INT,
    STRING,
    Bind,
    BoolLit,
    FloatLit,
    IntLit,
    SBinop,
    SBlock,
    SCall,
    SExpr,
    SFuncDecl,
    SLit,
    SReturn,
    SStmt,
    StringLit,
    SVar,
    Typ,
)


def var(name: str, typ: Typ = INT) -> SExpr:
    return SExpr(SVar(name), typ)


def lit(value: object) -> SExpr:
    if isinstance(value, bool):
        return SExpr(SLit(BoolLit(value)), BOOL)
    if isinstance(value, int):
        return SExpr(SLit(IntLit(value)), INT)
    if isinstance(value, float):
        return SExpr(SLit(FloatLit(value)), FLOAT)
    return SExpr(SLit(StringLit(str(value))), STRING)


def binop(left: SExpr, op: str, right: SExpr, typ: Typ | None = None) -> SExpr:
    return SExpr(SBinop(left, op, right), typ if typ is not None else left.typ)


def call(decl: SFuncDecl | None, name: str, args: list[SExpr], typ: Typ = INT) -> SExpr:
    return SExpr(SCall(var(name, FUNC), args, decl), typ)


def func(
    name: str,
    formals: list[Bind],
    body: list[SStmt],
    typ: Typ = INT,
    extra_locals: list[Bind] | None = None,
) -> SFuncDecl:
    """Checked function whose locals are its formals plus extra_locals."""
    locals_ = list(formals) + list(extra_locals or [])
    return SFuncDecl(typ, name, list(formals), locals_, SBlock(list(body)))


def twice_fn() -> SFuncDecl:
    """int twice(int n) { return n * 2; }"""
    n = Bind("n", INT)
    return func("twice", [n], [SReturn(binop(var("n"), "*", lit(2)))])
