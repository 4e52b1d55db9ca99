"""Function hoisting pass for the Coral SAST.

The checked tree has no function table: every call carries the definition
it resolves to, so the same function may be embedded at many call sites.
This pass walks everything reachable from the program body once and builds
the table the backend needs to place definitions ahead of the entry point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..sast import (
    LValue,
    SAsn,
    SBinop,
    SBlock,
    SCall,
    SCast,
    SClass,
    SExpr,
    SExprStmt,
    SField,
    SFor,
    SFuncDecl,
    SIf,
    SLListAccess,
    SLListSlice,
    SList,
    SListAccess,
    SListSlice,
    SMethod,
    SPrint,
    SProgram,
    SRange,
    SReturn,
    SStage,
    SStmt,
    SType,
    SUnop,
    SWhile,
)

logger = logging.getLogger(__name__)


def function_key(decl: SFuncDecl) -> str:
    """Stable identifier for a checked function: name plus signature.

    Semant specializes a function per call site, so two calls to `f` with
    differently typed arguments carry different definitions.
    """
    formals = ", ".join(str(b.typ) for b in decl.formals)
    return decl.name + "(" + formals + ") -> " + str(decl.typ)


@dataclass
class FunctionTable:
    """Functions and classes reachable from a program, in discovery order."""

    functions: dict[str, SFuncDecl] = field(default_factory=dict)
    classes: dict[str, SClass] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.functions) + len(self.classes)


class _Collector:
    def __init__(self) -> None:
        self.table = FunctionTable()

    def expr(self, e: SExpr) -> None:
        exp = e.exp
        if isinstance(exp, SCall):
            self.expr(exp.callee)
            for a in exp.args:
                self.expr(a)
            if exp.decl is not None:
                self.function(exp.decl)
        elif isinstance(exp, SBinop):
            self.expr(exp.left)
            self.expr(exp.right)
        elif isinstance(exp, SUnop):
            self.expr(exp.operand)
        elif isinstance(exp, SList):
            for el in exp.elems:
                self.expr(el)
        elif isinstance(exp, SCast):
            self.expr(exp.expr)
        elif isinstance(exp, SMethod):
            self.expr(exp.obj)
            for a in exp.args:
                self.expr(a)
        elif isinstance(exp, SField):
            self.expr(exp.obj)
        elif isinstance(exp, SListAccess):
            self.expr(exp.obj)
            self.expr(exp.index)
        elif isinstance(exp, SListSlice):
            self.expr(exp.obj)
            self.expr(exp.low)
            self.expr(exp.high)

    def lvalue(self, lv: LValue) -> None:
        if isinstance(lv, SLListAccess):
            self.expr(lv.obj)
            self.expr(lv.index)
        elif isinstance(lv, SLListSlice):
            self.expr(lv.obj)
            self.expr(lv.low)
            self.expr(lv.high)

    def stmt(self, s: SStmt) -> None:
        # SFunc is skipped: a definition is only reachable through a call
        if isinstance(s, SBlock):
            for child in s.stmts:
                self.stmt(child)
        elif isinstance(s, SExprStmt):
            self.expr(s.expr)
        elif isinstance(s, SIf):
            self.expr(s.cond)
            self.stmt(s.then_body)
            self.stmt(s.else_body)
        elif isinstance(s, SFor):
            self.expr(s.seq)
            self.stmt(s.body)
        elif isinstance(s, SRange):
            self.expr(s.bound)
            self.stmt(s.body)
        elif isinstance(s, SWhile):
            self.expr(s.cond)
            self.stmt(s.body)
        elif isinstance(s, SReturn):
            self.expr(s.value)
        elif isinstance(s, SAsn):
            for lv in s.targets:
                self.lvalue(lv)
            self.expr(s.value)
        elif isinstance(s, SStage):
            self.stmt(s.body)
        elif isinstance(s, (SPrint, SType)):
            self.expr(s.expr)
        elif isinstance(s, SClass):
            if s.name not in self.table.classes:
                logger.debug("discovered class %s", s.name)
                self.table.classes[s.name] = s
                self.stmt(s.body)

    def function(self, decl: SFuncDecl) -> None:
        # A redefinition with the same signature gets a numbered key
        base = function_key(decl)
        key = base
        n = 1
        while key in self.table.functions:
            seen = self.table.functions[key]
            if seen is decl or seen == decl:
                return
            n += 1
            key = base + " #" + str(n)
        logger.debug("discovered function %s", key)
        self.table.functions[key] = decl
        self.stmt(decl.body)


def collect_functions(program: SProgram) -> FunctionTable:
    """Collect every function reachable through a call, and every class.

    Each definition is visited once, so repeated call sites and recursive
    definitions terminate. Copies of one definition share an entry; a
    different body under the same signature gets its own.
    """
    collector = _Collector()
    for s in program.stmts:
        collector.stmt(s)
    return collector.table
