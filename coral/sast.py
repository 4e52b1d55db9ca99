"""Coral SAST - semantically checked abstract syntax tree.

This module defines the checked program representation handed over by
semantic analysis. Each node's docstring documents its semantics.

Architecture:
    Source -> Parser -> Semant (inference, casts) -> [SAST] -> Backend -> C++

The tree is produced once and is never mutated downstream. Backends read it
and produce text; they perform no type inference of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


# ============================================================
# TYPES
#
# Types are frozen (immutable, hashable). Every SExpr carries the static
# type semant inferred; types found in bindings may still need a runtime
# check, which is why explicit SCast nodes exist.
# ============================================================


@dataclass(frozen=True)
class Typ:
    """Coral source-level type.

    | Kind   | Meaning                          | C++          |
    |--------|----------------------------------|--------------|
    | int    | machine integer                  | int          |
    | float  | double precision float           | double       |
    | bool   | boolean                          | bool         |
    | str    | string                           | std::string  |
    | dyn    | dynamically typed (boxed) value  | dyn          |
    | list   | list of boxed values             | list         |
    | object | class instance (reserved)        | object       |
    | func   | function value                   | func         |
    | null   | no value                         | void         |
    """

    kind: Literal["int", "float", "bool", "str", "dyn", "list", "object", "func", "null"]

    def __str__(self) -> str:
        return self.kind


INT = Typ("int")
FLOAT = Typ("float")
BOOL = Typ("bool")
STRING = Typ("str")
DYN = Typ("dyn")
LIST = Typ("list")
OBJECT = Typ("object")
FUNC = Typ("func")
NULL = Typ("null")


@dataclass(frozen=True)
class Bind:
    """A name bound to a type: formals, locals, globals, loop variables.

    Two bindings are equal only when both name and type match.
    """

    name: str
    typ: Typ


# ============================================================
# LITERALS
# ============================================================


@dataclass(frozen=True)
class Lit:
    """Base for literal values. Abstract."""


@dataclass(frozen=True)
class IntLit(Lit):
    value: int


@dataclass(frozen=True)
class FloatLit(Lit):
    value: float


@dataclass(frozen=True)
class BoolLit(Lit):
    value: bool


@dataclass(frozen=True)
class StringLit(Lit):
    value: str


# Operator spellings as the checker produces them
BinOp = Literal["+", "-", "*", "/", "**", "==", "!=", "<", "<=", ">", ">=", "and", "or"]
UnOp = Literal["-", "not"]


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class SExp:
    """Base for all expression nodes. Abstract."""


@dataclass
class SExpr:
    """An expression node paired with its inferred static type."""

    exp: SExp
    typ: Typ


@dataclass
class SBinop(SExp):
    left: SExpr
    op: BinOp
    right: SExpr


@dataclass
class SLit(SExp):
    lit: Lit


@dataclass
class SVar(SExp):
    name: str


@dataclass
class SUnop(SExp):
    op: UnOp
    operand: SExpr


@dataclass
class SCall(SExp):
    """Function call.

    callee is an SVar or a nested SCall. decl is the checked definition of
    the function being called, specialized for this call site; it is None
    for a call into a function that is still being checked (recursion) or
    for a weakly typed function whose body is only known at runtime.
    """

    callee: SExpr
    args: list[SExpr]
    decl: SFuncDecl | None = None


@dataclass
class SMethod(SExp):
    """obj.name(args). Reserved, semant never produces it."""

    obj: SExpr
    name: str
    args: list[SExpr]


@dataclass
class SField(SExp):
    """obj.name. Reserved, semant never produces it."""

    obj: SExpr
    name: str


@dataclass
class SList(SExp):
    """List literal. elem_typ is the inferred element type."""

    elems: list[SExpr]
    elem_typ: Typ


@dataclass
class SNoexpr(SExp):
    """Empty expression for slots that need no value (bare return)."""


@dataclass
class SListAccess(SExp):
    """obj[index]. Reserved."""

    obj: SExpr
    index: SExpr


@dataclass
class SListSlice(SExp):
    """obj[low:high]. Reserved."""

    obj: SExpr
    low: SExpr
    high: SExpr


@dataclass
class SCast(SExp):
    """Gradual typing coercion of expr from from_typ to to_typ.

    Either a narrowing runtime check (dyn -> int) or a widening box
    (int -> dyn).
    """

    from_typ: Typ
    to_typ: Typ
    expr: SExpr


# ============================================================
# LVALUES
# ============================================================


@dataclass
class LValue:
    """Base for assignment targets. Abstract."""


@dataclass
class SLVar(LValue):
    bind: Bind


@dataclass
class SLListAccess(LValue):
    """Reserved."""

    obj: SExpr
    index: SExpr


@dataclass
class SLListSlice(LValue):
    """Reserved."""

    obj: SExpr
    low: SExpr
    high: SExpr


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class SStmt:
    """Base for all statements. Abstract."""


@dataclass
class SFuncDecl:
    """Checked function definition.

    Invariants:
    - every formal also appears in locals (same name and type)
    - body is an SBlock
    """

    typ: Typ
    name: str
    formals: list[Bind]
    locals: list[Bind]
    body: SStmt


@dataclass
class SFunc(SStmt):
    """Function definition at its point of declaration.

    Renders nothing in place. Definitions reach the output through the
    calls that reference them.
    """

    decl: SFuncDecl


@dataclass
class SBlock(SStmt):
    stmts: list[SStmt] = field(default_factory=list)


@dataclass
class SExprStmt(SStmt):
    expr: SExpr


@dataclass
class SIf(SStmt):
    """Conditional. else_body is SNop when the source had no else."""

    cond: SExpr
    then_body: SStmt
    else_body: SStmt


@dataclass
class SFor(SStmt):
    """for var in seq: body."""

    var: Bind
    seq: SExpr
    body: SStmt


@dataclass
class SRange(SStmt):
    """for var in range(bound): counts 0 .. bound-1."""

    var: Bind
    bound: SExpr
    body: SStmt


@dataclass
class SWhile(SStmt):
    cond: SExpr
    body: SStmt


@dataclass
class SReturn(SStmt):
    """Return; value.exp is SNoexpr for a bare return."""

    value: SExpr


@dataclass
class SClass(SStmt):
    """Class definition. Reserved, semant never produces it."""

    name: str
    body: SStmt


@dataclass
class SAsn(SStmt):
    """Assignment. More than one target is a parallel assignment."""

    targets: list[LValue]
    value: SExpr


@dataclass
class STransform(SStmt):
    """Box or unbox variable name in place, from from_typ to to_typ.

    Inserted where branches with divergent static types merge or where a
    call into a weakly typed function needs coercion. Has no textual form.
    """

    name: str
    from_typ: Typ
    to_typ: Typ


@dataclass
class SStage(SStmt):
    """Body bracketed by entry and exit statements. Only body has shape."""

    entry: SStmt
    body: SStmt
    exit: SStmt


@dataclass
class SPrint(SStmt):
    expr: SExpr


@dataclass
class SType(SStmt):
    """type(expr) introspection."""

    expr: SExpr


@dataclass
class SContinue(SStmt):
    pass


@dataclass
class SBreak(SStmt):
    pass


@dataclass
class SNop(SStmt):
    pass


# ============================================================
# PROGRAM
# ============================================================


@dataclass
class SProgram:
    """Top-level statements plus global names and their inferred types.

    globals preserves insertion order; declarations are emitted in it.
    """

    stmts: list[SStmt] = field(default_factory=list)
    globals: dict[str, Typ] = field(default_factory=dict)


def noexpr() -> SExpr:
    """Factory for the empty expression."""
    return SExpr(SNoexpr(), NULL)
