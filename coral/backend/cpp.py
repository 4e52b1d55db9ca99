"""C++ backend: SAST → C++17 source.

Layout of the emitted translation unit:
- optional prelude (#include lines, runtime header)
- global variable declarations, in the order semant recorded them
- every function (and, in lenient mode, class) reachable through a call,
  deduplicated and sorted by rendered text
- the entry point holding the top-level statements

Gradual typing:
- SCast renders as the runtime's cast<From, To>(expr) template
- STransform has no textual form; the runtime boxes/unboxes in place

Operands are rendered as-is. The checker shapes the tree so that no
parenthesization is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import EmitError, UnsupportedConstruct
from ..middleend.hoisting import collect_functions
from ..sast import (
    Bind,
    BoolLit,
    FloatLit,
    IntLit,
    Lit,
    LValue,
    SAsn,
    SBinop,
    SBlock,
    SBreak,
    SCall,
    SCast,
    SClass,
    SContinue,
    SExpr,
    SExprStmt,
    SField,
    SFor,
    SFunc,
    SFuncDecl,
    SIf,
    SLit,
    SLListAccess,
    SLListSlice,
    SList,
    SListAccess,
    SListSlice,
    SLVar,
    SMethod,
    SNoexpr,
    SNop,
    SPrint,
    SProgram,
    SRange,
    SReturn,
    SStage,
    SStmt,
    STransform,
    SType,
    SUnop,
    SVar,
    SWhile,
    StringLit,
    Typ,
)
from .registry import FunctionRegistry

logger = logging.getLogger(__name__)


PRELUDE: list[str] = [
    "#include <cmath>",
    "#include <iostream>",
    "#include <string>",
    "#include <typeinfo>",
    '#include "coral.h"',
]

_CPP_TYPES: dict[str, str] = {
    "int": "int",
    "float": "double",
    "bool": "bool",
    "str": "std::string",
    "dyn": "dyn",
    "list": "list",
    "object": "object",
    "func": "func",
    "null": "void",
}


def escape_string_cpp(value: str) -> str:
    """Escape a string for use in a C++ string literal (without quotes).

    NUL and DEL use fixed three-digit octal escapes.
    """
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\x00", "\\000")
        .replace("\x7f", "\\177")
    )


@dataclass
class EmitOptions:
    """Emitter configuration.

    strict rejects the reserved tree variants (methods, fields, list
    access and slicing, classes) with UnsupportedConstruct. With strict
    off they render structurally.
    """

    strict: bool = True
    prelude: bool = False
    indent: str = "  "
    entry: str = "main"


class CppBackend:
    """Emit C++ code from a checked Coral program."""

    def __init__(self, options: EmitOptions | None = None) -> None:
        self.options = options if options is not None else EmitOptions()
        self.registry = FunctionRegistry()

    # ── Program ─────────────────────────────────────────────

    def render_program(self, program: SProgram) -> str:
        """Render a whole program. Each call starts from an empty registry."""
        self.registry = FunctionRegistry()
        table = collect_functions(program)
        for decl in table.functions.values():
            self.registry.add(self._function(decl))
        for cls in table.classes.values():
            self.registry.add(self.render_class(cls))
        sections: list[str] = []
        if self.options.prelude:
            sections.append("\n".join(PRELUDE))
        if program.globals:
            sections.append(
                "\n".join(
                    self._bind(Bind(name, typ)) + ";" for name, typ in program.globals.items()
                )
            )
        sections.extend(self.registry.normalized())
        sections.append(self._entry(program.stmts))
        return "\n\n".join(sections)

    def _entry(self, stmts: list[SStmt]) -> str:
        lines = ["int " + self.options.entry + "(int argc, char ** argv) {"]
        lines.extend(self._block_lines(stmts, 1))
        lines.append("}")
        return "\n".join(lines)

    # ── Definitions ─────────────────────────────────────────

    def render_function(self, stmt: SStmt) -> str:
        if not isinstance(stmt, SFunc):
            raise EmitError("expected function definition, got " + type(stmt).__name__)
        return self._function(stmt.decl)

    def _function(self, decl: SFuncDecl) -> str:
        logger.debug("locals of %s: %s", decl.name, ", ".join(b.name for b in decl.locals))
        formals = ", ".join(self._bind(b) for b in decl.formals)
        lines = [self._type(decl.typ) + " " + decl.name + "(" + formals + ") {"]
        # Formals are already declared as parameters
        for b in decl.locals:
            if b not in decl.formals:
                lines.append(self._indent(1) + self._bind(b) + ";")
        lines.extend(self._block_lines([decl.body], 1))
        lines.append("}")
        return "\n".join(lines)

    def render_class(self, stmt: SStmt) -> str:
        if not isinstance(stmt, SClass):
            raise EmitError("expected class definition, got " + type(stmt).__name__)
        self._reserved("SClass")
        lines = ["class " + stmt.name + " {", "public:"]
        lines.extend(self._block_lines([stmt.body], 1))
        lines.append("};")
        return "\n".join(lines)

    # ── Statements ──────────────────────────────────────────

    def _indent(self, depth: int) -> str:
        return self.options.indent * depth

    def _block_lines(self, stmts: list[SStmt], depth: int) -> list[str]:
        """Render statements as the lines of a block at depth.

        Nested blocks and stage bodies are flattened in. Statements that
        render empty are dropped; every other one gets a terminator.
        """
        lines: list[str] = []
        for stmt in stmts:
            if isinstance(stmt, SBlock):
                lines.extend(self._block_lines(stmt.stmts, depth))
                continue
            if isinstance(stmt, SStage):
                lines.extend(self._block_lines([stmt.body], depth))
                continue
            text = self.render_stmt(stmt, depth)
            if text == "":
                continue
            lines.append(self._indent(depth) + text + ";")
        return lines

    def _braced(self, head: str, body: SStmt, depth: int) -> list[str]:
        lines = [head + " {"]
        lines.extend(self._block_lines([body], depth + 1))
        return lines

    def render_stmt(self, stmt: SStmt, depth: int = 0) -> str:
        """Render one statement sitting in a block at depth.

        The first line carries no indentation; continuation lines are
        indented absolutely. A block renders as its indented lines.
        """
        match stmt:
            case SBlock(stmts=stmts):
                return "\n".join(self._block_lines(stmts, depth))
            case SStage(body=body):
                return self.render_stmt(body, depth)
            case SFunc() | STransform() | SNop():
                return ""
            case SExprStmt(expr=expr):
                return self.render_expr(expr)
            case SIf(cond=cond, then_body=then_body, else_body=else_body):
                lines = self._braced("if (" + self.render_expr(cond) + ")", then_body, depth)
                lines.extend(self._braced(self._indent(depth) + "} else", else_body, depth))
                lines.append(self._indent(depth) + "}")
                return "\n".join(lines)
            case SFor(var=var, seq=seq, body=body):
                head = "for (auto " + var.name + " : " + self.render_expr(seq) + ")"
                lines = self._braced(head, body, depth)
                lines.append(self._indent(depth) + "}")
                return "\n".join(lines)
            case SRange(var=var, bound=bound, body=body):
                # Induction variable is always an int counter
                n = var.name
                limit = self.render_expr(bound)
                head = "for (int " + n + " = 0; " + n + " < " + limit + "; " + n + "++)"
                lines = self._braced(head, body, depth)
                lines.append(self._indent(depth) + "}")
                return "\n".join(lines)
            case SWhile(cond=cond, body=body):
                lines = self._braced("while (" + self.render_expr(cond) + ")", body, depth)
                lines.append(self._indent(depth) + "}")
                return "\n".join(lines)
            case SReturn(value=value):
                if isinstance(value.exp, SNoexpr):
                    return "return"
                return "return " + self.render_expr(value)
            case SClass():
                # Registered through the hoisting pass
                self._reserved("SClass")
                return ""
            case SAsn(targets=targets, value=value):
                lvalues = ", ".join(self._lvalue(lv, value.typ) for lv in targets)
                return lvalues + " = " + self.render_expr(value)
            case SPrint(expr=expr):
                return "std::cout << " + self.render_expr(expr) + " << std::endl"
            case SType(expr=expr):
                return "std::cout << typeid(" + self.render_expr(expr) + ").name() << std::endl"
            case SBreak():
                return "break"
            case SContinue():
                return "continue"
            case _:
                raise EmitError("unknown statement " + type(stmt).__name__)

    def _lvalue(self, lv: LValue, typ: Typ) -> str:
        match lv:
            case SLVar(bind=bind):
                return bind.name
            case SLListAccess(obj=obj, index=index):
                self._reserved("SLListAccess")
                return self.render_expr(obj) + "[" + self.render_expr(index) + "]"
            case SLListSlice(obj=obj, low=low, high=high):
                self._reserved("SLListSlice")
                return (
                    self.render_expr(obj)
                    + "["
                    + self.render_expr(low)
                    + ":"
                    + self.render_expr(high)
                    + "]"
                )
            case _:
                raise EmitError("unknown lvalue " + type(lv).__name__)

    # ── Expressions ─────────────────────────────────────────

    def render_expr(self, expr: SExpr) -> str:
        match expr.exp:
            case SBinop(left=left, op=op, right=right):
                if op == "**":
                    base = self.render_expr(left)
                    return "std::pow(" + base + ", " + self.render_expr(right) + ")"
                return self.render_expr(left) + " " + _binary_op(op) + " " + self.render_expr(right)
            case SLit(lit=lit):
                return _literal(lit)
            case SVar(name=name):
                return name
            case SUnop(op=op, operand=operand):
                return _unary_op(op) + self.render_expr(operand)
            case SCall(callee=callee, args=args):
                return self.render_expr(callee) + "(" + self._args(args) + ")"
            case SMethod(obj=obj, name=name, args=args):
                self._reserved("SMethod")
                return self.render_expr(obj) + "." + name + "(" + self._args(args) + ")"
            case SField(obj=obj, name=name):
                self._reserved("SField")
                return self.render_expr(obj) + "." + name
            case SList(elems=elems):
                return "{" + self._args(elems) + "}"
            case SNoexpr():
                return ""
            case SListAccess(obj=obj, index=index):
                self._reserved("SListAccess")
                return self.render_expr(obj) + "[" + self.render_expr(index) + "]"
            case SListSlice(obj=obj, low=low, high=high):
                self._reserved("SListSlice")
                return (
                    self.render_expr(obj)
                    + "["
                    + self.render_expr(low)
                    + ":"
                    + self.render_expr(high)
                    + "]"
                )
            case SCast(from_typ=from_typ, to_typ=to_typ, expr=inner):
                return (
                    "cast<"
                    + self._type(from_typ)
                    + ", "
                    + self._type(to_typ)
                    + ">("
                    + self.render_expr(inner)
                    + ")"
                )
            case _:
                raise EmitError("unknown expression " + type(expr.exp).__name__)

    def _args(self, args: list[SExpr]) -> str:
        return ", ".join(self.render_expr(a) for a in args)

    # ── Types ───────────────────────────────────────────────

    def _type(self, typ: Typ) -> str:
        if typ.kind not in _CPP_TYPES:
            raise EmitError("unknown type " + str(typ))
        return _CPP_TYPES[typ.kind]

    def _bind(self, b: Bind) -> str:
        return self._type(b.typ) + " " + b.name

    def _reserved(self, node: str) -> None:
        if self.options.strict:
            raise UnsupportedConstruct(node)


def _literal(lit: Lit) -> str:
    match lit:
        case BoolLit(value=value):
            return "true" if value else "false"
        case IntLit(value=value):
            return str(value)
        case FloatLit(value=value):
            return repr(value)
        case StringLit(value=value):
            return '"' + escape_string_cpp(value) + '"'
        case _:
            raise EmitError("unknown literal " + type(lit).__name__)


def _binary_op(op: str) -> str:
    match op:
        case "and":
            return "&&"
        case "or":
            return "||"
        case _:
            return op


def _unary_op(op: str) -> str:
    match op:
        case "not":
            return "!"
        case _:
            return op


def emit_cpp(program: SProgram, options: EmitOptions | None = None) -> str:
    """Render a checked program as C++ source text."""
    return CppBackend(options).render_program(program)
