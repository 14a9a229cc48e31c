"""mathsh AST - parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass, fields


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expressions. offset is where the node's first token starts."""

    offset: int


@dataclass
class IntLit(Expr):
    """Integer literal."""

    value: int


@dataclass
class FloatLit(Expr):
    """Float literal."""

    value: float


@dataclass
class BoolLit(Expr):
    """true or false."""

    value: bool


@dataclass
class VarDecl(Expr):
    """let name = init."""

    name: str
    init: Expr


@dataclass
class Var(Expr):
    """Variable reference."""

    name: str


@dataclass
class Print(Expr):
    """print operand."""

    operand: Expr


@dataclass
class BinaryOp(Expr):
    """left op right, op is one of + - * /."""

    op: str
    left: Expr
    right: Expr


@dataclass
class Negative(Expr):
    """-operand."""

    operand: Expr


@dataclass
class Equality(Expr):
    """left == right."""

    left: Expr
    right: Expr


@dataclass
class Conditional(Expr):
    """if cond then then_expr else else_expr."""

    cond: Expr
    then_expr: Expr
    else_expr: Expr


# ============================================================
# CONSTRUCTORS
# ============================================================
# Shorthands for building trees by hand, for callers and tests that skip the
# parser. The parser constructs nodes directly. Offsets default to 0.


def int_lit(value: int, offset: int = 0) -> IntLit:
    return IntLit(offset, value)


def float_lit(value: float, offset: int = 0) -> FloatLit:
    return FloatLit(offset, value)


def bool_lit(value: bool, offset: int = 0) -> BoolLit:
    return BoolLit(offset, value)


def add(left: Expr, right: Expr) -> BinaryOp:
    return BinaryOp(left.offset, "+", left, right)


def subtract(left: Expr, right: Expr) -> BinaryOp:
    return BinaryOp(left.offset, "-", left, right)


def multiply(left: Expr, right: Expr) -> BinaryOp:
    return BinaryOp(left.offset, "*", left, right)


def divide(left: Expr, right: Expr) -> BinaryOp:
    return BinaryOp(left.offset, "/", left, right)


def equality(left: Expr, right: Expr) -> Equality:
    return Equality(left.offset, left, right)


def negative(operand: Expr, offset: int = 0) -> Negative:
    return Negative(offset, operand)


def conditional(
    cond: Expr, then_expr: Expr, else_expr: Expr, offset: int = 0
) -> Conditional:
    return Conditional(offset, cond, then_expr, else_expr)


# ============================================================
# SERIALIZATION
# ============================================================


def to_dict(expr: Expr) -> dict[str, object]:
    """Convert an expression tree to JSON-compatible nested dicts."""
    result: dict[str, object] = {"kind": type(expr).__name__}
    for f in fields(expr):
        value = getattr(expr, f.name)
        if isinstance(value, Expr):
            result[f.name] = to_dict(value)
        else:
            result[f.name] = value
    return result
