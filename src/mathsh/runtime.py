"""mathsh runtime - values, the variable environment, and evaluation.

Evaluation is a direct structural recursion over the tree. Operands are
evaluated left to right, so bindings and printed output happen in source
order.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import sys
from typing import TextIO

from .ast import (
    BinaryOp,
    BoolLit,
    Conditional,
    Equality,
    Expr,
    FloatLit,
    IntLit,
    Negative,
    Print,
    Var,
    VarDecl,
)
from .diagnostics import MathshError

logger = logging.getLogger(__name__)

EQUALITY_EPSILON = 1e-6


# ============================================================
# Diagnostics
# ============================================================


class EvalFault(MathshError):
    """Evaluation fault. Distinct from tokenize and parse errors."""


class UnboundVariableError(EvalFault):
    """Reference to a variable that was never declared."""

    def __init__(self, name: str, offset: int | None = None):
        super().__init__("unbound variable '" + name + "'", offset)
        self.name = name


class DivisionByZeroError(EvalFault):
    """Integer division by zero."""

    def __init__(self, offset: int | None = None):
        super().__init__("integer division by zero", offset)


# ============================================================
# Values
# ============================================================


class Value:
    """A runtime value: VInt, VFloat or VBool."""

    def as_float(self) -> float:
        raise NotImplementedError

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class VInt(Value):
    value: int

    def as_float(self) -> float:
        return float(self.value)

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VFloat(Value):
    value: float

    def as_float(self) -> float:
        return self.value

    def to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VBool(Value):
    value: bool

    def as_float(self) -> float:
        return 1.0 if self.value else 0.0

    def to_string(self) -> str:
        return "true" if self.value else "false"


def _wrap_i64(n: int) -> int:
    """Reduce n to the signed 64-bit range with two's-complement wraparound."""
    return ((n + 2**63) % 2**64) - 2**63


def _int_div_trunc(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


# ============================================================
# Environment
# ============================================================


class Environment:
    """Flat variable bindings shared by every top-level expression of a session."""

    def __init__(self) -> None:
        self.vars: dict[str, Value] = {}

    def bind(self, name: str, value: Value) -> None:
        self.vars[name] = value

    def lookup(self, name: str) -> Value | None:
        return self.vars.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __len__(self) -> int:
        return len(self.vars)


# ============================================================
# Evaluation
# ============================================================


def evaluate(expr: Expr, env: Environment, out: TextIO | None = None) -> Value:
    """Evaluate expr against env. print output goes to out (default stdout)."""
    if isinstance(expr, IntLit):
        return VInt(expr.value)
    if isinstance(expr, FloatLit):
        return VFloat(expr.value)
    if isinstance(expr, BoolLit):
        return VBool(expr.value)

    if isinstance(expr, VarDecl):
        value = evaluate(expr.init, env, out)
        env.bind(expr.name, value)
        logger.debug("bind %s = %s", expr.name, value.to_string())
        return value

    if isinstance(expr, Var):
        bound = env.lookup(expr.name)
        if bound is None:
            raise UnboundVariableError(expr.name, expr.offset)
        return bound

    if isinstance(expr, Print):
        value = evaluate(expr.operand, env, out)
        sink = out if out is not None else sys.stdout
        print(value.to_string(), file=sink, flush=True)
        return value

    if isinstance(expr, BinaryOp):
        left = evaluate(expr.left, env, out)
        right = evaluate(expr.right, env, out)
        return _eval_binary(expr.op, left, right, expr.offset)

    if isinstance(expr, Negative):
        operand = evaluate(expr.operand, env, out)
        if isinstance(operand, VInt):
            return VInt(_wrap_i64(-operand.value))
        if isinstance(operand, VFloat):
            return VFloat(-operand.value)
        if isinstance(operand, VBool):
            return VBool(not operand.value)
        raise AssertionError(operand)

    if isinstance(expr, Equality):
        left = evaluate(expr.left, env, out)
        right = evaluate(expr.right, env, out)
        return VBool(abs(left.as_float() - right.as_float()) < EQUALITY_EPSILON)

    if isinstance(expr, Conditional):
        cond = evaluate(expr.cond, env, out)
        # Anything but true, including non-zero numbers, takes the else branch.
        if isinstance(cond, VBool) and cond.value:
            return evaluate(expr.then_expr, env, out)
        return evaluate(expr.else_expr, env, out)

    raise AssertionError(expr)


def _eval_binary(op: str, left: Value, right: Value, offset: int) -> Value:
    if isinstance(left, VInt) and isinstance(right, VInt):
        a = left.value
        b = right.value
        if op == "+":
            return VInt(_wrap_i64(a + b))
        if op == "-":
            return VInt(_wrap_i64(a - b))
        if op == "*":
            return VInt(_wrap_i64(a * b))
        if op == "/":
            try:
                q = _int_div_trunc(a, b)
            except ZeroDivisionError:
                raise DivisionByZeroError(offset) from None
            return VInt(_wrap_i64(q))
        raise AssertionError(op)

    x = left.as_float()
    y = right.as_float()
    if op == "+":
        return VFloat(x + y)
    if op == "-":
        return VFloat(x - y)
    if op == "*":
        return VFloat(x * y)
    if op == "/":
        return VFloat(_float_div(x, y))
    raise AssertionError(op)


def _float_div(x: float, y: float) -> float:
    """IEEE division: a zero divisor gives an infinity or nan, never an error."""
    if y != 0.0:
        return x / y
    if math.isnan(x) or x == 0.0:
        return math.nan
    return math.copysign(math.inf, x) * math.copysign(1.0, y)
