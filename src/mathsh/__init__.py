"""mathsh tokenizer, parser and evaluator - public API."""

from __future__ import annotations

from typing import TextIO

from .ast import Expr, to_dict as to_dict
from .diagnostics import MathshError as MathshError, format_error as format_error
from .parse import ParseError as ParseError, Parser
from .runtime import (
    DivisionByZeroError as DivisionByZeroError,
    Environment as Environment,
    EvalFault as EvalFault,
    UnboundVariableError as UnboundVariableError,
    Value as Value,
    VBool as VBool,
    VFloat as VFloat,
    VInt as VInt,
    evaluate as evaluate,
)
from .tokens import Token as Token, TokenizeError as TokenizeError, tokenize


def parse(source: str) -> list[Expr]:
    """Parse mathsh source into its top-level expressions, in source order."""
    tokens = tokenize(source)
    parser = Parser(tokens, source)
    return parser.parse_program()


def run(
    source: str, env: Environment | None = None, out: TextIO | None = None
) -> list[Value]:
    """Parse source and evaluate each top-level expression against env.

    A fresh environment is used when env is omitted. Returns one value per
    top-level expression.
    """
    exprs = parse(source)
    if env is None:
        env = Environment()
    return [evaluate(expr, env, out) for expr in exprs]
