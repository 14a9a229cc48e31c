"""mathsh parser - recursive descent, one method per grammar production."""

from __future__ import annotations

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
from .tokens import TK_EOF, TK_FLOAT, TK_IDENT, TK_INT, TK_OP, Token


class ParseError(MathshError):
    """Parse error positioned at the offending token."""


class Parser:
    """Recursive descent parser for mathsh.

    Grammar, lowest precedence first:

        Program  = Expr* EOF
        Expr     = Sum ( '==' Sum )*
        Sum      = Product ( ( '+' | '-' ) Product )*
        Product  = Primary ( ( '*' | '/' ) Primary )*
        Primary  = INT | FLOAT | 'true' | 'false' | IDENT
                 | '(' Expr ')'
                 | '-' Primary
                 | 'let' IDENT '=' Expr
                 | 'print' Expr
                 | 'if' Expr 'then' Expr 'else' Expr
    """

    def __init__(self, tokens: list[Token], source: str):
        self.tokens: list[Token] = tokens
        self.source: str = source
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        # EOF is never consumed, so current() always has a token to return
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def at_op(self, value: str) -> bool:
        tok = self.current()
        return tok.type == TK_OP and tok.value == value

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def expect_op(self, value: str, msg: str) -> Token:
        if not self.at_op(value):
            raise self.error(msg)
        return self.advance()

    def expect_keyword(self, word: str, msg: str) -> Token:
        if not self.at_type(word):
            raise self.error(msg)
        return self.advance()

    def error(self, msg: str) -> ParseError:
        return ParseError(msg, self.current().offset, self.source)

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> list[Expr]:
        exprs: list[Expr] = []
        while not self.at_type(TK_EOF):
            exprs.append(self.parse_expr())
        return exprs

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_equality()

    def parse_equality(self) -> Expr:
        """Expr = Sum ( '==' Sum )*"""
        left = self.parse_sum()
        while self.at_op("=="):
            self.advance()
            right = self.parse_sum()
            left = Equality(left.offset, left, right)
        return left

    def parse_sum(self) -> Expr:
        """Sum = Product ( ( '+' | '-' ) Product )*"""
        left = self.parse_product()
        while self.at_op("+") or self.at_op("-"):
            op = self.advance().value
            right = self.parse_product()
            left = BinaryOp(left.offset, op, left, right)
        return left

    def parse_product(self) -> Expr:
        """Product = Primary ( ( '*' | '/' ) Primary )*"""
        left = self.parse_primary()
        while self.at_op("*") or self.at_op("/"):
            op = self.advance().value
            right = self.parse_primary()
            left = BinaryOp(left.offset, op, left, right)
        return left

    def parse_primary(self) -> Expr:
        """Parse a primary expression."""
        tok = self.current()
        offset = tok.offset

        if tok.type == TK_INT:
            self.advance()
            return IntLit(offset, int(tok.number))
        if tok.type == TK_FLOAT:
            self.advance()
            return FloatLit(offset, float(tok.number))
        if tok.type == "true":
            self.advance()
            return BoolLit(offset, True)
        if tok.type == "false":
            self.advance()
            return BoolLit(offset, False)
        if tok.type == TK_IDENT:
            self.advance()
            return Var(offset, tok.value)

        if self.at_op("("):
            self.advance()
            inner = self.parse_expr()
            self.expect_op(")", "expected closing parenthesis")
            return inner

        if self.at_op("-"):
            self.advance()
            operand = self.parse_primary()
            return Negative(offset, operand)

        if tok.type == "let":
            self.advance()
            if not self.at_type(TK_IDENT):
                raise self.error("expected variable name after 'let'")
            name = self.advance().value
            self.expect_op("=", "expected '=' after variable name")
            init = self.parse_expr()
            return VarDecl(offset, name, init)

        if tok.type == "print":
            self.advance()
            operand = self.parse_expr()
            return Print(offset, operand)

        if tok.type == "if":
            self.advance()
            cond = self.parse_expr()
            self.expect_keyword(
                "then",
                "expected 'then' (conditionals look like: if COND then VALUE else VALUE)",
            )
            then_expr = self.parse_expr()
            self.expect_keyword("else", "expected 'else'")
            else_expr = self.parse_expr()
            return Conditional(offset, cond, then_expr, else_expr)

        if tok.type == TK_EOF:
            raise self.error("unexpected end of input")
        raise self.error("unexpected token '" + tok.value + "'")
