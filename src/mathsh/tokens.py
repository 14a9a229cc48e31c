"""mathsh tokenizer - lexes source into a flat token list."""

from __future__ import annotations

from .diagnostics import MathshError


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "else",
    "false",
    "if",
    "let",
    "print",
    "then",
    "true",
}

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "(",
    ")",
    "=",
}

WHITESPACE: str = " \t\n\r\f"

INT_MAX = 2**63 - 1
INT_MAX_DIGITS = len(str(INT_MAX))


class TokenizeError(MathshError):
    """Error during tokenization."""


class Token:
    """A token with type, raw text, and source offset."""

    def __init__(self, type_: str, value: str, offset: int):
        self.type: str = type_
        self.value: str = value
        self.offset: int = offset
        self.number: int | float = 0

    def __repr__(self) -> str:
        return "Token(" + self.type + ", " + repr(self.value) + ", " + str(self.offset) + ")"


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z")


def tokenize(source: str) -> list[Token]:
    """Tokenize mathsh source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    length = len(source)

    while pos < length and source[pos] in WHITESPACE:
        pos += 1
    if pos == length:
        raise TokenizeError("no input to parse")

    while pos < length:
        c = source[pos]

        if c in WHITESPACE:
            pos += 1
            continue

        start = pos

        # Number: int, or float when a '.' follows the digits
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
            if pos < length and source[pos] == ".":
                pos += 1
                while pos < length and _is_digit(source[pos]):
                    pos += 1
                raw = source[start:pos]
                tok = Token(TK_FLOAT, raw, start)
                tok.number = float(raw)
            else:
                raw = source[start:pos]
                # Reject before int(): long digit strings hit the conversion limit
                if len(raw.lstrip("0")) > INT_MAX_DIGITS or int(raw) > INT_MAX:
                    raise TokenizeError(
                        "malformed number: does not fit in a 64-bit integer",
                        start,
                        source,
                    )
                tok = Token(TK_INT, raw, start)
                tok.number = int(raw)
            tokens.append(tok)
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alpha(source[pos]):
                pos += 1
            word = source[start:pos]
            if word in KEYWORDS:
                tokens.append(Token(word, word, start))
            else:
                tokens.append(Token(TK_IDENT, word, start))
            continue

        if c == "=" and pos + 1 < length and source[pos + 1] == "=":
            tokens.append(Token(TK_OP, "==", start))
            pos += 2
            continue

        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, start))
            pos += 1
            continue

        raise TokenizeError("unexpected character " + repr(c), start, source)

    tokens.append(Token(TK_EOF, "", len(source.rstrip(WHITESPACE))))
    return tokens
