"""Tokenizer for the expression language.

This is the only place that looks at raw characters. Rules are tried in a
fixed order, longest operator first:

- ``===`` ``!==``
- ``<=`` ``>=`` ``==`` ``!=`` ``&&`` ``||``
- ``>`` ``<`` ``!`` ``+`` ``-`` ``*`` ``/`` ``%``
- ``(`` ``)``
- quoted strings (``"`` or ``'``, backslash copies the next character)
- numbers (digits, one optional ``.``, ``_`` as a digit separator)
- identifiers (dotted paths, may also contain ``-``, ``[`` and ``]``)

Examples:
    >>> [t.kind.value for t in tokenize("a==1")]
    ['identifier', 'operator', 'number']
    >>> tokenize("1_000")[0].value
    1000.0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from notifycard.expressions.errors import LexError

__all__ = [
    "TokenKind",
    "Token",
    "OPERATORS",
    "tokenize",
]


class TokenKind(str, Enum):
    """Kind of a lexical token."""

    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token.

    Attributes:
        kind: Token kind.
        value: Decoded payload: the path for identifiers, the unescaped text
            for strings, a float for numbers, a bool for booleans, the symbol
            for operators and parentheses, None for null.
        position: Offset of the first character in the source expression.
    """

    kind: TokenKind
    value: str | float | bool | None
    position: int = 0

    def describe(self) -> str:
        """Short human-readable form used in parse error messages."""
        if self.kind in (TokenKind.OPERATOR, TokenKind.LPAREN, TokenKind.RPAREN):
            return f"'{self.value}'"
        if self.kind is TokenKind.NULL:
            return "null"
        if self.kind is TokenKind.BOOLEAN:
            return "true" if self.value else "false"
        return f"{self.kind.value} {self.value!r}"


_THREE_CHAR = frozenset({"===", "!=="})
_TWO_CHAR = frozenset({"<=", ">=", "==", "!=", "&&", "||"})
_ONE_CHAR = frozenset(">!<+-*/%")

OPERATORS: frozenset[str] = _THREE_CHAR | _TWO_CHAR | _ONE_CHAR

_KEYWORDS: dict[str, tuple[TokenKind, bool | None]] = {
    "true": (TokenKind.BOOLEAN, True),
    "false": (TokenKind.BOOLEAN, False),
    "null": (TokenKind.NULL, None),
}

_DIGITS = frozenset("0123456789")
_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_IDENT_START = _ASCII_LETTERS | {"_"}
_IDENT_PART = _IDENT_START | _DIGITS | frozenset(".-[]")


def _read_string(expression: str, start: int) -> tuple[str, int]:
    """Read a quoted string starting at the opening quote.

    An unterminated string runs to the end of the input without error.
    """
    quote = expression[start]
    i = start + 1
    chars: list[str] = []
    while i < len(expression):
        char = expression[i]
        if char == "\\":
            # A trailing backslash contributes nothing.
            chars.append(expression[i + 1 : i + 2])
            i += 2
            continue
        if char == quote:
            return "".join(chars), i + 1
        chars.append(char)
        i += 1
    return "".join(chars), i


def _read_number(expression: str, start: int) -> tuple[float, int]:
    i = start
    seen_dot = False
    while i < len(expression):
        char = expression[i]
        if char in _DIGITS or char == "_":
            i += 1
        elif char == "." and not seen_dot:
            seen_dot = True
            i += 1
        else:
            break
    return float(expression[start:i].replace("_", "")), i


def _starts_number(expression: str, i: int) -> bool:
    char = expression[i]
    if char in _DIGITS:
        return True
    return char == "." and expression[i + 1 : i + 2] in _DIGITS


def tokenize(expression: str) -> list[Token]:
    """Convert an expression string into an ordered list of tokens.

    Whitespace between tokens is skipped.

    Args:
        expression: Raw expression text (without ``{{ }}`` delimiters).

    Returns:
        Tokens in source order.

    Raises:
        LexError: If a character matches none of the tokenizer rules.
    """
    tokens: list[Token] = []
    i = 0
    length = len(expression)

    while i < length:
        char = expression[i]

        if char.isspace():
            i += 1
            continue

        if expression[i : i + 3] in _THREE_CHAR:
            tokens.append(Token(TokenKind.OPERATOR, expression[i : i + 3], i))
            i += 3
            continue

        if expression[i : i + 2] in _TWO_CHAR:
            tokens.append(Token(TokenKind.OPERATOR, expression[i : i + 2], i))
            i += 2
            continue

        if char in _ONE_CHAR:
            tokens.append(Token(TokenKind.OPERATOR, char, i))
            i += 1
            continue

        if char == "(":
            tokens.append(Token(TokenKind.LPAREN, char, i))
            i += 1
            continue

        if char == ")":
            tokens.append(Token(TokenKind.RPAREN, char, i))
            i += 1
            continue

        if char in ("'", '"'):
            text, end = _read_string(expression, i)
            tokens.append(Token(TokenKind.STRING, text, i))
            i = end
            continue

        if _starts_number(expression, i):
            number, end = _read_number(expression, i)
            tokens.append(Token(TokenKind.NUMBER, number, i))
            i = end
            continue

        if char in _IDENT_START:
            end = i + 1
            while end < length and expression[end] in _IDENT_PART:
                end += 1
            word = expression[i:end]
            if word in _KEYWORDS:
                kind, value = _KEYWORDS[word]
                tokens.append(Token(kind, value, i))
            else:
                tokens.append(Token(TokenKind.IDENTIFIER, word, i))
            i = end
            continue

        raise LexError(char, expression=expression, position=i)

    return tokens
