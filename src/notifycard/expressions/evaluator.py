"""Single-pass recursive-descent evaluator.

Each grammar rule parses its production and computes the value at the same
time; no syntax tree is kept. Precedence, lowest first::

    or       := and ( '||' and )*
    and      := equality ( '&&' equality )*
    equality := additive ( ('=='|'!='|'==='|'!=='|'>'|'>='|'<'|'<=') additive )*
    additive := multiplicative ( ('+'|'-') multiplicative )*
    multiplicative := unary ( ('*'|'/'|'%') unary )*
    unary    := '!' unary | primary
    primary  := literal | identifier | '(' or ')'

All binary operators are left-associative. ``||`` and ``&&`` evaluate both
operands, then pick one by the truthiness of the left operand. Parentheses
and ``!`` count towards a nesting limit so that hostile input fails with
NestingDepthError instead of exhausting the interpreter stack.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from notifycard.expressions import values
from notifycard.expressions.context import EvalContext, normalize_context
from notifycard.expressions.errors import (
    ExpressionSyntaxError,
    NestingDepthError,
    ParseError,
)
from notifycard.expressions.lexer import Token, TokenKind, tokenize
from notifycard.expressions.resolver import IdentifierResolver
from notifycard.logging import get_logger

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ExpressionEvaluator",
    "evaluate_expression",
]

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 32

_BinaryOp = Callable[[Any, Any], Any]

_EQUALITY: dict[str, _BinaryOp] = {
    "==": lambda a, b: values.loose_equal(
        values.coerce_numeric_string(a), values.coerce_numeric_string(b)
    ),
    "!=": lambda a, b: not values.loose_equal(
        values.coerce_numeric_string(a), values.coerce_numeric_string(b)
    ),
    "===": values.strict_equal,
    "!==": lambda a, b: not values.strict_equal(a, b),
    ">": lambda a, b: values.to_number(a) > values.to_number(b),
    ">=": lambda a, b: values.to_number(a) >= values.to_number(b),
    "<": lambda a, b: values.to_number(a) < values.to_number(b),
    "<=": lambda a, b: values.to_number(a) <= values.to_number(b),
}

_ADDITIVE: dict[str, _BinaryOp] = {
    "+": values.add,
    "-": values.subtract,
}

_MULTIPLICATIVE: dict[str, _BinaryOp] = {
    "*": values.multiply,
    "/": values.divide,
    "%": values.remainder,
}


class _Parser:
    """Consumes a token list and returns the value of the whole expression."""

    def __init__(
        self,
        tokens: list[Token],
        expression: str,
        resolver: IdentifierResolver,
        max_depth: int,
    ) -> None:
        self._tokens = tokens
        self._expression = expression
        self._resolver = resolver
        self._max_depth = max_depth
        self._pos = 0
        self._depth = 0

    def parse(self) -> Any:
        value = self._or()
        trailing = self._peek()
        if trailing is not None:
            raise ParseError(
                f"Unexpected trailing token {trailing.describe()}",
                expression=self._expression,
                position=trailing.position,
            )
        return value

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token | None:
        token = self._peek()
        if token is not None:
            self._pos += 1
        return token

    def _operator(self, table: Mapping[str, object]) -> str | None:
        """Consume and return the next token if it is an operator in ``table``."""
        token = self._peek()
        if token is not None and token.kind is TokenKind.OPERATOR:
            if token.value in table:
                self._pos += 1
                return str(token.value)
        return None

    def _enter(self, token: Token) -> None:
        self._depth += 1
        if self._depth > self._max_depth:
            raise NestingDepthError(
                self._max_depth,
                expression=self._expression,
                position=token.position,
            )

    def _or(self) -> Any:
        left = self._and()
        while self._operator({"||": None}):
            right = self._and()
            left = left if values.truthy(left) else right
        return left

    def _and(self) -> Any:
        left = self._equality()
        while self._operator({"&&": None}):
            right = self._equality()
            left = right if values.truthy(left) else left
        return left

    def _equality(self) -> Any:
        left = self._additive()
        while (op := self._operator(_EQUALITY)) is not None:
            left = _EQUALITY[op](left, self._additive())
        return left

    def _additive(self) -> Any:
        left = self._multiplicative()
        while (op := self._operator(_ADDITIVE)) is not None:
            left = _ADDITIVE[op](left, self._multiplicative())
        return left

    def _multiplicative(self) -> Any:
        left = self._unary()
        while (op := self._operator(_MULTIPLICATIVE)) is not None:
            left = _MULTIPLICATIVE[op](left, self._unary())
        return left

    def _unary(self) -> Any:
        token = self._peek()
        if token is not None and self._operator({"!": None}):
            self._enter(token)
            value = not values.truthy(self._unary())
            self._depth -= 1
            return value
        return self._primary()

    def _primary(self) -> Any:
        token = self._advance()
        if token is None:
            raise ParseError(
                "Unexpected end of expression",
                expression=self._expression,
                position=len(self._expression),
            )

        if token.kind is TokenKind.LPAREN:
            self._enter(token)
            value = self._or()
            closing = self._advance()
            if closing is None or closing.kind is not TokenKind.RPAREN:
                raise ParseError(
                    "Missing closing parenthesis for '(' "
                    f"opened at position {token.position}",
                    expression=self._expression,
                    position=(
                        closing.position
                        if closing is not None
                        else len(self._expression)
                    ),
                )
            self._depth -= 1
            return value

        if token.kind in (
            TokenKind.STRING,
            TokenKind.NUMBER,
            TokenKind.BOOLEAN,
            TokenKind.NULL,
        ):
            return token.value

        if token.kind is TokenKind.IDENTIFIER:
            return self._resolver.resolve(str(token.value))

        raise ParseError(
            f"Unexpected token {token.describe()}",
            expression=self._expression,
            position=token.position,
        )


class ExpressionEvaluator:
    """Evaluates expressions against one normalized context.

    The context is normalized once at construction and never mutated, so a
    single evaluator can be reused for every placeholder of a template.

    Attributes:
        context: The normalized context.
        resolver: Identifier resolver bound to the context.
        max_depth: Maximum nesting of parentheses and ``!``.

    Example:
        ```python
        evaluator = ExpressionEvaluator({"vars": {"count": "3"}})
        evaluator.evaluate("vars.count * 2")  # 6.0
        evaluator.evaluate("vars.count === 3")  # False
        evaluator.evaluate("vars.count == 3")  # True
        ```
    """

    def __init__(
        self,
        context: EvalContext | Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.context = normalize_context(context)
        self.resolver = IdentifierResolver(self.context, environ=environ)
        self.max_depth = max_depth

    def evaluate(self, expression: str) -> Any:
        """Evaluate one expression.

        Args:
            expression: Expression text, without ``{{ }}`` delimiters.

        Returns:
            A string, number, bool, None, UNDEFINED or a structured value.

        Raises:
            LexError: On a character no token rule accepts.
            ParseError: On a malformed token stream.
        """
        try:
            tokens = tokenize(expression)
            return _Parser(tokens, expression, self.resolver, self.max_depth).parse()
        except ExpressionSyntaxError as e:
            logger.debug(
                "expression_failed",
                expression=expression,
                error_type=type(e).__name__,
                position=e.position,
            )
            raise


def evaluate_expression(
    expression: str,
    context: EvalContext | Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Evaluate ``expression`` against ``context`` (normalized first).

    Examples:
        >>> evaluate_expression("1 + 'a'")
        '1a'
        >>> evaluate_expression("1 == '1'"), evaluate_expression("1 === '1'")
        (True, False)
    """
    evaluator = ExpressionEvaluator(context, environ=environ, max_depth=max_depth)
    return evaluator.evaluate(expression)
