"""Expression-specific error types.

Tokenizer and parser failures are fatal to the single expression being
evaluated and propagate synchronously; the template renderer never swallows
them. Coercion problems are not errors at all (they produce NaN).
"""

from __future__ import annotations

from dataclasses import dataclass

from notifycard.exceptions import NotifyCardError

__all__ = [
    "ExpressionError",
    "ExpressionSyntaxError",
    "LexError",
    "ParseError",
    "NestingDepthError",
    "TemplateError",
    "TemplateLimitError",
    "ExpressionErrorInfo",
]


@dataclass(frozen=True, slots=True)
class ExpressionErrorInfo:
    """Expression error information for reporting.

    Attributes:
        expression: The expression that failed.
        message: Human-readable error message.
        position: Character offset in the expression (0 if not applicable).
    """

    expression: str
    message: str
    position: int = 0


class ExpressionError(NotifyCardError):
    """Base exception for all expression-related errors.

    Attributes:
        message: Human-readable error message.
        expression: The expression that caused the error (if known).
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
    ) -> None:
        """Initialize the ExpressionError.

        Args:
            message: Human-readable error message.
            expression: The expression that caused the error.
        """
        self.expression = expression
        super().__init__(message)

    def to_info(self) -> ExpressionErrorInfo:
        """Summarize this error as an immutable ExpressionErrorInfo."""
        return ExpressionErrorInfo(
            expression=self.expression or "",
            message=self.message,
            position=getattr(self, "position", 0),
        )


class ExpressionSyntaxError(ExpressionError):
    """Exception raised when an expression cannot be tokenized or parsed.

    Attributes:
        message: Full message, including a caret line when a position is known.
        expression: The expression that failed.
        position: Character offset where the error was detected.
    """

    def __init__(
        self,
        message: str,
        expression: str,
        position: int = 0,
    ) -> None:
        self.position = position
        if position > 0 and expression:
            error_line = f"{expression}\n{' ' * position}^"
            full_message = f"{message} at position {position}:\n{error_line}"
        else:
            full_message = f"{message}: {expression}"
        super().__init__(full_message, expression=expression)


class LexError(ExpressionSyntaxError):
    """A character matched none of the tokenizer rules.

    Attributes:
        character: The offending character.
        position: Its offset in the expression.
    """

    def __init__(self, character: str, expression: str, position: int) -> None:
        self.character = character
        super().__init__(
            f"Unexpected character {character!r} at offset {position}",
            expression=expression,
            position=position,
        )


class ParseError(ExpressionSyntaxError):
    """The token stream does not form a complete expression.

    Raised for an unexpected end of input, trailing tokens after a complete
    expression, or a missing closing parenthesis.
    """


class NestingDepthError(ParseError):
    """Parenthesis or unary nesting exceeded the configured maximum.

    Attributes:
        max_depth: The limit that was exceeded.
    """

    def __init__(self, max_depth: int, expression: str, position: int = 0) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Expression nesting exceeds maximum depth of {max_depth}",
            expression=expression,
            position=position,
        )


class TemplateError(ExpressionError):
    """A template could not be rendered as a whole.

    Attributes:
        template: The template text (possibly truncated for display).
    """

    def __init__(self, message: str, template: str) -> None:
        self.template = template
        super().__init__(message, expression=None)


class TemplateLimitError(TemplateError):
    """A template contains more placeholders than allowed.

    Attributes:
        limit: Configured maximum number of placeholders.
        found: Number of placeholders present in the template.
    """

    def __init__(self, limit: int, found: int, template: str) -> None:
        self.limit = limit
        self.found = found
        super().__init__(
            f"Template contains {found} placeholders, more than the limit of {limit}",
            template=template,
        )
