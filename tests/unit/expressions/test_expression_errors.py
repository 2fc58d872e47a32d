"""Unit tests for expression error types."""

from __future__ import annotations

import pytest

from notifycard.exceptions import NotifyCardError
from notifycard.expressions.errors import (
    ExpressionError,
    ExpressionErrorInfo,
    ExpressionSyntaxError,
    LexError,
    NestingDepthError,
    ParseError,
    TemplateError,
    TemplateLimitError,
)


class TestExpressionSyntaxError:
    """Message formatting with and without a position."""

    def test_caret_points_at_position(self) -> None:
        error = ExpressionSyntaxError("Unexpected token", "a + * b", position=4)
        assert str(error) == "Unexpected token at position 4:\na + * b\n    ^"
        assert error.position == 4
        assert error.expression == "a + * b"

    def test_no_caret_at_position_zero(self) -> None:
        error = ExpressionSyntaxError("Unexpected token", "* b", position=0)
        assert str(error) == "Unexpected token: * b"

    def test_to_info(self) -> None:
        error = ParseError("Unexpected end of expression", "1 +", position=3)
        info = error.to_info()
        assert info == ExpressionErrorInfo(
            expression="1 +", message=error.message, position=3
        )


class TestLexError:
    def test_attributes(self) -> None:
        error = LexError("@", "a @ b", 2)
        assert error.character == "@"
        assert error.position == 2
        assert error.message.startswith("Unexpected character '@' at offset 2")


class TestNestingDepthError:
    def test_message_and_limit(self) -> None:
        error = NestingDepthError(8, "((((((((((1))))))))))", position=8)
        assert error.max_depth == 8
        assert "maximum depth of 8" in error.message


class TestTemplateLimitError:
    def test_attributes(self) -> None:
        error = TemplateLimitError(10, 12, template="{{a}}...")
        assert error.limit == 10
        assert error.found == 12
        assert error.template == "{{a}}..."
        assert error.expression is None
        assert str(error) == (
            "Template contains 12 placeholders, more than the limit of 10"
        )


class TestHierarchy:
    """All expression errors are catchable as NotifyCardError."""

    @pytest.mark.parametrize(
        ("cls", "parents"),
        [
            (LexError, (ExpressionSyntaxError, ExpressionError, NotifyCardError)),
            (ParseError, (ExpressionSyntaxError, ExpressionError, NotifyCardError)),
            (NestingDepthError, (ParseError, ExpressionSyntaxError)),
            (TemplateLimitError, (TemplateError, ExpressionError, NotifyCardError)),
        ],
    )
    def test_subclassing(self, cls: type, parents: tuple[type, ...]) -> None:
        for parent in parents:
            assert issubclass(cls, parent)

    def test_template_errors_are_not_syntax_errors(self) -> None:
        assert not issubclass(TemplateError, ExpressionSyntaxError)
