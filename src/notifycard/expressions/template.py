"""Placeholder substitution for ``{{ expr }}`` templates.

Each placeholder runs from ``{{`` to the first following ``}}``. Its inner
text is trimmed, evaluated against the context and replaced by the
stringified result:

- null / undefined -> ""
- mappings and lists -> compact JSON
- anything else -> its natural string form

Placeholders are evaluated left to right against one normalized context.
Any tokenizer or parser error aborts the whole render; there is no partial
output.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from notifycard.expressions.context import EvalContext
from notifycard.expressions.errors import TemplateLimitError
from notifycard.expressions.evaluator import DEFAULT_MAX_DEPTH, ExpressionEvaluator
from notifycard.expressions.values import stringify
from notifycard.logging import get_logger

__all__ = [
    "PLACEHOLDER_PATTERN",
    "TemplateRenderer",
    "find_placeholders",
    "render_template",
    "render_structure",
]

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{(.+?)\}\}", re.DOTALL)


def find_placeholders(template: str) -> list[str]:
    """Return the trimmed inner text of every placeholder, in order.

    Examples:
        >>> find_placeholders("{{ a }} and {{b}}")
        ['a', 'b']
        >>> find_placeholders("plain text")
        []
    """
    return [m.group(1).strip() for m in PLACEHOLDER_PATTERN.finditer(template)]


class TemplateRenderer:
    """Renders templates with a shared evaluator.

    Attributes:
        evaluator: Evaluator holding the normalized context.
        max_placeholders: Upper bound on placeholders per template, or None
            for no bound.

    Example:
        ```python
        renderer = TemplateRenderer(ExpressionEvaluator({"vars": {"NAME": "demo"}}))
        renderer.render("Hello {{ vars.NAME }}")  # "Hello demo"
        ```
    """

    def __init__(
        self,
        evaluator: ExpressionEvaluator,
        max_placeholders: int | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.max_placeholders = max_placeholders

    def render(self, template: str) -> str:
        """Replace every placeholder in ``template``.

        Raises:
            LexError: If a placeholder contains an invalid character.
            ParseError: If a placeholder is not a complete expression.
            TemplateLimitError: If there are more placeholders than allowed.
        """
        matches = list(PLACEHOLDER_PATTERN.finditer(template))
        if not matches:
            return template
        if self.max_placeholders is not None and len(matches) > self.max_placeholders:
            raise TemplateLimitError(
                self.max_placeholders,
                len(matches),
                template=template[:200],
            )

        parts: list[str] = []
        last = 0
        for match in matches:
            parts.append(template[last : match.start()])
            value = self.evaluator.evaluate(match.group(1).strip())
            parts.append(stringify(value))
            last = match.end()
        parts.append(template[last:])

        logger.debug("template_rendered", placeholders=len(matches))
        return "".join(parts)

    def render_structure(self, obj: Any) -> Any:
        """Render every string inside a JSON-like value.

        Mapping keys that are strings are rendered too. Numbers, booleans
        and None are returned unchanged. Tuples come back as lists.
        """
        if isinstance(obj, str):
            return self.render(obj)
        if isinstance(obj, Mapping):
            return {
                (self.render(key) if isinstance(key, str) else key): (
                    self.render_structure(value)
                )
                for key, value in obj.items()
            }
        if isinstance(obj, (list, tuple)):
            return [self.render_structure(item) for item in obj]
        return obj


def _renderer(
    context: EvalContext | Mapping[str, Any] | None,
    environ: Mapping[str, str] | None,
    max_depth: int,
    max_placeholders: int | None,
) -> TemplateRenderer:
    evaluator = ExpressionEvaluator(context, environ=environ, max_depth=max_depth)
    return TemplateRenderer(evaluator, max_placeholders=max_placeholders)


def render_template(
    template: str,
    context: EvalContext | Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_placeholders: int | None = None,
) -> str:
    """Render ``template`` against ``context``.

    Examples:
        >>> render_template("{{ vars.NAME }}", {"vars": {"NAME": "demo"}})
        'demo'
        >>> render_template("no placeholders")
        'no placeholders'
    """
    return _renderer(context, environ, max_depth, max_placeholders).render(template)


def render_structure(
    obj: Any,
    context: EvalContext | Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_placeholders: int | None = None,
) -> Any:
    """Render every string leaf (and string key) of a JSON-like value."""
    renderer = _renderer(context, environ, max_depth, max_placeholders)
    return renderer.render_structure(obj)
