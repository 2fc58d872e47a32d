"""Expression language for notification templates.

Templates contain ``{{ expr }}`` placeholders. Each expression is tokenized,
then parsed and evaluated in a single recursive-descent pass against a
six-scope context (envs, vars, github, matrix, job, steps).

Expression Syntax
-----------------
- Paths: ``vars.NAME``, ``github.repository``, ``steps.build.outputs.url``
- Bare names fall back to ``envs`` case-insensitively: ``{{ github_sha }}``
- Host environment: ``appEnv.HOME`` / ``processEnv.HOME``
- Literals: ``'text'``, ``"text"``, ``42``, ``1_000``, ``3.14``, ``true``,
  ``false``, ``null``
- Operators, loosest first: ``||``, ``&&``, comparisons
  (``== != === !== > >= < <=``), ``+ -``, ``* / %``, ``!``, parentheses

Examples
--------
    render_template("{{ job.status == 'success' && 'green' || 'red' }}", ctx)
    evaluate_expression("vars.retries + 1", {"vars": {"retries": "2"}})  # 3.0

Module Structure
----------------
- lexer.py: tokens and the tokenizer
- evaluator.py: the recursive-descent parser/evaluator
- resolver.py: dotted-path identifier lookup
- context.py: the immutable context record and its normalizer
- values.py: weak-typing coercions, equality and stringification
- template.py: placeholder substitution
- errors.py: expression error types
"""

from __future__ import annotations

from notifycard.expressions.context import (
    SCOPE_NAMES,
    EvalContext,
    context_from_environ,
    normalize_context,
)
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
from notifycard.expressions.evaluator import (
    DEFAULT_MAX_DEPTH,
    ExpressionEvaluator,
    evaluate_expression,
)
from notifycard.expressions.lexer import Token, TokenKind, tokenize
from notifycard.expressions.resolver import IdentifierResolver
from notifycard.expressions.template import (
    TemplateRenderer,
    find_placeholders,
    render_structure,
    render_template,
)
from notifycard.expressions.values import UNDEFINED, stringify, truthy

__all__: list[str] = [
    # Context
    "SCOPE_NAMES",
    "EvalContext",
    "normalize_context",
    "context_from_environ",
    # Error types
    "ExpressionError",
    "ExpressionSyntaxError",
    "LexError",
    "ParseError",
    "NestingDepthError",
    "TemplateError",
    "TemplateLimitError",
    "ExpressionErrorInfo",
    # Tokenizer
    "Token",
    "TokenKind",
    "tokenize",
    # Evaluation
    "DEFAULT_MAX_DEPTH",
    "ExpressionEvaluator",
    "IdentifierResolver",
    "evaluate_expression",
    "UNDEFINED",
    "truthy",
    "stringify",
    # Templates
    "TemplateRenderer",
    "find_placeholders",
    "render_template",
    "render_structure",
]
