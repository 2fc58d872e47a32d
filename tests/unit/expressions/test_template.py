"""Unit tests for placeholder substitution."""

from __future__ import annotations

from typing import Any

import pytest

from notifycard.expressions import (
    ExpressionEvaluator,
    LexError,
    ParseError,
    TemplateLimitError,
    TemplateRenderer,
    find_placeholders,
    render_structure,
    render_template,
)


def render(template: str, context: dict[str, Any] | None = None) -> str:
    return render_template(template, context, environ={})


class TestRenderTemplate:
    """Rendering plain text templates."""

    def test_single_placeholder(self) -> None:
        assert render("{{ vars.NAME }}", {"vars": {"NAME": "demo"}}) == "demo"

    def test_surrounding_text_is_kept(self, sample_context: dict[str, Any]) -> None:
        result = render(
            "Build of {{github.repository}} on {{ matrix.os }}!", sample_context
        )
        assert result == "Build of acme/widgets on ubuntu-latest!"

    def test_no_placeholders_returns_input_unchanged(self) -> None:
        template = "plain {text} with { braces } and }} stray"
        assert render(template) == template

    def test_unknown_root_renders_empty(self) -> None:
        assert render("[{{ nothing_here }}]") == "[]"

    def test_null_renders_empty(self) -> None:
        assert render("[{{ null }}]") == "[]"

    def test_numbers(self) -> None:
        assert render("{{ 1 + 1 }} {{ 0.5 * 3 }} {{ 1 / 0 }}") == "2 1.5 Infinity"

    def test_booleans(self) -> None:
        assert render("{{ 1 == '1' }}/{{ 1 === '1' }}") == "true/false"

    def test_structured_value_renders_as_json(
        self, sample_context: dict[str, Any]
    ) -> None:
        assert render("{{ vars.FLAGS }}", sample_context) == '["a","b"]'
        assert render("{{ job }}", sample_context) == (
            '{"id":42,"name":"build","status":"success"}'
        )

    def test_non_greedy_spans(self) -> None:
        assert render("{{ 'a' }}{{ 'b' }}") == "ab"

    def test_multiline_placeholder(self) -> None:
        assert render("{{\n  1 +\n  2\n}}") == "3"

    def test_empty_braces_are_literal_text(self) -> None:
        assert render("{{}}") == "{{}}"

    def test_whitespace_only_placeholder_fails(self) -> None:
        with pytest.raises(ParseError, match="Unexpected end of expression"):
            render("{{   }}")

    def test_rendered_output_is_not_rescanned(self) -> None:
        ctx = {"vars": {"RAW": "{{ vars.RAW }}"}}
        assert render("{{ vars.RAW }}", ctx) == "{{ vars.RAW }}"

    def test_status_line(self, sample_context: dict[str, Any]) -> None:
        template = (
            "{{ job.name }}: {{ job.status == 'success' && '✅' || '❌' }} "
            "({{ steps.build.outputs.size / 1024 }} KiB)"
        )
        assert render(template, sample_context) == "build: ✅ (1 KiB)"


class TestRenderFailures:
    """A single bad placeholder fails the whole render."""

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(ParseError):
            render("ok {{ 1 }} bad {{ (1+2 }}")

    def test_lex_error_propagates(self) -> None:
        with pytest.raises(LexError):
            render("{{ a # b }}")

    def test_placeholder_limit(self) -> None:
        renderer = TemplateRenderer(
            ExpressionEvaluator(environ={}), max_placeholders=2
        )
        assert renderer.render("{{1}}{{2}}") == "12"
        with pytest.raises(TemplateLimitError) as exc_info:
            renderer.render("{{1}}{{2}}{{3}}")
        assert exc_info.value.limit == 2
        assert exc_info.value.found == 3

    def test_limit_checked_before_evaluation(self) -> None:
        with pytest.raises(TemplateLimitError):
            render_template("{{ @ }}{{ @ }}", max_placeholders=1, environ={})


class TestFindPlaceholders:
    """Listing placeholder expressions."""

    def test_in_order(self) -> None:
        assert find_placeholders("{{ a }} x {{b}} {{ c.d }}") == ["a", "b", "c.d"]

    def test_none(self) -> None:
        assert find_placeholders("nothing") == []


class TestRenderStructure:
    """Rendering every string inside a JSON-like payload."""

    def test_card_payload(self, sample_context: dict[str, Any]) -> None:
        card = {
            "msg_type": "interactive",
            "card": {
                "header": {"title": "{{ github.repository }} #{{ job.id }}"},
                "elements": [
                    {"tag": "markdown", "content": "**{{ job.status }}**"},
                    {"tag": "hr"},
                ],
            },
            "retries": 3,
            "enabled": True,
            "extra": None,
        }
        result = render_structure(card, sample_context, environ={})
        assert result == {
            "msg_type": "interactive",
            "card": {
                "header": {"title": "acme/widgets #42"},
                "elements": [
                    {"tag": "markdown", "content": "**success**"},
                    {"tag": "hr"},
                ],
            },
            "retries": 3,
            "enabled": True,
            "extra": None,
        }

    def test_keys_are_rendered(self) -> None:
        result = render_structure({"{{ vars.K }}": "v"}, {"vars": {"K": "key"}})
        assert result == {"key": "v"}

    def test_tuples_become_lists(self) -> None:
        assert render_structure(("{{ 1 }}", 2)) == ["1", 2]

    def test_input_is_not_mutated(self) -> None:
        payload = {"a": ["{{ 1 + 1 }}"]}
        render_structure(payload)
        assert payload == {"a": ["{{ 1 + 1 }}"]}
