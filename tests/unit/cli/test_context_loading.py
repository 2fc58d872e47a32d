"""Unit tests for building an evaluation context from CLI options."""

from __future__ import annotations

from pathlib import Path

import pytest

from notifycard.cli.common import build_eval_context, load_context_file
from notifycard.exceptions import ConfigError
from notifycard.expressions import EvalContext


class TestLoadContextFile:
    def test_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "ctx.yaml"
        path.write_text("vars:\n  NAME: demo\nmatrix:\n  os: linux\n")

        assert load_context_file(path) == {
            "vars": {"NAME": "demo"},
            "matrix": {"os": "linux"},
        }

    def test_json(self, temp_dir: Path) -> None:
        path = temp_dir / "ctx.json"
        path.write_text('{"job": {"status": "failure"}}')

        assert load_context_file(path) == {"job": {"status": "failure"}}

    def test_empty_file(self, temp_dir: Path) -> None:
        path = temp_dir / "empty.yaml"
        path.write_text("")

        assert load_context_file(path) == {}

    def test_not_a_mapping(self, temp_dir: Path) -> None:
        path = temp_dir / "list.yaml"
        path.write_text("- vars\n")

        with pytest.raises(ConfigError, match="must contain a mapping of scopes"):
            load_context_file(path)

    def test_scope_not_a_mapping(self, temp_dir: Path) -> None:
        path = temp_dir / "ctx.yaml"
        path.write_text("vars: just-a-string\n")

        with pytest.raises(ConfigError) as exc_info:
            load_context_file(path)
        assert exc_info.value.field == "vars"

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "ctx.yaml"
        path.write_text("vars: {unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML/JSON"):
            load_context_file(path)


class TestBuildEvalContext:
    def test_nothing_given(self) -> None:
        assert build_eval_context(None, from_env=False) == EvalContext()

    def test_from_env_only(self) -> None:
        ctx = build_eval_context(
            None, from_env=True, environ={"GITHUB_SHA": "abc", "CI": "true"}
        )
        assert ctx.envs == {"GITHUB_SHA": "abc", "CI": "true"}
        assert ctx.github == {"sha": "abc"}

    def test_file_scopes_replace_env_scopes(self, temp_dir: Path) -> None:
        path = temp_dir / "ctx.yaml"
        path.write_text("github:\n  sha: from-file\nvars:\n  A: '1'\n")

        ctx = build_eval_context(path, from_env=True, environ={"GITHUB_SHA": "abc"})
        assert ctx.github == {"sha": "from-file"}
        assert ctx.envs == {"GITHUB_SHA": "abc"}
        assert ctx.vars == {"A": "1"}
