from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    This fixture runs automatically for all tests so that log output goes
    to stderr at WARNING level and never mixes with rendered output.
    """
    from notifycard.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
    """Remove NOTIFYCARD_ environment variables and hide the user config."""
    for key in list(os.environ):
        if key.startswith("NOTIFYCARD_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(Path, "home", lambda: temp_dir / "home")


@pytest.fixture
def sample_context() -> dict[str, Any]:
    """A context shaped like a finished CI job."""
    return {
        "envs": {"GITHUB_SHA": "abc123", "release_url": "https://example.com/r/1"},
        "vars": {"NAME": "demo", "RETRIES": "2", "FLAGS": ["a", "b"]},
        "github": {"repository": "acme/widgets", "ref_name": "main"},
        "matrix": {"os": "ubuntu-latest", "python": 3.12},
        "job": {"id": 42, "name": "build", "status": "success"},
        "steps": {
            "build": {"outputs": {"url": "https://example.com/a", "size": "1024"}},
            "notify-slack": {"outputs": {}},
        },
    }


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample notifycard.yaml content for testing."""
    return """
expressions:
  max_depth: 16

templates:
  max_placeholders: 50

verbosity: "info"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from notifycard.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()
