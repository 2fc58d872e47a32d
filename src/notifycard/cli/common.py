from __future__ import annotations

import contextlib
from collections.abc import Callable, Generator, Mapping
from pathlib import Path
from typing import Any, TypeVar

import click
import yaml

from notifycard.cli.console import err_console
from notifycard.cli.context import CLIContext, ExitCode
from notifycard.cli.output import format_error
from notifycard.exceptions import ConfigError, NotifyCardError
from notifycard.expressions import (
    SCOPE_NAMES,
    EvalContext,
    ExpressionEvaluator,
    context_from_environ,
    normalize_context,
)
from notifycard.logging import clear_context, get_logger

__all__ = [
    "cli_error_handler",
    "context_options",
    "load_context_file",
    "build_eval_context",
    "make_evaluator",
]

F = TypeVar("F", bound=Callable[..., Any])


def _report(message: str) -> None:
    err_console.print(message, markup=False, highlight=False, soft_wrap=True)


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Turn expected failures into a formatted message and exit code 1.

    - KeyboardInterrupt: exit 130
    - ConfigError: message plus the offending field/value
    - NotifyCardError: message (syntax errors keep their caret line)
    - anything else: logged with traceback, then exit 1

    Log context bound inside the block is cleared on the way out.
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        _report("\nInterrupted by user.")
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        _report(format_error(e.message, details=details or None))
        raise SystemExit(ExitCode.FAILURE) from e
    except NotifyCardError as e:
        _report(format_error(e.message))
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_command_error")
        _report(f"Error: {e!s}")
        raise SystemExit(ExitCode.FAILURE) from e
    finally:
        clear_context()


def context_options(f: F) -> F:
    """Add ``--context FILE`` and ``--from-env`` to a command."""
    f = click.option(
        "--from-env",
        is_flag=True,
        default=False,
        help="Seed the envs and github scopes from the process environment.",
    )(f)
    f = click.option(
        "--context",
        "context_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="YAML/JSON file with any of: " + ", ".join(SCOPE_NAMES) + ".",
    )(f)
    return f


def load_context_file(path: Path) -> dict[str, Any]:
    """Read a context file and return its scopes.

    Raises:
        ConfigError: If the file is not YAML/JSON, is not a mapping, or
            names an unknown scope.
    """
    try:
        loaded = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML/JSON in context file {path}: {e}") from e
    if loaded is None:
        return {}
    if not isinstance(loaded, Mapping):
        raise ConfigError(
            f"Context file {path} must contain a mapping of scopes",
            value=type(loaded).__name__,
        )
    # Validates scope names and types.
    normalize_context(loaded)
    return dict(loaded)


def build_eval_context(
    context_file: Path | None,
    from_env: bool,
    environ: Mapping[str, str] | None = None,
) -> EvalContext:
    """Combine the environment seed and the context file.

    Scopes present in the file replace the ones derived from the environment.
    """
    base = context_from_environ(environ) if from_env else EvalContext()
    if context_file is None:
        return base
    return base.replace(**load_context_file(context_file))


def make_evaluator(
    cli_ctx: CLIContext,
    context_file: Path | None,
    from_env: bool,
) -> ExpressionEvaluator:
    return ExpressionEvaluator(
        build_eval_context(context_file, from_env),
        max_depth=cli_ctx.config.expressions.max_depth,
    )
