"""CLI entry point for notifycard.

This module defines the Click-based command-line interface.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from notifycard import __version__
from notifycard.cli.commands.evaluate import eval_command
from notifycard.cli.commands.render import render_command
from notifycard.cli.context import CLIContext, ExitCode
from notifycard.cli.output import format_error
from notifycard.config import load_config
from notifycard.exceptions import ConfigError
from notifycard.logging import configure_logging

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="notifycard")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (overrides ./notifycard.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Path | None,
    verbose: int,
    quiet: bool,
) -> None:
    """notifycard - render CI notification templates with {{ expressions }}."""
    ctx.ensure_object(dict)

    # Values from .env populate the envs scope and appEnv lookups; real
    # environment variables win.
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details or None), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_file,
        verbosity=verbose,
        quiet=quiet,
    )

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)
    configure_logging(level=level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(eval_command)
cli.add_command(render_command)

if __name__ == "__main__":
    cli()
