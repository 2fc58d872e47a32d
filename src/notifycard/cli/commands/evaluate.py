from __future__ import annotations

from pathlib import Path

import click

from notifycard.cli.common import cli_error_handler, context_options, make_evaluator
from notifycard.cli.context import CLIContext
from notifycard.cli.output import format_json
from notifycard.expressions import stringify
from notifycard.logging import bind_context, get_logger


@click.command("eval")
@click.argument("expression")
@context_options
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the result as JSON instead of its template string form.",
)
@click.pass_context
def eval_command(
    ctx: click.Context,
    expression: str,
    context_file: Path | None,
    from_env: bool,
    as_json: bool,
) -> None:
    """Evaluate a single EXPRESSION and print the result.

    Examples:
        notifycard eval "1 + 1"
        notifycard eval "vars.NAME" --context ctx.yaml
        notifycard eval "github.ref_name == 'main'" --from-env --json
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    logger = get_logger(__name__)

    with cli_error_handler():
        bind_context(command="eval")
        evaluator = make_evaluator(cli_ctx, context_file, from_env)
        value = evaluator.evaluate(expression)
        logger.debug("expression_evaluated", result_type=type(value).__name__)

    click.echo(format_json(value) if as_json else stringify(value))
