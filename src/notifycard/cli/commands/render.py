from __future__ import annotations

from pathlib import Path
from typing import IO

import click
import yaml

from notifycard.cli.common import cli_error_handler, context_options, make_evaluator
from notifycard.cli.context import CLIContext
from notifycard.cli.output import format_json
from notifycard.exceptions import ConfigError, NotifyCardError
from notifycard.expressions import TemplateRenderer
from notifycard.logging import bind_context, get_logger


@click.command("render")
@click.argument("template_file", type=click.File("r", encoding="utf-8"), default="-")
@context_options
@click.option(
    "--structured",
    is_flag=True,
    default=False,
    help="Treat the input as YAML/JSON and render every string inside it.",
)
@click.pass_context
def render_command(
    ctx: click.Context,
    template_file: IO[str],
    context_file: Path | None,
    from_env: bool,
    structured: bool,
) -> None:
    """Render {{ expr }} placeholders in TEMPLATE_FILE (default: stdin).

    With --structured the input is parsed as YAML/JSON (for example a chat
    card payload), every string value and key is rendered, and the result
    is printed as JSON.

    Examples:
        notifycard render message.txt --from-env
        notifycard render card.json --structured --context ctx.yaml
        echo "Hello {{ vars.NAME }}" | notifycard render --context ctx.yaml
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    logger = get_logger(__name__)

    with cli_error_handler():
        bind_context(command="render", template=template_file.name)
        try:
            text = template_file.read()
        except UnicodeDecodeError as e:
            raise NotifyCardError(
                f"Template {template_file.name} is not valid UTF-8: {e.reason}"
            ) from e

        renderer = TemplateRenderer(
            make_evaluator(cli_ctx, context_file, from_env),
            max_placeholders=cli_ctx.config.templates.max_placeholders,
        )
        if structured:
            try:
                payload = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ConfigError(f"Template is not valid YAML/JSON: {e}") from e
            output = format_json(renderer.render_structure(payload))
        else:
            output = renderer.render(text)
        logger.debug("template_written", structured=structured)

    click.echo(output, nl=structured)
