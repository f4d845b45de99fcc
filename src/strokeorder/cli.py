"""Root CLI group for strokeorder with global flags and command registration."""

from __future__ import annotations

import click

from strokeorder import __version__
from strokeorder.commands import register_commands
from strokeorder.commands._context import EXIT_CONFIG_ERROR, AppContext
from strokeorder.config.settings import StrokeSettings
from strokeorder.domain.errors import ConfigurationError


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="strokeorder")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the answer.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing details.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """strokeorder: derive CJK stroke orders from IDS decompositions."""
    ctx.ensure_object(dict)
    try:
        settings = StrokeSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ConfigurationError as exc:
        click.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
