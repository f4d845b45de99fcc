"""AppContext: the object every subcommand receives through ``@click.pass_obj``.

It owns the settings for one invocation, configures logging once, builds
the workspace on demand, and turns a ServiceResult into output plus an
exit status.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from strokeorder.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from strokeorder.config.settings import StrokeSettings
    from strokeorder.infrastructure.workspace import Workspace
    from strokeorder.services.result import ServiceResult

EXIT_OK = 0
EXIT_DATA_ERROR = 1
EXIT_CONFIG_ERROR = 2


def exit_code_for(result: ServiceResult) -> int:
    """Map a result to the process exit status."""
    if result.ok:
        return EXIT_OK
    if result.error is not None and result.error.is_config_error:
        return EXIT_CONFIG_ERROR
    return EXIT_DATA_ERROR


class AppContext:
    """Per-invocation state shared by the root group and its subcommands."""

    def __init__(self, settings: StrokeSettings) -> None:
        from strokeorder.config.logging import configure_logging
        from strokeorder.services.telemetry import set_telemetry

        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        set_telemetry(settings.verbose)

    @cached_property
    def workspace(self) -> Workspace:
        # Built lazily: --help and --version never touch the data files.
        from strokeorder.infrastructure.workspace import Workspace

        return Workspace(self.settings)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit non-zero when it carries an error.

        Successful output goes to stdout; failures and warnings go to
        stderr. Warnings are suppressed under ``--json`` (they are part of
        the payload) and ``--quiet``.
        """
        options = self.output_settings
        rendered = format_result(result, settings=options)
        code = exit_code_for(result)
        click.echo(rendered, err=code != EXIT_OK)
        if code != EXIT_OK:
            raise SystemExit(code)
        if options.json_output or options.quiet:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
