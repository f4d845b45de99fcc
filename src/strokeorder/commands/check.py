"""Command: integrity check of rules, stroke names, and lookup data."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strokeorder.commands._base import StrokeCommand

if TYPE_CHECKING:
    from strokeorder.commands._context import AppContext


@click.command(
    cls=StrokeCommand,
    examples="""\
  strokeorder check
  strokeorder check --errors-only
  strokeorder --json check""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool) -> None:
    """Check the configured data for syntax errors, cycles, and conflicts."""
    from strokeorder.services.check import CheckService

    threshold = "error" if errors_only else min_severity
    app.emit(CheckService(app.workspace).check(min_severity=threshold))
