"""Command: explain why a decomposition yields no stroke order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strokeorder.commands._base import StrokeCommand

if TYPE_CHECKING:
    from strokeorder.commands._context import AppContext


@click.command(
    cls=StrokeCommand,
    examples="""\
  strokeorder diagnose ⿰木
  strokeorder diagnose ⿰木？
  strokeorder -q diagnose ⿰木木""",
)
@click.argument("decomposition")
@click.pass_obj
def diagnose(app: AppContext, decomposition: str) -> None:
    """Evaluate a single DECOMPOSITION and report the first problem found."""
    from strokeorder.services.stroke_order import StrokeOrderService

    app.emit(StrokeOrderService(app.workspace).get_stroke_order_error(decomposition))
