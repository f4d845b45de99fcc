"""Command: derive a stroke order from candidate decompositions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strokeorder.commands._base import StrokeCommand

if TYPE_CHECKING:
    from strokeorder.commands._context import AppContext


@click.command(
    cls=StrokeCommand,
    examples="""\
  strokeorder order ⿰木木
  strokeorder order ⿱木林 ⿱木⿰木木
  strokeorder --json order ⿴口十
  strokeorder -q order --no-glyphs ⿰日月""",
)
@click.argument("decompositions", nargs=-1)
@click.option("--glyphs/--no-glyphs", "with_glyphs", default=None, help="Show stroke glyphs.")
@click.pass_obj
def order(app: AppContext, decompositions: tuple[str, ...], with_glyphs: bool | None) -> None:
    """Derive one stroke order from the DECOMPOSITIONS of a character.

    Candidates that lack data are skipped; candidates that disagree fail.
    """
    from strokeorder.services.stroke_order import StrokeOrderService

    if with_glyphs is None:
        with_glyphs = app.settings.output.show_glyphs
    svc = StrokeOrderService(app.workspace)
    app.emit(svc.get_stroke_order(list(decompositions), with_glyphs=with_glyphs))
