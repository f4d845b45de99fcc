"""Command: stroke order of a character from the lookup data."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strokeorder.commands._base import StrokeCommand

if TYPE_CHECKING:
    from strokeorder.commands._context import AppContext


@click.command(
    cls=StrokeCommand,
    examples="""\
  strokeorder char 林
  strokeorder char 木/2
  strokeorder --json char 森""",
)
@click.argument("character")
@click.option("--glyphs/--no-glyphs", "with_glyphs", default=None, help="Show stroke glyphs.")
@click.pass_obj
def char(app: AppContext, character: str, with_glyphs: bool | None) -> None:
    """Look up or derive the stroke order of CHARACTER (glyph or glyph/index)."""
    from strokeorder.services.stroke_order import StrokeOrderService

    if with_glyphs is None:
        with_glyphs = app.settings.output.show_glyphs
    svc = StrokeOrderService(app.workspace)
    app.emit(svc.get_character_stroke_order(character, with_glyphs=with_glyphs))
