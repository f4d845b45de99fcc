"""Command: render stroke names as CJK stroke glyphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from strokeorder.commands._base import StrokeCommand

if TYPE_CHECKING:
    from strokeorder.commands._context import AppContext


@click.command(
    cls=StrokeCommand,
    examples="""\
  strokeorder glyphs H S P N
  strokeorder glyphs H-S-P-N
  strokeorder -q glyphs 'S HZ H'""",
)
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def glyphs(app: AppContext, names: tuple[str, ...]) -> None:
    """Convert stroke NAMES (space or dash separated) to Unicode stroke glyphs."""
    from strokeorder.services.stroke_order import StrokeOrderService

    svc = StrokeOrderService(app.workspace)
    app.emit(svc.get_unicode_forms_for_stroke_names(" ".join(names)))
