"""Stroke name → Unicode stroke glyph mapping (CJK Strokes block, U+31C0..)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from strokeorder.domain.errors import StrokeNameConfigError
from strokeorder.domain.strokes import StrokeOrder, split_stroke_names

logger = logging.getLogger(__name__)


class StrokeNameMap:
    """Read-only ``name -> glyph`` lookup. Unknown names map to themselves."""

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._mapping: Mapping[str, str] = MappingProxyType(dict(mapping or {}))

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, name: object) -> bool:
        return name in self._mapping

    def glyph(self, name: str) -> str:
        return self._mapping.get(name, name)

    def as_dict(self) -> dict[str, str]:
        return dict(self._mapping)


def to_glyphs(order: StrokeOrder | str, name_map: StrokeNameMap) -> str:
    """Concatenate the glyph for every stroke name in *order*.

    Examples:
        >>> to_glyphs("H S", StrokeNameMap({"H": "㇐", "S": "㇑"}))
        '㇐㇑'
    """
    names = order.names if isinstance(order, StrokeOrder) else split_stroke_names(order)
    return "".join(name_map.glyph(name) for name in names)


def parse_stroke_names(lines: Iterable[str], *, source: str = "") -> StrokeNameMap:
    """Build a :class:`StrokeNameMap` from ``name,glyph`` lines.

    Blank lines and ``#`` comments are skipped. When a name appears more
    than once the first occurrence wins.

    Raises:
        StrokeNameConfigError: On a line without a comma, an empty name,
            or a glyph that is not exactly one character.
    """
    mapping: dict[str, str] = {}
    for number, raw in enumerate(lines, start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        name, sep, glyph = stripped.partition(",")
        name, glyph = name.strip(), glyph.strip()
        if not sep or not name:
            raise StrokeNameConfigError(
                f"Expected 'name,glyph', got {stripped!r}", source=source, line=number
            )
        if len(glyph) != 1:
            raise StrokeNameConfigError(
                f"Glyph for {name!r} must be a single character, got {glyph!r}",
                source=source,
                line=number,
            )
        if name in mapping:
            logger.debug("Duplicate stroke name %s at line %d ignored", name, number)
            continue
        mapping[name] = glyph
    return StrokeNameMap(mapping)
