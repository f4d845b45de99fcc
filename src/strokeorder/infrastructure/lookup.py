"""Lookup data: manual stroke orders and known decompositions.

The on-disk format is a YAML mapping keyed by glyph. A ``/<digits>`` key
suffix records the stroke order of a numbered variant::

    characters:
      木:
        strokes: H S P N
      木/2:
        strokes: H S P D
      林:
        decompositions: ["⿰木/2木"]

Both ``strokes`` and ``decompositions`` are optional. Decompositions are
attached to the base glyph only.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from importlib import resources
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from strokeorder.domain.errors import InvalidIdsError, LookupDataError
from strokeorder.domain.evaluator import LookupService
from strokeorder.domain.ids import parse_component
from strokeorder.domain.strokes import StrokeOrder

DEFAULT_LOOKUP = "components.yaml"


class MappingLookup(LookupService):
    """In-memory lookup backed by two dicts.

    Args:
        strokes: ``(glyph, variant_index) -> stroke order text``. A plain
            glyph key is shorthand for ``(glyph, None)``.
        decompositions: ``glyph -> decomposition strings``.
    """

    def __init__(
        self,
        strokes: Mapping[str | tuple[str, int | None], str | StrokeOrder] | None = None,
        decompositions: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self._strokes: dict[tuple[str, int | None], StrokeOrder] = {}
        for key, value in (strokes or {}).items():
            normalized = key if isinstance(key, tuple) else (key, None)
            order = value if isinstance(value, StrokeOrder) else StrokeOrder.from_text(value)
            self._strokes[normalized] = order
        self._decompositions: dict[str, tuple[str, ...]] = {
            glyph: tuple(items) for glyph, items in (decompositions or {}).items()
        }

    def get_manual_stroke_order(
        self, glyph: str, variant_index: int | None = None
    ) -> StrokeOrder | None:
        return self._strokes.get((glyph, variant_index))

    def get_decompositions(self, glyph: str) -> list[str]:
        return list(self._decompositions.get(glyph, ()))

    def glyphs(self) -> list[str]:
        """Every base glyph that has manual data or decompositions."""
        seen = dict.fromkeys(glyph for glyph, _ in self._strokes)
        seen.update(dict.fromkeys(self._decompositions))
        return list(seen)

    def all_decompositions(self) -> dict[str, list[str]]:
        return {glyph: list(items) for glyph, items in self._decompositions.items()}


def _as_text(value: Any, *, key: str, source: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return " ".join(value)
    msg = f"'strokes' for {key!r} must be a string or list of strings"
    raise LookupDataError(msg, source=source)


def build_lookup(data: Mapping[str, Any], *, source: str = "") -> MappingLookup:
    """Validate a parsed lookup document and build a :class:`MappingLookup`.

    Raises:
        LookupDataError: If the document does not have the expected shape.
    """
    characters = data.get("characters", {}) if isinstance(data, Mapping) else None
    if not isinstance(characters, Mapping):
        raise LookupDataError("Expected a 'characters' mapping", source=source)

    strokes: dict[tuple[str, int | None], str] = {}
    decompositions: dict[str, list[str]] = {}
    for raw_key, entry in characters.items():
        key = str(raw_key)
        try:
            component = parse_component(key)
        except InvalidIdsError as exc:
            raise LookupDataError(f"Invalid character key {key!r}", source=source) from exc
        if not isinstance(entry, Mapping):
            raise LookupDataError(f"Entry for {key!r} must be a mapping", source=source)

        if entry.get("strokes"):
            text = _as_text(entry["strokes"], key=key, source=source)
            strokes[(component.glyph, component.variant_index)] = text

        items = entry.get("decompositions") or []
        if isinstance(items, str):
            items = [items]
        if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
            msg = f"'decompositions' for {key!r} must be a list of strings"
            raise LookupDataError(msg, source=source)
        items = [i for i in items if i.strip()]
        if items and component.variant_index is not None:
            msg = f"Decompositions for {key!r} belong on the base glyph {component.glyph!r}"
            raise LookupDataError(msg, source=source)
        if items:
            decompositions.setdefault(component.glyph, []).extend(items)

    return MappingLookup(strokes, decompositions)


def load_lookup(path: Path | None = None) -> MappingLookup:
    """Read a YAML lookup file (or the bundled sample when *path* is None).

    Raises:
        LookupDataError: If the file cannot be read or parsed.
    """
    source = str(path) if path is not None else f"<bundled {DEFAULT_LOOKUP}>"
    try:
        if path is None:
            resource = resources.files("strokeorder").joinpath(f"data/{DEFAULT_LOOKUP}")
            text = resource.read_text(encoding="utf-8")
        else:
            text = path.read_text(encoding="utf-8")
        data = YAML(typ="safe").load(text)
    except (OSError, UnicodeError, YAMLError) as exc:
        raise LookupDataError(f"Cannot read lookup data: {exc}", source=source) from exc
    return build_lookup(data or {}, source=source)
