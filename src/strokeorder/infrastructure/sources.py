"""Configuration providers for the rule table and stroke-name map.

Each provider reads a user file when a path is configured and otherwise
falls back to the copy bundled under ``strokeorder/data/``.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from strokeorder.domain.errors import RuleConfigError, StrokeNameConfigError
from strokeorder.domain.names import StrokeNameMap, parse_stroke_names
from strokeorder.domain.rules import RuleTable, compile_rules

DEFAULT_RULES = "rules.txt"
DEFAULT_STROKE_NAMES = "stroke_names.csv"


def _read_lines(path: Path | None, default: str) -> tuple[list[str], str]:
    """Return ``(lines, source_label)`` for *path* or the bundled *default*."""
    if path is None:
        resource = resources.files("strokeorder").joinpath(f"data/{default}")
        return resource.read_text(encoding="utf-8").splitlines(), f"<bundled {default}>"
    return path.read_text(encoding="utf-8").splitlines(), str(path)


def load_rule_table(path: Path | None = None) -> RuleTable:
    """Compile the rule table from *path* (or the bundled default).

    Raises:
        RuleConfigError: If the file is unreadable or a line is malformed.
    """
    try:
        lines, source = _read_lines(path, DEFAULT_RULES)
    except (OSError, UnicodeError) as exc:
        msg = f"Cannot read rules: {exc}"
        raise RuleConfigError(msg, source=str(path or DEFAULT_RULES)) from exc
    return compile_rules(lines, source=source)


def load_stroke_names(path: Path | None = None) -> StrokeNameMap:
    """Parse the stroke-name map from *path* (or the bundled default).

    Raises:
        StrokeNameConfigError: If the file is unreadable or a line is malformed.
    """
    try:
        lines, source = _read_lines(path, DEFAULT_STROKE_NAMES)
    except (OSError, UnicodeError) as exc:
        msg = f"Cannot read stroke names: {exc}"
        raise StrokeNameConfigError(msg, source=str(path or DEFAULT_STROKE_NAMES)) from exc
    return parse_stroke_names(lines, source=source)
