"""StrokeOrder: a sequence of stroke names that remembers its spelling.

Stroke orders are written with either spaces or dashes between names
(``"H S P D"`` or ``"H-S-P-D"``). The separator style is kept for display
but never takes part in comparison.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SEPARATOR_PATTERN = re.compile(r"[\s\-]+")


def split_stroke_names(text: str) -> tuple[str, ...]:
    """Split stroke-order text into names, ignoring separator style.

    Examples:
        >>> split_stroke_names("H S-P")
        ('H', 'S', 'P')
        >>> split_stroke_names("  ")
        ()
    """
    return tuple(part for part in _SEPARATOR_PATTERN.split(text) if part)


@dataclass(frozen=True)
class StrokeOrder:
    """Ordered stroke names plus the text they were read from.

    Equality and hashing use ``names`` only, so ``StrokeOrder.from_text("H S")``
    equals ``StrokeOrder.from_text("H-S")``.
    """

    names: tuple[str, ...]
    text: str = field(default="", compare=False)

    @classmethod
    def from_text(cls, text: str) -> StrokeOrder:
        stripped = text.strip()
        return cls(names=split_stroke_names(stripped), text=stripped)

    @classmethod
    def from_names(cls, names: list[str] | tuple[str, ...], sep: str = " ") -> StrokeOrder:
        return cls(names=tuple(names), text=sep.join(names))

    def __bool__(self) -> bool:
        return bool(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __str__(self) -> str:
        return self.text


EMPTY_ORDER = StrokeOrder(names=())
