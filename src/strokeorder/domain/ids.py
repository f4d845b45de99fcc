"""IDS tokens and the decomposition parser.

An Ideographic Description Sequence is prefix notation: an operator
glyph is followed by its two (or three) operands, each of which is a
component glyph or another operator expression::

    ⿰木木        two 木 side by side
    ⿱⿰木木木    林 over 木
    ⿰木/2水      variant 2 of 木 next to 水

Parsing only classifies code points. Arity and nesting are checked by the
evaluator, which is the only stage that can see structural defects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from strokeorder.domain.errors import InvalidIdsError

BINARY_OPERATORS: frozenset[str] = frozenset("⿰⿱⿴⿵⿶⿷⿸⿹⿺⿻")
TERNARY_OPERATORS: frozenset[str] = frozenset("⿲⿳")
UNKNOWN_MARKERS: frozenset[str] = frozenset("？?")

OPERATOR_ARITY: dict[str, int] = {
    **{op: 2 for op in BINARY_OPERATORS},
    **{op: 3 for op in TERNARY_OPERATORS},
}

# A single glyph with an optional /<digits> variant suffix; indices are
# ASCII digits only.
COMPONENT_PATTERN = re.compile(r"^([^\d\s/])(?:/([0-9]+))?$")
ASCII_DIGITS: frozenset[str] = frozenset("0123456789")


@dataclass(frozen=True)
class Operator:
    """A composition operator and the number of operands it takes."""

    symbol: str
    arity: int

    @property
    def text(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Component:
    """A leaf glyph, optionally pinned to a numbered variant."""

    glyph: str
    variant_index: int | None = None

    @property
    def text(self) -> str:
        if self.variant_index is None:
            return self.glyph
        return f"{self.glyph}/{self.variant_index}"


@dataclass(frozen=True)
class UnknownMarker:
    """Placeholder for a component nobody has identified yet."""

    symbol: str = "？"

    @property
    def text(self) -> str:
        return self.symbol


Token: TypeAlias = Operator | Component | UnknownMarker


@dataclass(frozen=True)
class Decomposition:
    """Immutable token sequence parsed from one decomposition string."""

    source: str
    tokens: tuple[Token, ...]

    def __len__(self) -> int:
        return len(self.tokens)

    def __bool__(self) -> bool:
        return bool(self.tokens)

    def render(self) -> str:
        """Canonical text of the whole sequence (whitespace removed)."""
        return self.render_span(0, len(self.tokens))

    def render_span(self, start: int, end: int) -> str:
        """Canonical text of ``tokens[start:end]``."""
        return "".join(token.text for token in self.tokens[start:end])


def is_component_text(text: str) -> bool:
    """Whether *text* is one leaf glyph with an optional variant suffix.

    Operator glyphs and unknown markers have the shape of a glyph but are
    never components.
    """
    match = COMPONENT_PATTERN.match(text)
    if match is None:
        return False
    glyph = match.group(1)
    return glyph not in OPERATOR_ARITY and glyph not in UNKNOWN_MARKERS


def parse_component(text: str) -> Component:
    """Parse a single ``glyph`` or ``glyph/index`` component token.

    Raises:
        InvalidIdsError: If *text* is not exactly one glyph with an
            optional numeric variant suffix.
    """
    match = COMPONENT_PATTERN.match(text)
    if match is None or not is_component_text(text):
        raise InvalidIdsError(f"Malformed component token {text!r}")
    glyph, index = match.groups()
    return Component(glyph=glyph, variant_index=int(index) if index else None)


def parse(raw: str) -> Decomposition:
    """Split a decomposition string into tokens in a single pass.

    Whitespace between tokens is ignored, so a whitespace-only string
    parses to the empty decomposition.

    Raises:
        InvalidIdsError: On a digit or ``/`` that is not part of a
            ``glyph/<digits>`` variant suffix.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(raw)
    while pos < length:
        char = raw[pos]
        if char.isspace():
            pos += 1
            continue
        if char in OPERATOR_ARITY:
            tokens.append(Operator(symbol=char, arity=OPERATOR_ARITY[char]))
            pos += 1
            continue
        if char in UNKNOWN_MARKERS:
            tokens.append(UnknownMarker(symbol=char))
            pos += 1
            continue
        if char.isdigit() or char == "/":
            raise InvalidIdsError(
                f"Unexpected {char!r} at position {pos} in {raw!r}",
                position=pos,
            )

        variant: int | None = None
        pos += 1
        if pos < length and raw[pos] == "/":
            end = pos + 1
            while end < length and raw[end] in ASCII_DIGITS:
                end += 1
            if end == pos + 1:
                raise InvalidIdsError(
                    f"Variant suffix without digits at position {pos} in {raw!r}",
                    position=pos,
                )
            variant = int(raw[pos + 1 : end])
            pos = end
        tokens.append(Component(glyph=char, variant_index=variant))

    return Decomposition(source=raw, tokens=tuple(tokens))
