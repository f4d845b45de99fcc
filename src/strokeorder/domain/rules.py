"""Combination rules: how an operator merges its operands' stroke orders.

A rule table is a list of text lines, one rule per line::

    # operator  template  [| index kind value]...
    ⿰ 1 2
    ⿴ 1-2-H | 1 is 口囗
    ⿺ 2 1 | 1 has P-N

The template is a space/dash separated list of back-references (``1``..``3``,
the operand stroke orders) and literal stroke names. Filters restrict a
rule to operands that are one of a set of characters (``is``) or that have
an exact stroke order (``has``). Filters may also follow the template
without ``|`` separators when their values contain no spaces.

Lines are compiled into :class:`CombinationRule` values once, at load time.
Matching is first-match-in-table-order: there is no notion of a "more
specific" rule.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TypeAlias
from enum import StrEnum

from strokeorder.domain.errors import RuleConfigError
from strokeorder.domain.ids import OPERATOR_ARITY
from strokeorder.domain.outcome import Outcome
from strokeorder.domain.strokes import StrokeOrder

logger = logging.getLogger(__name__)

_HEAD_PATTERN = re.compile(r"^(?P<op>\S)\s+(?P<rest>.+)$")
_FILTER_PATTERN = re.compile(r"^(?P<index>[123])\s+(?P<kind>is|has)\s+(?P<value>.+)$")
_INLINE_FILTER_START = re.compile(r"(?:^|\s)[123]\s+(?:is|has)\s")
_INLINE_FILTER = re.compile(r"([123])\s+(is|has)\s+(\S+)")
_TEMPLATE_SPLIT = re.compile(r"([\s\-]+)")
_BACK_REFERENCE = re.compile(r"[0-9]+")


class FilterKind(StrEnum):
    IS = "is"
    HAS = "has"


@dataclass(frozen=True)
class BackRef:
    """Template slot replaced by the stroke order of operand ``index``."""

    index: int


@dataclass(frozen=True)
class Literal:
    """Template slot emitted verbatim."""

    name: str


Slot: TypeAlias = BackRef | Literal


@dataclass(frozen=True)
class Filter:
    """Condition on one operand (1-based ``component_index``)."""

    component_index: int
    kind: FilterKind
    characters: frozenset[str] = frozenset()
    pattern: StrokeOrder | None = None

    def passes(self, components: Sequence[str], sub_orders: Sequence[StrokeOrder]) -> bool:
        i = self.component_index - 1
        if self.kind is FilterKind.IS:
            text = components[i]
            return bool(text) and text[0] in self.characters
        return sub_orders[i] == self.pattern


@dataclass(frozen=True)
class CombinationRule:
    """One compiled rule line."""

    operator: str
    template: tuple[Slot | str, ...]  # slots interleaved with separator strings
    filters: tuple[Filter, ...] = ()
    line: int | None = None

    @property
    def slots(self) -> tuple[Slot, ...]:
        return tuple(part for part in self.template if not isinstance(part, str))

    def matches(self, components: Sequence[str], sub_orders: Sequence[StrokeOrder]) -> bool:
        return all(f.passes(components, sub_orders) for f in self.filters)

    def render(self, sub_orders: Sequence[StrokeOrder]) -> StrokeOrder:
        """Substitute back-references, keeping the template's separators."""
        parts: list[str] = []
        for part in self.template:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, BackRef):
                parts.append(sub_orders[part.index - 1].text)
            else:
                parts.append(part.name)
        return StrokeOrder.from_text("".join(parts))


class RuleTable:
    """Ordered, read-only collection of combination rules."""

    def __init__(self, rules: Iterable[CombinationRule]) -> None:
        self._rules: tuple[CombinationRule, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[CombinationRule]:
        return iter(self._rules)

    @property
    def rules(self) -> tuple[CombinationRule, ...]:
        return self._rules

    def combine(
        self,
        operator: str,
        components: Sequence[str],
        sub_orders: Sequence[StrokeOrder],
    ) -> Outcome:
        """Render the first rule for *operator* whose filters all pass.

        Args:
            operator: The operator glyph.
            components: Text of each operand as written in the decomposition.
            sub_orders: Resolved stroke order of each operand.
        """
        for rule in self._rules:
            if rule.operator != operator:
                continue
            if rule.matches(components, sub_orders):
                logger.debug(
                    "Rule at line %s matched %s%s", rule.line, operator, "".join(components)
                )
                return Outcome.success(rule.render(sub_orders))
        return Outcome.no_information(
            f"No rule found for {operator} with operands {', '.join(components)}"
        )


# ---------------------------------------------------------------------------
# Rule-line compiler
# ---------------------------------------------------------------------------


def _compile_template(
    text: str, arity: int, *, source: str, line: int | None
) -> tuple[Slot | str, ...]:
    parts: list[Slot | str] = []
    for piece in _TEMPLATE_SPLIT.split(text.strip()):
        if not piece:
            continue
        if _TEMPLATE_SPLIT.fullmatch(piece):
            parts.append(piece)
        elif _BACK_REFERENCE.fullmatch(piece):
            index = int(piece)
            if not 1 <= index <= arity:
                raise RuleConfigError(
                    f"Back-reference {index} out of range for arity {arity}",
                    source=source,
                    line=line,
                )
            parts.append(BackRef(index))
        elif piece.isdigit():
            raise RuleConfigError(
                f"Malformed back-reference {piece!r}", source=source, line=line
            )
        else:
            parts.append(Literal(piece))
    if not any(not isinstance(part, str) for part in parts):
        raise RuleConfigError("Empty template", source=source, line=line)
    return tuple(parts)


def _compile_filter(
    index: str, kind: str, value: str, arity: int, *, source: str, line: int | None
) -> Filter:
    component_index = int(index)
    if component_index > arity:
        raise RuleConfigError(
            f"Filter index {component_index} out of range for arity {arity}",
            source=source,
            line=line,
        )
    value = value.strip()
    if not value:
        raise RuleConfigError("Empty filter value", source=source, line=line)
    if kind == FilterKind.IS:
        return Filter(component_index, FilterKind.IS, characters=frozenset(value))
    return Filter(component_index, FilterKind.HAS, pattern=StrokeOrder.from_text(value))


def parse_rule_line(text: str, *, source: str = "", line: int | None = None) -> CombinationRule:
    """Compile one rule line.

    Raises:
        RuleConfigError: If the line does not follow the rule grammar.
    """
    head = _HEAD_PATTERN.match(text.strip())
    if head is None:
        raise RuleConfigError(f"Malformed rule {text.strip()!r}", source=source, line=line)
    operator = head.group("op")
    arity = OPERATOR_ARITY.get(operator)
    if arity is None:
        raise RuleConfigError(f"Unknown operator {operator!r}", source=source, line=line)

    rest = head.group("rest")
    filters: list[Filter] = []
    if "|" in rest:
        template_text, *filter_texts = rest.split("|")
        for filter_text in filter_texts:
            match = _FILTER_PATTERN.match(filter_text.strip())
            if match is None:
                raise RuleConfigError(
                    f"Malformed filter {filter_text.strip()!r}", source=source, line=line
                )
            filters.append(
                _compile_filter(
                    match.group("index"),
                    match.group("kind"),
                    match.group("value"),
                    arity,
                    source=source,
                    line=line,
                )
            )
    else:
        start = _INLINE_FILTER_START.search(rest)
        template_text = rest if start is None else rest[: start.start()]
        if start is not None:
            filter_text = rest[start.start() :].strip()
            consumed = 0
            for match in _INLINE_FILTER.finditer(filter_text):
                if filter_text[consumed : match.start()].strip():
                    break
                filters.append(_compile_filter(*match.groups(), arity, source=source, line=line))
                consumed = match.end()
            if filter_text[consumed:].strip():
                raise RuleConfigError(
                    f"Malformed filter {filter_text[consumed:].strip()!r}",
                    source=source,
                    line=line,
                )

    template = _compile_template(template_text, arity, source=source, line=line)
    return CombinationRule(operator=operator, template=template, filters=tuple(filters), line=line)


def compile_rules(lines: Iterable[str], *, source: str = "") -> RuleTable:
    """Compile raw rule lines into a :class:`RuleTable`.

    Blank lines and ``#`` comments are skipped. The first malformed line
    aborts compilation with :class:`RuleConfigError`.
    """
    rules: list[CombinationRule] = []
    for number, raw in enumerate(lines, start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        rules.append(parse_rule_line(stripped, source=source, line=number))
    return RuleTable(rules)
