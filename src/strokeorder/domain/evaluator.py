"""Stroke-order evaluation: evaluator, component resolver, aggregator.

The three stages are mutually recursive: the evaluator walks a parsed
decomposition and hands leaf components to the resolver; the resolver
either finds manual data or aggregates the component's own
decompositions, which sends it back through the evaluator.

Every stage returns an :class:`Outcome`. Nothing here raises for data
problems, and no cursor is shared between frames: ``evaluate`` returns the
position it advanced to.

INVARIANT: The engine holds only read-only configuration. Per-call state
(the resolution path and memo cache) lives in a ``_Request`` created by
each public method, so one engine can serve concurrent callers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from strokeorder.domain.errors import InvalidIdsError
from strokeorder.domain.ids import (
    Component,
    Decomposition,
    Operator,
    UnknownMarker,
    is_component_text,
    parse,
    parse_component,
)
from strokeorder.domain.outcome import Outcome
from strokeorder.domain.rules import RuleTable
from strokeorder.domain.strokes import EMPTY_ORDER, StrokeOrder

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32


class LookupService(ABC):
    """Source of manual stroke orders and known decompositions."""

    @abstractmethod
    def get_manual_stroke_order(
        self, glyph: str, variant_index: int | None = None
    ) -> StrokeOrder | None:
        """Manually recorded stroke order for *glyph*, or None."""
        ...

    @abstractmethod
    def get_decompositions(self, glyph: str) -> list[str]:
        """Known decomposition strings for *glyph*, in preference order."""
        ...


class EmptyLookup(LookupService):
    """Lookup with no data; every component resolves to NO_INFORMATION."""

    def get_manual_stroke_order(
        self, glyph: str, variant_index: int | None = None
    ) -> StrokeOrder | None:
        return None

    def get_decompositions(self, glyph: str) -> list[str]:
        return []


@dataclass
class _Request:
    """Mutable state for one top-level call."""

    path: tuple[str, ...] = ()
    memo: dict[tuple[str, int | None], Outcome] = field(default_factory=dict)
    cycles: int = 0


class StrokeOrderEngine:
    """Derives stroke orders from IDS decompositions.

    Args:
        rules: Compiled combination rules.
        lookup: Manual stroke orders and decompositions for components.
        max_depth: Maximum nesting of component resolutions before the
            chain is reported as a cycle.
    """

    def __init__(
        self,
        rules: RuleTable,
        lookup: LookupService | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._rules = rules
        self._lookup = lookup or EmptyLookup()
        self._max_depth = max_depth

    @property
    def rules(self) -> RuleTable:
        return self._rules

    @property
    def lookup(self) -> LookupService:
        return self._lookup

    # ------------------------------------------------------------------
    # Public entry points (one _Request each)
    # ------------------------------------------------------------------

    def get_stroke_order(self, decompositions: Sequence[str]) -> Outcome:
        """Aggregate candidate decompositions of one character.

        OK with an empty order means "not deducible", never an error.
        """
        return self._aggregate(decompositions, _Request())

    def evaluate_decomposition(self, raw: str) -> Outcome:
        """Evaluate a single decomposition string without aggregation."""
        return self._evaluate_full(raw, _Request())

    def resolve_character(self, text: str) -> Outcome:
        """Resolve a ``glyph`` or ``glyph/index`` the way a leaf is resolved."""
        try:
            component = parse_component(text.strip())
        except InvalidIdsError as exc:
            return Outcome.invalid(str(exc))
        return self.resolve(component, _Request())

    # ------------------------------------------------------------------
    # Evaluator
    # ------------------------------------------------------------------

    def _evaluate_full(self, raw: str, request: _Request) -> Outcome:
        """Parse and evaluate *raw*, requiring every token to be consumed."""
        try:
            decomposition = parse(raw)
        except InvalidIdsError as exc:
            return Outcome.invalid(str(exc))

        # Operands are checked as the walk reaches them, so a missing
        # component ends the walk before a later arity defect is seen.
        outcome, cursor = self.evaluate(decomposition, 0, request)
        if outcome.ok and cursor != len(decomposition):
            trailing = decomposition.render_span(cursor, len(decomposition))
            return Outcome.invalid(f"Trailing tokens {trailing!r} in {raw!r}")
        return outcome

    def evaluate(
        self, decomposition: Decomposition, cursor: int, request: _Request | None = None
    ) -> tuple[Outcome, int]:
        """Evaluate the expression starting at *cursor*.

        Returns:
            The outcome and the index just past the consumed expression.
        """
        request = request or _Request()
        tokens = decomposition.tokens
        if cursor >= len(tokens):
            return (
                Outcome.invalid(
                    f"Incomplete decomposition {decomposition.source!r}: "
                    f"operand missing at token {cursor}"
                ),
                cursor,
            )

        token = tokens[cursor]
        if isinstance(token, Operator):
            position = cursor + 1
            components: list[str] = []
            orders: list[StrokeOrder] = []
            for _ in range(token.arity):
                start = position
                outcome, position = self.evaluate(decomposition, position, request)
                if not outcome.ok:
                    return outcome, position
                components.append(decomposition.render_span(start, position))
                orders.append(outcome.order)
            return self._rules.combine(token.symbol, components, orders), position

        if isinstance(token, UnknownMarker):
            return Outcome.no_information("Unknown component"), cursor + 1

        return self.resolve(token, request), cursor + 1

    # ------------------------------------------------------------------
    # Component resolver
    # ------------------------------------------------------------------

    def resolve(self, component: Component, request: _Request | None = None) -> Outcome:
        """Stroke order of a leaf: manual data first, then its decompositions."""
        request = request or _Request()
        if not is_component_text(component.text):
            return Outcome.invalid(f"Malformed component token {component.text!r}")

        key = (component.glyph, component.variant_index)
        cached = request.memo.get(key)
        if cached is not None:
            return cached

        manual = self._lookup.get_manual_stroke_order(component.glyph, component.variant_index)
        if manual:
            outcome = Outcome.success(manual)
            request.memo[key] = outcome
            return outcome

        if component.glyph in request.path:
            request.cycles += 1
            chain = " -> ".join((*request.path, component.glyph))
            logger.warning("Decomposition cycle detected: %s", chain)
            return Outcome.cycle(f"Decomposition cycle: {chain}")
        if len(request.path) >= self._max_depth:
            request.cycles += 1
            logger.warning(
                "Resolution depth %d exceeded at %s", self._max_depth, component.text
            )
            return Outcome.cycle(
                f"Resolution depth {self._max_depth} exceeded at {component.text}"
            )

        decompositions = self._lookup.get_decompositions(component.glyph)
        outcome = Outcome.no_information(f"No stroke order for component {component.text}")
        cycles_before = request.cycles
        if decompositions:
            request.path = (*request.path, component.glyph)
            try:
                nested = self._aggregate(decompositions, request)
            finally:
                request.path = request.path[:-1]
            if not nested.ok:
                outcome = nested
            elif nested.order:
                outcome = Outcome.success(nested.order)

        # Results computed under a cycle depend on the path taken to reach them.
        if request.cycles == cycles_before:
            request.memo[key] = outcome
        return outcome

    # ------------------------------------------------------------------
    # Aggregator
    # ------------------------------------------------------------------

    def _aggregate(self, decompositions: Sequence[str], request: _Request) -> Outcome:
        accepted: StrokeOrder | None = None
        for raw in decompositions:
            outcome = self._evaluate_full(raw, request)
            if outcome.ok:
                if accepted is None:
                    accepted = outcome.order
                elif outcome.order != accepted:
                    logger.debug("Decomposition %s disagrees with earlier candidates", raw)
                    return Outcome.ambiguous(accepted, outcome.order)
                continue
            if outcome.skippable:
                logger.debug("Skipping %s: %s", raw, outcome.message)
                continue
            return outcome
        return Outcome.success(accepted if accepted is not None else EMPTY_ORDER)
