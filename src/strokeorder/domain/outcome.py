"""Outcome: tagged result of every resolution step.

The evaluator, resolver, rule engine, and aggregator all return an
:class:`Outcome` instead of raising. The aggregator dispatches on
``kind`` to decide whether a candidate is skipped, aborts the call, or is
reported as a conflict.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from strokeorder.domain.strokes import EMPTY_ORDER, StrokeOrder


class OutcomeKind(StrEnum):
    """Classification of a resolution result."""

    OK = "ok"
    NO_INFORMATION = "no_information"
    INVALID_IDS = "invalid_ids"
    AMBIGUOUS = "ambiguous"
    CYCLE = "cycle"


# Kinds the aggregator treats as "this candidate says nothing".
SKIPPABLE_KINDS: frozenset[OutcomeKind] = frozenset(
    {OutcomeKind.NO_INFORMATION, OutcomeKind.CYCLE}
)


@dataclass(frozen=True)
class Outcome:
    """Result of resolving a decomposition, component, or combination.

    Attributes:
        kind: What happened.
        order: The derived stroke order (empty unless ``kind`` is OK).
        message: Human-readable explanation for non-OK kinds.
        conflict: For AMBIGUOUS, the two disagreeing orders.
    """

    kind: OutcomeKind
    order: StrokeOrder = EMPTY_ORDER
    message: str = ""
    conflict: tuple[StrokeOrder, StrokeOrder] | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def skippable(self) -> bool:
        return self.kind in SKIPPABLE_KINDS

    @classmethod
    def success(cls, order: StrokeOrder) -> Outcome:
        return cls(kind=OutcomeKind.OK, order=order)

    @classmethod
    def no_information(cls, message: str) -> Outcome:
        return cls(kind=OutcomeKind.NO_INFORMATION, message=message)

    @classmethod
    def invalid(cls, message: str) -> Outcome:
        return cls(kind=OutcomeKind.INVALID_IDS, message=message)

    @classmethod
    def cycle(cls, message: str) -> Outcome:
        return cls(kind=OutcomeKind.CYCLE, message=message)

    @classmethod
    def ambiguous(cls, first: StrokeOrder, second: StrokeOrder) -> Outcome:
        return cls(
            kind=OutcomeKind.AMBIGUOUS,
            message=f"Ambiguous stroke order: {first.text!r} vs {second.text!r}",
            conflict=(first, second),
        )
