"""StrokeOrderService: the public stroke-order operations.

Four read-only surfaces over the engine:
- get_stroke_order: aggregate candidate decompositions of one character
- get_stroke_order_error: diagnose a single decomposition
- get_unicode_forms_for_stroke_names: render stroke names as glyphs
- get_character_stroke_order: resolve a glyph from the lookup data

Engine outcomes map onto results as follows. OK (including the empty
"not deducible" order) is ``ok=True``. INVALID_IDS and AMBIGUOUS are
``ok=False`` data errors. A broken rule table, name map, or lookup file is
``ok=False`` with code CONFIG_ERROR.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from strokeorder.domain.errors import ConfigurationError
from strokeorder.domain.names import to_glyphs
from strokeorder.domain.outcome import Outcome, OutcomeKind
from strokeorder.domain.strokes import StrokeOrder
from strokeorder.services.base import BaseService
from strokeorder.services.result import AMBIGUOUS, INVALID_IDS, ServiceResult
from strokeorder.services.telemetry import get_current_span, traced


def _order_payload(order: StrokeOrder) -> dict[str, Any]:
    return {"stroke_order": order.text, "names": list(order.names), "deducible": bool(order)}


def _failure(op: str, outcome: Outcome, **detail: Any) -> ServiceResult:
    """Map a non-OK, non-skippable outcome to an error result."""
    if outcome.kind is OutcomeKind.AMBIGUOUS and outcome.conflict is not None:
        first, second = outcome.conflict
        detail.update(
            first=first.text,
            second=second.text,
            first_names=list(first.names),
            second_names=list(second.names),
        )
        return ServiceResult.failure(op, AMBIGUOUS, outcome.message, **detail)
    return ServiceResult.failure(op, INVALID_IDS, outcome.message, **detail)


class StrokeOrderService(BaseService):
    """Stroke-order derivation and rendering."""

    def _glyphs(self, order: StrokeOrder) -> str:
        return to_glyphs(order, self._workspace.names)

    # ------------------------------------------------------------------
    # get_stroke_order
    # ------------------------------------------------------------------

    @traced
    def get_stroke_order(
        self, decompositions: Sequence[str], *, with_glyphs: bool = False
    ) -> ServiceResult:
        """Derive one consistent stroke order from candidate decompositions.

        An empty ``stroke_order`` means no candidate was informative.

        Args:
            decompositions: Candidate IDS strings, in preference order.
            with_glyphs: Also render the order as Unicode stroke glyphs.
        """
        op = "get_stroke_order"
        span = get_current_span()
        if span is not None:
            span.annotate(candidates=len(decompositions))
        try:
            outcome = self._workspace.engine.get_stroke_order(list(decompositions))
            if not outcome.ok:
                return _failure(op, outcome, decompositions=list(decompositions))
            data = _order_payload(outcome.order)
            if with_glyphs:
                data["glyphs"] = self._glyphs(outcome.order)
        except ConfigurationError as exc:
            return self._config_failure(op, exc)

        warnings = [] if outcome.order else ["Stroke order is not deducible"]
        return ServiceResult.success(op, data, warnings=warnings)

    # ------------------------------------------------------------------
    # get_stroke_order_error
    # ------------------------------------------------------------------

    @traced
    def get_stroke_order_error(self, decomposition: str) -> ServiceResult:
        """Explain why *decomposition* does not yield a stroke order.

        ``data["error"]`` is empty exactly when evaluation succeeded.
        """
        op = "get_stroke_order_error"
        try:
            outcome = self._workspace.engine.evaluate_decomposition(decomposition)
        except ConfigurationError as exc:
            return self._config_failure(op, exc)

        data: dict[str, Any] = {
            "decomposition": decomposition,
            "kind": str(outcome.kind),
            "error": "" if outcome.ok else outcome.message,
        }
        if outcome.ok:
            data.update(_order_payload(outcome.order))
        return ServiceResult.success(op, data)

    # ------------------------------------------------------------------
    # get_unicode_forms_for_stroke_names
    # ------------------------------------------------------------------

    @traced
    def get_unicode_forms_for_stroke_names(self, stroke_order: str) -> ServiceResult:
        """Render stroke names as CJK stroke glyphs; unknown names pass through."""
        op = "get_unicode_forms_for_stroke_names"
        order = StrokeOrder.from_text(stroke_order)
        try:
            glyphs = self._glyphs(order)
        except ConfigurationError as exc:
            return self._config_failure(op, exc)
        return ServiceResult.success(
            op, {"stroke_order": order.text, "names": list(order.names), "glyphs": glyphs}
        )

    # ------------------------------------------------------------------
    # get_character_stroke_order
    # ------------------------------------------------------------------

    @traced
    def get_character_stroke_order(
        self, glyph: str, *, with_glyphs: bool = False
    ) -> ServiceResult:
        """Resolve *glyph* (optionally ``glyph/index``) from the lookup data."""
        op = "get_character_stroke_order"
        try:
            outcome = self._workspace.engine.resolve_character(glyph)
            if outcome.kind in (OutcomeKind.INVALID_IDS, OutcomeKind.AMBIGUOUS):
                return _failure(op, outcome, character=glyph)
            order = outcome.order
            data = {"character": glyph, **_order_payload(order)}
            if with_glyphs:
                data["glyphs"] = self._glyphs(order)
        except ConfigurationError as exc:
            return self._config_failure(op, exc)

        warnings = [outcome.message] if outcome.message else []
        return ServiceResult.success(op, data, warnings=warnings)
