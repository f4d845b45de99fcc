"""Tests for service telemetry spans."""

from __future__ import annotations

from strokeorder.infrastructure.workspace import Workspace
from strokeorder.services.check import CheckService
from strokeorder.services.stroke_order import StrokeOrderService
from strokeorder.services.telemetry import (
    Span,
    set_telemetry,
    get_current_span,
    trace_span,
)


class TestTelemetry:
    def test_disabled_by_default(self, workspace: Workspace) -> None:
        result = StrokeOrderService(workspace).get_stroke_order(["⿰木木"])
        assert result.meta is None
        assert get_current_span() is None

    def test_trace_span_yields_none_when_disabled(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_enabled_attaches_span(self, workspace: Workspace) -> None:
        set_telemetry(True)
        result = StrokeOrderService(workspace).get_stroke_order(["⿰木木", "⿱木木"])
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "StrokeOrderService.get_stroke_order"
        assert telemetry["annotations"] == {"candidates": 2}
        assert telemetry["duration_ms"] >= 0

    def test_child_spans(self, workspace: Workspace) -> None:
        set_telemetry(True)
        result = CheckService(workspace).check()
        children = [c["name"] for c in result.meta["telemetry"]["children"]]
        assert children == [
            "decomposition_syntax",
            "dependency_cycles",
            "character_consistency",
        ]


class TestSpan:
    def test_open_span_has_zero_duration(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_to_dict_omits_empty_fields(self) -> None:
        span = Span(name="s")
        span.finish()
        assert set(span.to_dict()) == {"name", "duration_ms"}
