"""Tests for the evaluator, component resolver, and aggregator."""

from __future__ import annotations

import logging

import pytest

from strokeorder.domain.evaluator import StrokeOrderEngine
from strokeorder.domain.ids import parse
from strokeorder.domain.outcome import OutcomeKind
from strokeorder.domain.rules import RuleTable, compile_rules
from strokeorder.domain.strokes import StrokeOrder
from strokeorder.infrastructure.lookup import MappingLookup


def _order(text: str) -> StrokeOrder:
    return StrokeOrder.from_text(text)


class CountingLookup(MappingLookup):
    """MappingLookup that records decomposition requests."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.requests: list[str] = []

    def get_decompositions(self, glyph: str) -> list[str]:
        self.requests.append(glyph)
        return super().get_decompositions(glyph)


class TestEvaluateDecomposition:
    def test_simple(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰木/2木")
        assert outcome.ok
        assert outcome.order == _order("H S P D H S P N")

    def test_filtered_rule(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿴口十")
        assert outcome.order == _order("S HZ H S H")

    def test_ternary(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿲十口十")
        assert outcome.order == _order("H S S HZ H H S")

    def test_nested_operator(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿱木⿰木/2木")
        assert outcome.order == _order("H S P N H S P D H S P N")

    def test_unknown_marker(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰木？")
        assert outcome.kind is OutcomeKind.NO_INFORMATION
        assert outcome.message == "Unknown component"

    def test_missing_operand_is_invalid(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰木")
        assert outcome.kind is OutcomeKind.INVALID_IDS
        assert "Incomplete" in outcome.message

    def test_trailing_tokens_are_invalid(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰木木木")
        assert outcome.kind is OutcomeKind.INVALID_IDS
        assert "Trailing tokens '木'" in outcome.message

    def test_walk_stops_at_missing_data(self, engine: StrokeOrderEngine) -> None:
        # The walk reaches the unresolvable operand before the missing one.
        assert engine.evaluate_decomposition("⿰鬼").kind is OutcomeKind.NO_INFORMATION
        assert engine.evaluate_decomposition("⿰？").kind is OutcomeKind.NO_INFORMATION
        assert engine.evaluate_decomposition("⿰木").kind is OutcomeKind.INVALID_IDS

    def test_trailing_tokens_after_missing_data(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰鬼木木")
        assert outcome.kind is OutcomeKind.NO_INFORMATION

    def test_parse_error_is_invalid(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.evaluate_decomposition("⿰木1")
        assert outcome.kind is OutcomeKind.INVALID_IDS

    def test_whitespace_only_is_invalid(self, engine: StrokeOrderEngine) -> None:
        assert engine.evaluate_decomposition("  ").kind is OutcomeKind.INVALID_IDS

    def test_no_rule(self, lookup: MappingLookup) -> None:
        engine = StrokeOrderEngine(compile_rules(["⿰ 1 2"]), lookup)
        outcome = engine.evaluate_decomposition("⿱木木")
        assert outcome.kind is OutcomeKind.NO_INFORMATION
        assert "No rule found for ⿱" in outcome.message


class TestEvaluate:
    def test_top_level_consumes_every_token(self, engine: StrokeOrderEngine) -> None:
        decomposition = parse("⿱木⿰木/2木")
        outcome, cursor = engine.evaluate(decomposition, 0)
        assert outcome.ok
        assert cursor == len(decomposition)

    def test_nested_operand_returns_its_end(self, engine: StrokeOrderEngine) -> None:
        decomposition = parse("⿱木⿰木/2木")
        outcome, cursor = engine.evaluate(decomposition, 2)
        assert outcome.order == _order("H S P D H S P N")
        assert cursor == 5

    def test_leaf_advances_one_token(self, engine: StrokeOrderEngine) -> None:
        outcome, cursor = engine.evaluate(parse("⿰木十"), 2)
        assert outcome.order == _order("H S")
        assert cursor == 3

    def test_stops_after_first_expression(self, engine: StrokeOrderEngine) -> None:
        outcome, cursor = engine.evaluate(parse("木木"), 0)
        assert outcome.ok
        assert cursor == 1

    def test_past_the_end_is_incomplete(self, engine: StrokeOrderEngine) -> None:
        outcome, cursor = engine.evaluate(parse("⿰木"), 2)
        assert outcome.kind is OutcomeKind.INVALID_IDS
        assert cursor == 2


class TestGetStrokeOrder:
    def test_single_candidate(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿰木/2木"])
        assert outcome.order == _order("H S P D H S P N")

    def test_empty_list_is_not_deducible(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order([])
        assert outcome.ok
        assert not outcome.order

    def test_uninformative_candidates_are_skipped(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿰木？", "⿰鬼木", "⿰十十"])
        assert outcome.order == _order("H S H S")

    def test_only_uninformative_is_not_deducible(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿰木？"])
        assert outcome.ok
        assert not outcome.order

    def test_agreeing_candidates(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿱木林", "⿱木⿰木/2木"])
        assert outcome.order == _order("H S P N H S P D H S P N")

    def test_ambiguous(self, rules: RuleTable) -> None:
        engine = StrokeOrderEngine(rules, MappingLookup({"一": "H", "丨": "S"}))
        outcome = engine.get_stroke_order(["⿰一丨", "⿰丨一"])
        assert outcome.kind is OutcomeKind.AMBIGUOUS
        assert outcome.conflict == (_order("H S"), _order("S H"))
        assert "'H S' vs 'S H'" in outcome.message

    def test_separator_style_is_not_a_conflict(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"一": "H", "木": "H S P N", ("木", 2): "H-S-P-N"})
        engine = StrokeOrderEngine(rules, lookup)
        assert engine.get_stroke_order(["⿰木一", "⿰木/2一"]).ok

    def test_invalid_candidate_aborts(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿰十十", "⿰木"])
        assert outcome.kind is OutcomeKind.INVALID_IDS

    def test_invalid_after_unknown(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.get_stroke_order(["⿰木？", "⿰木1"])
        assert outcome.kind is OutcomeKind.INVALID_IDS

    def test_incomplete_after_unknown_is_skipped(self, engine: StrokeOrderEngine) -> None:
        assert engine.get_stroke_order(["⿰？", "⿰十十"]).order == _order("H S H S")
        assert engine.get_stroke_order(["⿰鬼", "⿰十十"]).order == _order("H S H S")


class TestResolve:
    def test_manual(self, engine: StrokeOrderEngine) -> None:
        assert engine.resolve_character("木").order == _order("H S P N")

    def test_variant(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.resolve_character("木/2")
        assert outcome.order.text == "H-S-P-D"

    def test_recursive(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.resolve_character("森")
        assert outcome.order == _order("H S P N H S P D H S P N")

    def test_manual_takes_precedence(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"林": "X Y"}, {"林": ["⿰木木"]})
        assert StrokeOrderEngine(rules, lookup).resolve_character("林").order == _order("X Y")

    def test_unknown_glyph(self, engine: StrokeOrderEngine) -> None:
        outcome = engine.resolve_character("鬼")
        assert outcome.kind is OutcomeKind.NO_INFORMATION
        assert "鬼" in outcome.message

    def test_malformed_character(self, engine: StrokeOrderEngine) -> None:
        assert engine.resolve_character("木木").kind is OutcomeKind.INVALID_IDS

    @pytest.mark.parametrize("text", ["⿰", "⿳", "？", "?"])
    def test_operator_or_marker_is_not_a_character(
        self, engine: StrokeOrderEngine, text: str
    ) -> None:
        assert engine.resolve_character(text).kind is OutcomeKind.INVALID_IDS

    def test_non_ascii_variant_index(self, engine: StrokeOrderEngine) -> None:
        assert engine.resolve_character("木/²").kind is OutcomeKind.INVALID_IDS
        assert engine.evaluate_decomposition("⿰木/²木").kind is OutcomeKind.INVALID_IDS

    def test_without_lookup(self, rules: RuleTable) -> None:
        outcome = StrokeOrderEngine(rules).resolve_character("木")
        assert outcome.kind is OutcomeKind.NO_INFORMATION

    def test_nested_ambiguity_propagates(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"一": "H", "丨": "S"}, {"乂": ["⿰一丨", "⿰丨一"]})
        engine = StrokeOrderEngine(rules, lookup)
        outcome = engine.get_stroke_order(["⿱乂一"])
        assert outcome.kind is OutcomeKind.AMBIGUOUS

    def test_nested_invalid_propagates(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"一": "H"}, {"乂": ["⿰一"]})
        engine = StrokeOrderEngine(rules, lookup)
        outcome = engine.get_stroke_order(["⿱乂一"])
        assert outcome.kind is OutcomeKind.INVALID_IDS


class TestCycles:
    def test_mutual_cycle_terminates(
        self, rules: RuleTable, caplog: pytest.LogCaptureFixture
    ) -> None:
        lookup = MappingLookup({"木": "H S P N"}, {"甲": ["⿰乙木"], "乙": ["⿰甲木"]})
        engine = StrokeOrderEngine(rules, lookup)
        with caplog.at_level(logging.WARNING, logger="strokeorder"):
            outcome = engine.resolve_character("甲")
        assert not outcome.order
        assert outcome.kind is OutcomeKind.NO_INFORMATION
        assert "甲 -> 乙 -> 甲" in caplog.text

    def test_self_cycle_is_skipped(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"木": "H S P N"}, {"甲": ["⿰甲木", "⿰木木"]})
        engine = StrokeOrderEngine(rules, lookup)
        assert engine.resolve_character("甲").order == _order("H S P N H S P N")

    def test_depth_limit(self, rules: RuleTable) -> None:
        lookup = MappingLookup(
            {"木": "H S P N", "戊": "H"},
            {"甲": ["⿰乙木"], "乙": ["⿰丙木"], "丙": ["⿰丁木"], "丁": ["⿰戊木"]},
        )
        assert StrokeOrderEngine(rules, lookup).resolve_character("甲").order
        shallow = StrokeOrderEngine(rules, lookup, max_depth=3)
        assert not shallow.resolve_character("甲").order

    def test_self_reference_yields_empty(self, rules: RuleTable) -> None:
        lookup = MappingLookup({"木": "H S P N"}, {"甲": ["⿰甲木"]})
        engine = StrokeOrderEngine(rules, lookup)
        outcome = engine.get_stroke_order(["⿰甲木"])
        assert outcome.ok
        assert not outcome.order


class TestMemo:
    def test_shared_within_request(self, rules: RuleTable) -> None:
        lookup = CountingLookup({"木": "H S P N"}, {"林": ["⿰木木"]})
        engine = StrokeOrderEngine(rules, lookup)
        outcome = engine.get_stroke_order(["⿰林林", "⿱林林"])
        assert outcome.ok
        assert lookup.requests.count("林") == 1

    def test_not_shared_between_requests(self, rules: RuleTable) -> None:
        lookup = CountingLookup({"木": "H S P N"}, {"林": ["⿰木木"]})
        engine = StrokeOrderEngine(rules, lookup)
        engine.resolve_character("林")
        engine.resolve_character("林")
        assert lookup.requests.count("林") == 2
