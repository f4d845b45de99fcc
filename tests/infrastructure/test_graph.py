"""Tests for the component dependency graph."""

from __future__ import annotations

from strokeorder.infrastructure.graph import build_component_graph, find_cycles


class TestBuildComponentGraph:
    def test_edges_from_leaves(self) -> None:
        g, unparsable = build_component_graph({"森": ["⿱木林"], "林": ["⿰木/2木"]})
        assert unparsable == []
        assert set(g.successors("森")) == {"木", "林"}
        assert set(g.successors("林")) == {"木"}
        assert g.edges["森", "林"]["decomposition"] == "⿱木林"

    def test_unknown_markers_add_no_edges(self) -> None:
        g, _ = build_component_graph({"甲": ["⿰木？"]})
        assert set(g.successors("甲")) == {"木"}

    def test_unparsable_collected(self) -> None:
        g, unparsable = build_component_graph({"甲": ["⿰木1", "⿰木木"]})
        assert [(glyph, raw) for glyph, raw, _ in unparsable] == [("甲", "⿰木1")]
        assert "甲" in g


class TestFindCycles:
    def test_acyclic(self) -> None:
        g, _ = build_component_graph({"森": ["⿱木林"], "林": ["⿰木木"]})
        assert find_cycles(g) == []

    def test_rotated_to_smallest_glyph(self) -> None:
        g, _ = build_component_graph({"乙": ["⿰甲木"], "甲": ["⿰乙木"]})
        cycles = find_cycles(g)
        assert cycles == [[min("甲", "乙"), max("甲", "乙")]]

    def test_self_loop(self) -> None:
        g, _ = build_component_graph({"甲": ["⿰甲木"]})
        assert find_cycles(g) == [["甲"]]
