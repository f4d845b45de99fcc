"""Component dependency graph: which glyphs each glyph is built from.

An edge ``A -> B`` means one of A's decompositions uses B as a leaf.
Built on demand from lookup data; only the integrity check needs it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TypeAlias

import networkx as nx

from strokeorder.domain.errors import InvalidIdsError
from strokeorder.domain.ids import Component, parse

_Graph: TypeAlias = nx.DiGraph


def build_component_graph(
    decompositions: Mapping[str, Sequence[str]],
) -> tuple[_Graph, list[tuple[str, str, str]]]:
    """Build the dependency graph for every glyph in *decompositions*.

    Returns:
        The graph and a list of ``(glyph, decomposition, error)`` for
        decomposition strings that failed to parse.
    """
    g: _Graph = nx.DiGraph()
    unparsable: list[tuple[str, str, str]] = []
    for glyph, items in decompositions.items():
        g.add_node(glyph)
        for raw in items:
            try:
                decomposition = parse(raw)
            except InvalidIdsError as exc:
                unparsable.append((glyph, raw, str(exc)))
                continue
            for token in decomposition.tokens:
                if isinstance(token, Component):
                    g.add_edge(glyph, token.glyph, decomposition=raw)
    return g, unparsable


def find_cycles(g: _Graph) -> list[list[str]]:
    """Return each elementary cycle, rotated to start at its smallest glyph."""
    cycles: list[list[str]] = []
    for cycle in nx.simple_cycles(g):
        pivot = cycle.index(min(cycle))
        cycles.append(cycle[pivot:] + cycle[:pivot])
    return sorted(cycles)
