"""CheckService: integrity check of the configured data.

Single command following the linter pattern. Every configuration input is
loaded (so broken rule or name files surface here first), then the lookup
data is checked in three categories: decomposition syntax, dependency
cycles, and per-character consistency.
"""

from __future__ import annotations

from typing import Any

import networkx as nx

from strokeorder.domain.errors import ConfigurationError
from strokeorder.domain.outcome import OutcomeKind
from strokeorder.infrastructure.graph import build_component_graph, find_cycles
from strokeorder.infrastructure.lookup import MappingLookup
from strokeorder.services.base import BaseService
from strokeorder.services.result import ServiceResult
from strokeorder.services.telemetry import trace_span, traced

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_SYNTAX = "decomposition_syntax"
CAT_CYCLES = "dependency_cycles"
CAT_CONSISTENCY = "character_consistency"

_SEVERITY_RANK = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}


class CheckService(BaseService):
    """Reports problems in the rule table, name map, and lookup data."""

    @traced
    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report integrity issues at or above *min_severity*."""
        try:
            rules = self._workspace.rules
            names = self._workspace.names
            lookup = self._workspace.lookup
        except ConfigurationError as exc:
            return self._config_failure("check", exc)

        issues: list[dict[str, Any]] = []
        warnings: list[str] = []
        glyph_count = 0
        if isinstance(lookup, MappingLookup):
            decompositions = lookup.all_decompositions()
            glyph_count = len(lookup.glyphs())
            graph, unparsable = build_component_graph(decompositions)
            with trace_span("decomposition_syntax"):
                syntax_issues = self._check_syntax(unparsable)
                issues.extend(syntax_issues)
            with trace_span("dependency_cycles"):
                issues.extend(self._check_cycles(graph))
            with trace_span("character_consistency"):
                flagged = {i["character"] for i in syntax_issues}
                issues.extend(self._check_consistency(decompositions, skip=flagged))
        else:
            warnings.append("Lookup data cannot be enumerated; data checks skipped")

        threshold = _SEVERITY_RANK.get(min_severity, 0)
        issues = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]
        error_count = sum(1 for i in issues if i["severity"] == SEVERITY_ERROR)
        return ServiceResult.success(
            "check",
            {
                "issues": issues,
                "count": len(issues),
                "error_count": error_count,
                "warning_count": len(issues) - error_count,
                "healthy": error_count == 0,
                "rules": len(rules),
                "stroke_names": len(names),
                "characters": glyph_count,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_syntax(self, unparsable: list[tuple[str, str, str]]) -> list[dict[str, Any]]:
        """Decomposition strings the parser rejects."""
        issues: list[dict[str, Any]] = []
        for glyph, raw, error in unparsable:
            issues.append(
                {
                    "category": CAT_SYNTAX,
                    "severity": SEVERITY_ERROR,
                    "character": glyph,
                    "decomposition": raw,
                    "message": error,
                }
            )
        return issues

    def _check_cycles(self, graph: nx.DiGraph) -> list[dict[str, Any]]:
        """Glyphs that (indirectly) decompose into themselves."""
        return [
            {
                "category": CAT_CYCLES,
                "severity": SEVERITY_ERROR,
                "character": cycle[0],
                "message": "Decomposition cycle: " + " -> ".join([*cycle, cycle[0]]),
            }
            for cycle in find_cycles(graph)
        ]

    def _check_consistency(
        self, decompositions: dict[str, list[str]], *, skip: set[str]
    ) -> list[dict[str, Any]]:
        """Characters whose decompositions are invalid, disagree, or say nothing."""
        issues: list[dict[str, Any]] = []
        engine = self._workspace.engine
        for glyph, items in decompositions.items():
            if glyph in skip:
                continue
            outcome = engine.get_stroke_order(items)
            if outcome.kind in (OutcomeKind.AMBIGUOUS, OutcomeKind.INVALID_IDS):
                issues.append(
                    {
                        "category": CAT_CONSISTENCY,
                        "severity": SEVERITY_ERROR,
                        "character": glyph,
                        "message": outcome.message,
                    }
                )
            elif not outcome.order and engine.lookup.get_manual_stroke_order(glyph) is None:
                issues.append(
                    {
                        "category": CAT_CONSISTENCY,
                        "severity": SEVERITY_WARNING,
                        "character": glyph,
                        "message": f"Stroke order of {glyph} is not deducible",
                    }
                )
        return issues
