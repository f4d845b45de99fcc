"""Workspace: the single dependency injected into every service.

The workspace owns the three configuration inputs (rule table, stroke-name
map, lookup data) and the engine built from them. Each input is loaded on
first access so that commands which do not need it (``glyphs`` never needs
rules) never read it, and so that configuration errors surface from the
service call that needs the broken file.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from strokeorder.domain.evaluator import DEFAULT_MAX_DEPTH, LookupService, StrokeOrderEngine
from strokeorder.infrastructure.lookup import load_lookup
from strokeorder.infrastructure.sources import load_rule_table, load_stroke_names

if TYPE_CHECKING:
    from strokeorder.config.settings import StrokeSettings
    from strokeorder.domain.names import StrokeNameMap
    from strokeorder.domain.rules import RuleTable

logger = logging.getLogger(__name__)


class Workspace:
    """Lazily loaded configuration plus the engine that uses it.

    Either pass *settings* (paths come from its ``[data]`` section) or
    inject pre-built pieces directly, which is what tests do.
    """

    def __init__(
        self,
        settings: StrokeSettings | None = None,
        *,
        rules: RuleTable | None = None,
        names: StrokeNameMap | None = None,
        lookup: LookupService | None = None,
        max_depth: int | None = None,
    ) -> None:
        self.settings = settings
        self._rules = rules
        self._names = names
        self._lookup = lookup
        self._engine: StrokeOrderEngine | None = None
        if max_depth is None:
            max_depth = settings.engine.max_depth if settings else DEFAULT_MAX_DEPTH
        self._max_depth = max_depth

    @property
    def rules(self) -> RuleTable:
        """Compiled rule table (raises ``RuleConfigError`` if broken)."""
        if self._rules is None:
            path = self.settings.data_paths.rules_path if self.settings else None
            self._rules = load_rule_table(path)
            logger.debug("Loaded %d combination rules", len(self._rules))
        return self._rules

    @property
    def names(self) -> StrokeNameMap:
        """Stroke-name map (raises ``StrokeNameConfigError`` if broken)."""
        if self._names is None:
            path = self.settings.data_paths.stroke_names_path if self.settings else None
            self._names = load_stroke_names(path)
        return self._names

    @property
    def lookup(self) -> LookupService:
        """Lookup data (raises ``LookupDataError`` if broken)."""
        if self._lookup is None:
            path = self.settings.data_paths.lookup_path if self.settings else None
            self._lookup = load_lookup(path)
        return self._lookup

    @property
    def engine(self) -> StrokeOrderEngine:
        if self._engine is None:
            self._engine = StrokeOrderEngine(
                self.rules, self.lookup, max_depth=self._max_depth
            )
        return self._engine
