"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, strokeorder.toml only contains
overrides. With no config at all the bundled rule table, stroke-name map,
and sample lookup data are used.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from strokeorder.domain.evaluator import DEFAULT_MAX_DEPTH


class DataConfig(BaseModel):
    """[data] section. Unset paths fall back to the bundled files."""

    model_config = {"frozen": True}

    rules_path: Path | None = None
    stroke_names_path: Path | None = None
    lookup_path: Path | None = None

    def resolved(self, root: Path) -> DataConfig:
        """Return a copy with relative paths anchored at *root*."""

        def _anchor(p: Path | None) -> Path | None:
            if p is None or p.is_absolute():
                return p
            return root / p

        return self.model_copy(
            update={
                "rules_path": _anchor(self.rules_path),
                "stroke_names_path": _anchor(self.stroke_names_path),
                "lookup_path": _anchor(self.lookup_path),
            }
        )


class EngineConfig(BaseModel):
    """[engine] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    show_glyphs: bool = True
