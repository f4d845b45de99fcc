"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich) or machines (--json).
The formatter layer picks the mode from the global output flags.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from strokeorder.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from strokeorder.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags taken from the root CLI group."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet, quiet wins over the default Rich rendering.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        # Keep CJK glyphs readable instead of \\u escapes.
        return json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
