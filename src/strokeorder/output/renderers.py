"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.text import Text

from strokeorder.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from strokeorder.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: just the answer."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "get_stroke_order_error":
        return str(result.data.get("error", ""))
    if result.op == "get_unicode_forms_for_stroke_names":
        return str(result.data.get("glyphs", ""))
    if result.op == "check":
        return str(result.data.get("count", 0))
    return str(result.data.get("stroke_order", ""))


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="so.ok"), Text(f"  {result.op}", style="so.op"))


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    console.print(Text(f"  {key}: ", style="so.key"), Text(str(value), style=style), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    telemetry = (result.meta or {}).get("telemetry")
    if not telemetry:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    _render_span(console, telemetry, indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {escape(span.get('name', '?'))}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="so.error"),
        Text(f"  {result.op}{code}", style="so.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )
    if err and err.code == "AMBIGUOUS":
        _field(console, "first", err.detail.get("first", ""), "so.order")
        _field(console, "second", err.detail.get("second", ""), "so.order")
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_order(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_stroke_order / get_character_stroke_order results."""
    _status_line(console, result)
    data = result.data
    if "character" in data:
        _field(console, "character", data["character"], "so.char")
    if data.get("deducible"):
        _field(console, "stroke_order", data["stroke_order"], "so.order")
        if "glyphs" in data:
            _field(console, "glyphs", data["glyphs"], "so.glyphs")
        if verbose:
            _field(console, "strokes", len(data.get("names", [])))
    else:
        _field(console, "stroke_order", "(not deducible)", "dim")


def _render_diagnosis(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "decomposition", data.get("decomposition", ""))
    if data.get("error"):
        _field(console, "kind", data.get("kind", ""), "so.warning")
        _field(console, "error", data["error"])
    else:
        _field(console, "stroke_order", data.get("stroke_order", ""), "so.order")


def _render_glyphs(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "stroke_order", result.data.get("stroke_order", ""), "so.order")
    _field(console, "glyphs", result.data.get("glyphs", ""), "so.glyphs")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print("[so.ok]OK[/so.ok]  No issues found.")
        if verbose:
            for key in ("rules", "stroke_names", "characters"):
                _field(console, key, result.data.get(key, 0))
        return

    severity_styles = {"error": "so.error", "warning": "so.warning"}
    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for category, category_issues in by_category.items():
        console.print(f"\n[bold]{escape(category)}[/bold]")
        for issue in category_issues:
            severity = str(issue.get("severity", "warning"))
            style = severity_styles.get(severity, "")
            char = issue.get("character")
            console.print(
                Text("  "),
                Text(severity, style=style),
                Text(f" [{char}]" if char else ""),
                Text(f": {issue.get('message', '')}"),
                sep="",
            )

    errors = result.data.get("error_count", 0)
    console.print(f"\n{errors} errors, {count - errors} warnings")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "get_stroke_order": _render_order,
    "get_character_stroke_order": _render_order,
    "get_stroke_order_error": _render_diagnosis,
    "get_unicode_forms_for_stroke_names": _render_glyphs,
    "check": _render_check,
}
