"""Shared pytest fixtures and test helpers for strokeorder tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from strokeorder.domain.evaluator import StrokeOrderEngine
from strokeorder.domain.names import StrokeNameMap, parse_stroke_names
from strokeorder.domain.rules import RuleTable, compile_rules
from strokeorder.infrastructure.lookup import MappingLookup
from strokeorder.infrastructure.workspace import Workspace
from strokeorder.services.telemetry import set_telemetry

RULES = """\
⿴ S HZ 2 H | 1 is 口
⿰ 1 2
⿱ 1 2
⿲ 1 2 3
⿳ 1 2 3
⿴ 1 2
"""

STROKE_NAMES = """\
H,㇐
S,㇑
P,㇒
N,㇏
D,㇔
HZ,㇕
"""


@pytest.fixture(autouse=True)
def _reset_ambient_state() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    level = root.level
    pkg = logging.getLogger("strokeorder")
    pkg_level = pkg.level
    yield
    set_telemetry(False)
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def rules() -> RuleTable:
    return compile_rules(RULES.splitlines(), source="<test rules>")


@pytest.fixture
def names() -> StrokeNameMap:
    return parse_stroke_names(STROKE_NAMES.splitlines())


@pytest.fixture
def lookup() -> MappingLookup:
    """Small lookup: a few manual components and compounds built from them."""
    return MappingLookup(
        strokes={
            "木": "H S P N",
            ("木", 2): "H-S-P-D",
            "口": "S HZ H",
            "十": "H S",
            "日": "S HZ H H",
            "水": "SG HP P N",
        },
        decompositions={
            "林": ["⿰木/2木"],
            "森": ["⿱木林", "⿱木⿰木/2木"],
            "回": ["⿴口口"],
        },
    )


@pytest.fixture
def engine(rules: RuleTable, lookup: MappingLookup) -> StrokeOrderEngine:
    return StrokeOrderEngine(rules, lookup)


@pytest.fixture
def workspace(rules: RuleTable, names: StrokeNameMap, lookup: MappingLookup) -> Workspace:
    return Workspace(rules=rules, names=names, lookup=lookup)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty directory so the bundled data is used.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.delenv("STROKEORDER_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

