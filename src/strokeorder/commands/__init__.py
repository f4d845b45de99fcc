"""Subcommands of the ``strokeorder`` CLI.

Command modules are imported inside register_commands() so importing the
root group stays cheap.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute) pairs, in the order they appear in --help.
COMMANDS: tuple[tuple[str, str], ...] = (
    ("order", "order"),
    ("char", "char"),
    ("diagnose", "diagnose"),
    ("glyphs", "glyphs"),
    ("check", "check"),
)


def register_commands(cli: click.Group) -> None:
    """Attach every subcommand to *cli*."""
    for module_name, attr in COMMANDS:
        module = import_module(f"{__name__}.{module_name}")
        cli.add_command(getattr(module, attr))
