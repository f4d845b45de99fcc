"""Locate ``strokeorder.toml``.

The ``STROKEORDER_CONFIG`` environment variable wins when set. Otherwise
the start directory and each of its parents are searched, the way git
finds ``.git``.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "strokeorder.toml"
CONFIG_ENV_VAR = "STROKEORDER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None.

    An environment override that names a missing file disables discovery.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override).expanduser()
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
