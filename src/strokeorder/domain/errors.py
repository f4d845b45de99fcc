"""Exception types raised at load and parse boundaries.

Data problems found while *evaluating* a decomposition are reported as
:class:`~strokeorder.domain.outcome.Outcome` values, not exceptions.
Exceptions are reserved for two situations:

- ``InvalidIdsError``: the parser rejected a decomposition string.
- ``ConfigurationError``: a rule table, stroke-name map, or lookup file
  is broken. This indicates a broken deployment, not a broken character.
"""

from __future__ import annotations


class InvalidIdsError(ValueError):
    """A decomposition string is not a well-formed token sequence."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class ConfigurationError(Exception):
    """Base class for fatal configuration errors."""

    def __init__(self, message: str, *, source: str = "", line: int | None = None) -> None:
        location = source
        if line is not None:
            location = f"{source}:{line}" if source else f"line {line}"
        super().__init__(f"{location}: {message}" if location else message)
        self.source = source
        self.line = line


class RuleConfigError(ConfigurationError):
    """A combination rule line does not follow the rule grammar."""


class StrokeNameConfigError(ConfigurationError):
    """A stroke-name mapping line is malformed."""


class LookupDataError(ConfigurationError):
    """The lookup data file is unreadable or has the wrong shape."""
