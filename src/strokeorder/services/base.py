"""Shared base for services that read the workspace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from strokeorder.services.result import CONFIG_ERROR, ServiceResult

if TYPE_CHECKING:
    from strokeorder.domain.errors import ConfigurationError
    from strokeorder.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the :class:`Workspace` a service reads rules, names, and data from.

    Workspace inputs load lazily, so any property access may raise a
    ``ConfigurationError``. Services catch it and return
    :meth:`_config_failure` instead of letting it escape.
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @staticmethod
    def _config_failure(op: str, exc: ConfigurationError) -> ServiceResult:
        logger.error("Configuration error during %s: %s", op, exc)
        detail: dict[str, Any] = {"kind": type(exc).__name__}
        if exc.source:
            detail["source"] = exc.source
        if exc.line is not None:
            detail["line"] = exc.line
        return ServiceResult.failure(op, CONFIG_ERROR, str(exc), **detail)
