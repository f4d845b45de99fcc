"""Result envelope returned by every service operation.

INVARIANT: Services never raise for bad input or broken configuration.
They return a ServiceResult, and the caller (CLI or embedding code)
decides how to present it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Data errors describe the character being resolved.
INVALID_IDS = "INVALID_IDS"
AMBIGUOUS = "AMBIGUOUS"
# A rule table, stroke-name map, or lookup file is broken.
CONFIG_ERROR = "CONFIG_ERROR"


class ServiceError(BaseModel):
    """Why an operation failed."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_config_error(self) -> bool:
        return self.code == CONFIG_ERROR


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False when ``error`` is set.
        op: Operation name, e.g. ``"get_stroke_order"``.
        data: Operation payload.
        warnings: Non-fatal notes, such as "not deducible".
        error: Failure details when ``ok`` is False.
        meta: Extra information; ``meta["telemetry"]`` holds timings.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls, op: str, data: dict[str, Any], *, warnings: list[str] | None = None
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [])

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    def with_meta(self, **entries: Any) -> ServiceResult:
        """Copy of this result with *entries* merged into ``meta``."""
        return self.model_copy(update={"meta": {**(self.meta or {}), **entries}})
