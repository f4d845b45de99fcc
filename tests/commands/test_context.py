"""Tests for AppContext exit-code mapping."""

from __future__ import annotations

from strokeorder.commands._context import (
    EXIT_CONFIG_ERROR,
    EXIT_DATA_ERROR,
    EXIT_OK,
    exit_code_for,
)
from strokeorder.services.result import AMBIGUOUS, CONFIG_ERROR, ServiceResult


class TestExitCodeFor:
    def test_success(self) -> None:
        assert exit_code_for(ServiceResult.success("order", {"order": "H"})) == EXIT_OK

    def test_data_error(self) -> None:
        result = ServiceResult.failure("order", AMBIGUOUS, "Ambiguous stroke order")
        assert exit_code_for(result) == EXIT_DATA_ERROR

    def test_config_error(self) -> None:
        result = ServiceResult.failure("check", CONFIG_ERROR, "bad rules", kind="rules")
        assert exit_code_for(result) == EXIT_CONFIG_ERROR
