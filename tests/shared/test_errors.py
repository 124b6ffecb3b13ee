"""Tests for the error hierarchy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pytest

from reelmatch.shared.errors import (
    ApplicationError,
    CliError,
    DomainError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    ReelMatchError,
    create_cli_error,
    create_config_error,
    create_validation_error,
)


class _Color(Enum):
    RED = "red"


class TestErrorContext:
    def test_additional_data_coerced_to_primitives(self) -> None:
        context = ErrorContext(additional_data={"path": Path("/movies"), "color": _Color.RED, "count": 3})

        assert context.additional_data == {"path": str(Path("/movies")), "color": "red", "count": 3}

    def test_unsupported_value_rejected(self) -> None:
        with pytest.raises(TypeError, match="Cannot coerce"):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_safe_dict_drops_library_layout(self) -> None:
        # Given a context carrying a folder path and a raw title
        context = ErrorContext(
            operation="record_match_outcome",
            batch_id="b1",
            request_id="r1",
            folder_path="/movies/Heat (1995)",
            additional_data={"title": "Heat", "attempt": 2},
        )

        # When
        data = context.safe_dict()

        # Then
        assert data == {
            "operation": "record_match_outcome",
            "batch_id": "b1",
            "request_id": "r1",
            "additional_data": {"attempt": 2},
        }

    def test_safe_dict_custom_mask_keys(self) -> None:
        context = ErrorContext(request_id="r1", folder_path="/movies/Heat (1995)")

        assert context.safe_dict(mask_keys=("request_id",)) == {
            "folder_path": "/movies/Heat (1995)",
            "additional_data": {},
        }


class TestReelMatchError:
    def test_string_and_dict_forms(self) -> None:
        # Given
        cause = OSError("disk full")
        error = InfrastructureError(
            ErrorCode.PERSISTENCE_FAILED,
            "Failed to persist",
            ErrorContext(operation="record_match_outcome", request_id="r1", additional_data={"attempt": 1}),
            cause,
        )

        # When
        data = error.to_dict()

        # Then
        assert str(error) == "PERSISTENCE_FAILED: Failed to persist"
        assert data["code"] == "PERSISTENCE_FAILED"
        assert data["context"]["request_id"] == "r1"
        assert data["context"]["additional_data"] == {"attempt": 1}
        assert data["original_error"] == "disk full"

    @pytest.mark.parametrize("error_class", [DomainError, InfrastructureError, ApplicationError, CliError])
    def test_hierarchy(self, error_class: type[ReelMatchError]) -> None:
        error = error_class(ErrorCode.VALIDATION_ERROR, "bad")

        assert isinstance(error, ReelMatchError)
        assert error.context.safe_dict() == {"additional_data": {}}


def test_create_validation_error() -> None:
    error = create_validation_error("concurrency must be positive", field="concurrency", operation="run")

    assert isinstance(error, DomainError)
    assert error.code is ErrorCode.VALIDATION_ERROR
    assert error.context.additional_data == {"field": "concurrency"}


def test_create_config_error() -> None:
    error = create_config_error("bad key", config_key="queue.concurrency")

    assert isinstance(error, ApplicationError)
    assert error.code is ErrorCode.CONFIG_ERROR


def test_create_cli_error_keeps_exit_code() -> None:
    error = create_cli_error("boom", command="match", exit_code=2)

    assert isinstance(error, CliError)
    assert error.command == "match"
    assert error.exit_code == 2
