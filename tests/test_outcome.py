"""Tests for the outcome models and status-keyed decoding."""

import pydantic
import pytest

from tournamention.commands.profile import ProfileSuccessDetailsOutcome
from tournamention.models.outcome import (
    GENERIC_STATUSES,
    FailMonoOutcome,
    SuccessMonoOutcome,
    UnknownFailureOutcome,
    ValidationFailureOutcome,
    make_validation_failure,
    outcome_adapter,
    status_of,
)


@pytest.fixture
def adapter() -> pydantic.TypeAdapter:
    return outcome_adapter(ProfileSuccessDetailsOutcome)


class TestDecoding:
    def test_each_status_decodes_to_its_model(self, adapter: pydantic.TypeAdapter) -> None:
        cases = [
            ({"status": "SUCCESS_MONO", "body": {"data": "ok"}}, SuccessMonoOutcome),
            ({"status": "FAIL_MONO", "body": {"data": "no"}}, FailMonoOutcome),
            (
                {
                    "status": "FAIL_VALIDATION",
                    "body": {"constraint": "C", "field": "f", "value": 3, "context": "x"},
                },
                ValidationFailureOutcome,
            ),
            ({"status": "FAIL_UNKNOWN", "body": {}}, UnknownFailureOutcome),
            (
                {
                    "status": "SUCCESS_DETAILS",
                    "body": {
                        "current_points": 1,
                        "career_points": 2,
                        "user_details": {"name": "Ada", "icon": "https://x"},
                    },
                },
                ProfileSuccessDetailsOutcome,
            ),
        ]
        for data, expected in cases:
            assert type(adapter.validate_python(data)) is expected

    def test_body_shape_must_match_status(self, adapter: pydantic.TypeAdapter) -> None:
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python({"status": "FAIL_VALIDATION", "body": {"data": "x"}})

    def test_unknown_failure_body_must_be_empty(self, adapter: pydantic.TypeAdapter) -> None:
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python({"status": "FAIL_UNKNOWN", "body": {"error": "boom"}})

    def test_undeclared_status_rejected(self, adapter: pydantic.TypeAdapter) -> None:
        with pytest.raises(pydantic.ValidationError):
            adapter.validate_python({"status": "SOMETHING_ELSE", "body": {}})

    def test_generic_adapter_rejects_command_status(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            outcome_adapter().validate_python(
                {"status": "SUCCESS_DETAILS", "body": {"data": "x"}}
            )


class TestOutcomeModels:
    def test_status_of(self) -> None:
        assert status_of(ValidationFailureOutcome) == "FAIL_VALIDATION"
        assert status_of(ProfileSuccessDetailsOutcome) == "SUCCESS_DETAILS"

    def test_generic_statuses(self) -> None:
        assert GENERIC_STATUSES == {"SUCCESS_MONO", "FAIL_MONO", "FAIL_VALIDATION", "FAIL_UNKNOWN"}

    def test_duplicate_status_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate outcome status"):
            outcome_adapter(SuccessMonoOutcome)

    def test_outcomes_are_immutable(self) -> None:
        outcome = make_validation_failure("C", "f", 1, "ctx")
        with pytest.raises(pydantic.ValidationError):
            outcome.body.field = "other"  # type: ignore[misc]

    def test_unknown_failure_has_empty_body(self) -> None:
        assert UnknownFailureOutcome().model_dump() == {"status": "FAIL_UNKNOWN", "body": {}}
