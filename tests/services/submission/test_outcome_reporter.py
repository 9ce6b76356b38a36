import pytest
from pydantic import ValidationError

from app.models.submission.outcome import FailureCategory
from app.services.submission.exceptions import ProcessingFailure
from app.services.submission.outcome_reporter import OutcomeReporter


def test_success_should_carry_steps_in_order() -> None:
    reporter = OutcomeReporter()
    reporter.step("first")
    reporter.step("second")
    reporter.crid = "1"
    reporter.patient_id = "2"
    reporter.patient_created = True

    outcome = reporter.success(3)

    assert outcome.success is True
    assert outcome.failure_category is None
    assert outcome.messages == ("first", "second")
    assert outcome.observations_submitted == 3
    assert outcome.patient_created is True


def test_failure_should_carry_category_and_trace() -> None:
    reporter = OutcomeReporter()
    reporter.step("first")
    try:
        raise ProcessingFailure("registry down")
    except ProcessingFailure as e:
        outcome = reporter.failure(e.category, "Submission failed", e)

    assert outcome.success is False
    assert outcome.failure_category == FailureCategory.PROCESSING
    assert outcome.messages == ("first", "Submission failed")
    assert outcome.error == "registry down"
    assert outcome.trace is not None
    assert "ProcessingFailure" in outcome.trace


def test_outcome_should_be_immutable() -> None:
    outcome = OutcomeReporter().success(0)

    with pytest.raises(ValidationError):
        outcome.success = False  # type: ignore[misc]
