import logging
import traceback
from typing import List

from app.models.submission.outcome import FailureCategory, SubmissionOutcome

logger = logging.getLogger(__name__)


class OutcomeReporter:
    """
    Collects one diagnostic line per completed step and turns them into the single
    outcome of a submission.
    """

    def __init__(self) -> None:
        self.__messages: List[str] = []
        self.crid: str | None = None
        self.patient_id: str | None = None
        self.patient_created: bool | None = None

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(self.__messages)

    def step(self, message: str) -> None:
        logger.debug(message)
        self.__messages.append(message)

    def success(self, observations_submitted: int) -> SubmissionOutcome:
        return SubmissionOutcome(
            success=True,
            messages=self.messages,
            crid=self.crid,
            patient_id=self.patient_id,
            patient_created=self.patient_created,
            observations_submitted=observations_submitted,
        )

    def failure(
        self,
        category: FailureCategory,
        message: str,
        error: BaseException | None = None,
    ) -> SubmissionOutcome:
        self.__messages.append(message)
        return SubmissionOutcome(
            success=False,
            failure_category=category,
            messages=self.messages,
            crid=self.crid,
            patient_id=self.patient_id,
            patient_created=self.patient_created,
            error=str(error) if error is not None else None,
            trace=(
                "".join(traceback.format_exception(error))
                if error is not None
                else None
            ),
        )
