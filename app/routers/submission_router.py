import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, Header
from fastapi.responses import JSONResponse

from app.container import get_submission_service
from app.models.submission.outcome import FailureCategory, SubmissionOutcome
from app.services.submission.submission_service import SubmissionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/submissions", tags=["Registry submissions"])

STATUS_BY_CATEGORY = {
    FailureCategory.VALIDATION: 422,
    FailureCategory.IDENTITY_RESOLUTION: 502,
    FailureCategory.PROCESSING: 502,
}


@router.post("", response_model=SubmissionOutcome, summary="Submit a report to the registry")
def submit_report(
    report: Annotated[Dict[str, Any], Body()],
    authorization: Annotated[str | None, Header()] = None,
    service: SubmissionService = Depends(get_submission_service),
) -> Any:
    outcome = service.submit(report, authorization)
    if outcome.success:
        return outcome

    status_code = STATUS_BY_CATEGORY.get(outcome.failure_category, 500)  # type: ignore[arg-type]
    logger.info(f"Submission failed with status {status_code}")
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))
