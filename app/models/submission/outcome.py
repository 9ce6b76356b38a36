from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class FailureCategory(str, Enum):
    VALIDATION = "validation"
    IDENTITY_RESOLUTION = "identity-resolution"
    PROCESSING = "processing"


class SubmissionOutcome(BaseModel):
    """
    Terminal result of a single submission. Either a success carrying the
    ordered diagnostic trail, or a failure carrying its category.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    failure_category: FailureCategory | None = Field(default=None)
    messages: Tuple[str, ...] = Field(default=())
    crid: str | None = Field(default=None)
    patient_id: str | None = Field(default=None)
    patient_created: bool | None = Field(default=None)
    observations_submitted: int = Field(default=0)
    error: str | None = Field(default=None)
    trace: str | None = Field(default=None)
