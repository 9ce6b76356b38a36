from app.models.submission.outcome import FailureCategory


class SubmissionException(Exception):
    category: FailureCategory = FailureCategory.PROCESSING


class ValidationFailure(SubmissionException):
    """Report is malformed or incomplete, or the registry code cannot be resolved."""

    category = FailureCategory.VALIDATION


class IdentityResolutionFailure(SubmissionException):
    """No single perfect match could be obtained from the record-linkage service."""

    category = FailureCategory.IDENTITY_RESOLUTION


class ProcessingFailure(SubmissionException):
    """A registry call in the existence check, create or batch step failed."""

    category = FailureCategory.PROCESSING
