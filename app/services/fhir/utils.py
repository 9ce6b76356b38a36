import logging
from typing import Any, Dict

from fhir.resources.R4B.bundle import Bundle, BundleEntryResponse
from fhir.resources.R4B.operationoutcome import OperationOutcome
from fhir.resources.R4B.organization import Organization
from fhir.resources.R4B.identifier import Identifier

from app.models.fhir.types import BundleError, ERROR_SEVERITIES

logger = logging.getLogger(__name__)


def get_resource_type(resource: Dict[str, Any]) -> str:
    res_type_key = "resource_type" if "resource_type" in resource else "resourceType"
    resource_type: str = resource[res_type_key]

    return resource_type


def get_identifier_value(organization: Organization, system: str) -> str | None:
    """
    Returns the value of the first identifier of the organization under the given system.
    """
    for identifier in organization.identifier or []:
        if not isinstance(identifier, Identifier):
            continue
        if identifier.system is None or identifier.value is None:
            continue
        if identifier.system == system:
            return str(identifier.value)

    logger.warning(f"Organization {organization.id} has no identifier for system {system}")
    return None


def collect_errors(bundle: Bundle) -> list[BundleError]:
    """
    Collect errors from bundle
    """
    errs: list[BundleError] = []
    if not bundle.entry:
        return errs

    for idx, entry in enumerate(bundle.entry):
        resp = entry.response  # type: ignore[attr-defined]
        if not resp:
            continue

        status_code = _parse_status_code(resp)
        if status_code and status_code < 400:
            continue

        errs.extend(_build_errors_from_response(idx, status_code, resp))

    return errs


def _parse_status_code(resp: BundleEntryResponse) -> int | None:
    """Extract status code if possible, else None."""
    try:
        return int(str(resp.status).strip().split()[0])
    except (ValueError, AttributeError, IndexError):
        return None


def _build_errors_from_response(
    idx: int, status_code: int | None, resp: BundleEntryResponse
) -> list[BundleError]:
    """Extract BundleErrors from a response, an entry without outcome still counts as one error."""
    outcome = resp.outcome
    if not outcome:
        return [
            BundleError(
                entry=idx,
                status=status_code or 0,
                code="unknown",
                severity="error",
                diagnostics=str(resp.status),
            )
        ]

    if not isinstance(outcome, OperationOutcome):
        raise ValueError("Outcome is not of type OperationOutcome")

    return [
        BundleError(
            entry=idx,
            status=status_code or 0,
            code=str(issue.code) or "",
            severity=issue.severity,
            diagnostics=issue.diagnostics or "",
        )
        for issue in outcome.issue
        if issue.severity in ERROR_SEVERITIES
    ]
