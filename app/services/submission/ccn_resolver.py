import logging
from typing import List

from fhir.resources.R4B.messageheader import MessageHeader
from fhir.resources.R4B.organization import Organization

from app.models.report.dto import EntryKind, ReportEntry
from app.services.fhir.bundle.bundle_utils import get_resource_from_reference
from app.services.fhir.utils import get_identifier_value
from app.services.submission.exceptions import ValidationFailure

logger = logging.getLogger(__name__)


def resolve_ccn(header: MessageHeader, entries: List[ReportEntry], ccn_system: str) -> str:
    """
    Resolves the registry code (CCN) of the sending organization.

    The sender reference of the header must point to an Organization in the report,
    either as "Organization/<id>" or as the bare id. The CCN is the value of the first
    identifier of that organization under the CCN system. No network calls are made.
    """
    if header.sender is None or not header.sender.reference:
        raise ValidationFailure("MessageHeader has no sender reference")

    reference = str(header.sender.reference)
    resource_type, org_id = get_resource_from_reference(reference)
    if org_id is None or (resource_type is not None and resource_type != "Organization"):
        raise ValidationFailure(f"Sender reference {reference} does not point to an Organization")

    organization = _find_organization(entries, reference, org_id)
    if organization is None:
        raise ValidationFailure(f"Organization {reference} not found in report")

    ccn = get_identifier_value(organization, ccn_system)
    if ccn is None:
        raise ValidationFailure(f"Organization {reference} has no identifier under {ccn_system}")

    return ccn


def _find_organization(entries: List[ReportEntry], reference: str, org_id: str) -> Organization | None:
    # Producers are inconsistent about including the resource type, so both forms are accepted
    for entry in entries:
        if entry.kind != EntryKind.ORGANIZATION or not isinstance(entry.resource, Organization):
            continue

        resource_id = entry.resource.id
        if resource_id is not None and resource_id in (reference, org_id):
            return entry.resource
        if entry.full_url is not None and entry.full_url == reference:
            return entry.resource

    return None
