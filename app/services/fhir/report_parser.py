import logging
from datetime import date
from typing import Any, Dict, List

from fhir.resources.R4B.messageheader import MessageHeader
from fhir.resources.R4B.patient import Patient
from pydantic import ValidationError

from app.models.report.dto import EntryKind, PatientDemographics, Report, ReportEntry
from app.services.fhir.model_factory import create_resource
from app.services.submission.exceptions import ValidationFailure

logger = logging.getLogger(__name__)

GENDER_DISPLAY = {
    "male": "Male",
    "female": "Female",
    "other": "Other",
    "unknown": "Unknown",
}


def _parse_entry(data: Dict[str, Any], position: str) -> ReportEntry:
    if not isinstance(data, dict) or not isinstance(data.get("resource"), dict):
        raise ValidationFailure(f"Report entry {position} has no resource")

    try:
        kind, resource = create_resource(data["resource"])
    except (ValidationError, ValueError) as e:
        raise ValidationFailure(f"Report entry {position} is not a valid FHIR resource: {e}") from e

    return ReportEntry(kind=kind, resource=resource, full_url=data.get("fullUrl"))


def parse_report(data: Dict[str, Any]) -> Report:
    """
    Parses a report bundle. The first entry must be the MessageHeader, the second the
    content Bundle holding the patient and its observations.
    """
    if not isinstance(data, dict) or data.get("resourceType") != "Bundle":
        raise ValidationFailure("Report is not a Bundle")

    raw_entries = data.get("entry") or []
    if len(raw_entries) < 2:
        raise ValidationFailure(f"Report must contain at least 2 entries, found {len(raw_entries)}")

    entries: List[ReportEntry] = []
    for idx, raw_entry in enumerate(raw_entries):
        entries.append(_parse_entry(raw_entry, str(idx)))

    header = entries[0]
    if header.kind != EntryKind.HEADER or not isinstance(header.resource, MessageHeader):
        raise ValidationFailure("First report entry must be a MessageHeader")

    if entries[1].kind != EntryKind.BUNDLE:
        raise ValidationFailure("Second report entry must be the content Bundle")

    content: List[ReportEntry] = []
    for idx, raw_entry in enumerate(raw_entries[1]["resource"].get("entry") or []):
        content.append(_parse_entry(raw_entry, f"1.{idx}"))

    report = Report(header=header.resource, entries=entries + content, content=content)
    if report.patient is None:
        raise ValidationFailure("Content bundle contains no Patient")

    logger.debug(
        f"Parsed report with {len(report.entries)} entries and {len(report.observations)} observations"
    )
    return report


def get_patient_demographics(patient: Patient) -> PatientDemographics:
    """
    Returns the four attributes used for record linkage. Every attribute is required.
    """
    if not patient.name:
        raise ValidationFailure("Patient has no name")

    name = patient.name[0]
    if not name.given or not name.given[0]:
        raise ValidationFailure("Patient has no given name")
    if not name.family:
        raise ValidationFailure("Patient has no family name")

    if patient.birthDate is None:
        raise ValidationFailure("Patient has no birth date")
    birth_date = patient.birthDate
    birth_date_text = birth_date.isoformat() if isinstance(birth_date, date) else str(birth_date)

    if patient.gender is None or patient.gender not in GENDER_DISPLAY:
        raise ValidationFailure("Patient has no administrative gender")

    return PatientDemographics(
        first_name=str(name.given[0]),
        last_name=str(name.family),
        birth_date=birth_date_text,
        gender=GENDER_DISPLAY[patient.gender],
    )
