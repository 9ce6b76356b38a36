from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from fhir.resources.R4B.bundle import Bundle
from fhir.resources.R4B.messageheader import MessageHeader
from fhir.resources.R4B.observation import Observation
from fhir.resources.R4B.organization import Organization
from fhir.resources.R4B.patient import Patient


class EntryKind(str, Enum):
    HEADER = "header"
    ORGANIZATION = "organization"
    PATIENT = "patient"
    OBSERVATION = "observation"
    BUNDLE = "bundle"
    OTHER = "other"


ReportResource = MessageHeader | Organization | Patient | Observation | Bundle | Dict[str, Any]


@dataclass(frozen=True)
class ReportEntry:
    kind: EntryKind
    resource: ReportResource
    full_url: str | None = None


@dataclass(frozen=True)
class PatientDemographics:
    first_name: str
    last_name: str
    birth_date: str
    gender: str


@dataclass(frozen=True)
class Report:
    """
    A parsed report: the header, every entry of the report (top level and
    content section) and the content section entries on their own.
    """

    header: MessageHeader
    entries: List[ReportEntry] = field(default_factory=list)
    content: List[ReportEntry] = field(default_factory=list)

    def of_kind(self, kind: EntryKind) -> List[ReportEntry]:
        return [e for e in self.entries if e.kind == kind]

    @property
    def patient(self) -> ReportEntry | None:
        return next((e for e in self.content if e.kind == EntryKind.PATIENT), None)

    @property
    def observations(self) -> List[ReportEntry]:
        return [e for e in self.content if e.kind == EntryKind.OBSERVATION]
