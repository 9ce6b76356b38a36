from typing import Any, Dict, TypeVar, Type
from fhir.resources.R4B.bundle import Bundle
from fhir.resources.R4B.messageheader import MessageHeader
from fhir.resources.R4B.observation import Observation
from fhir.resources.R4B.organization import Organization
from fhir.resources.R4B.patient import Patient
from pydantic import ValidationError

from app.models.report.dto import EntryKind, ReportResource
from app.services.fhir.utils import get_resource_type

T = TypeVar("T", bound=Bundle | MessageHeader | Observation | Organization | Patient)


def create_model(model: Type[T], data: Dict[str, Any]) -> T:
    try:
        resource = model.model_validate(data)
        return resource  # type: ignore
    except ValidationError as e:
        raise e


def create_message_header(data: Dict[str, Any]) -> MessageHeader:
    return create_model(MessageHeader, data)


def create_organization(data: Dict[str, Any]) -> Organization:
    return create_model(Organization, data)


def create_patient(data: Dict[str, Any]) -> Patient:
    return create_model(Patient, data)


def create_observation(data: Dict[str, Any]) -> Observation:
    return create_model(Observation, data)


def create_resource(data: Dict[str, Any]) -> tuple[EntryKind, ReportResource]:
    """
    Returns the entry kind and the model for a report resource. Resource types the
    submission does not look at are returned untouched as OTHER.
    """
    if "resourceType" not in data and "resource_type" not in data:
        raise ValueError("Model is not a valid FHIR model")

    resource_type = get_resource_type(data)
    match resource_type:
        case "MessageHeader":
            return EntryKind.HEADER, create_message_header(data)

        case "Organization":
            return EntryKind.ORGANIZATION, create_organization(data)

        case "Patient":
            return EntryKind.PATIENT, create_patient(data)

        case "Observation":
            return EntryKind.OBSERVATION, create_observation(data)

        case "Bundle":
            # Nested bundles are walked entry by entry by the report parser
            return EntryKind.BUNDLE, Bundle.model_construct(type=data.get("type", ""))

        case _:
            return EntryKind.OTHER, data
