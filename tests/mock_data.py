from typing import Any, Dict, Final

CCN: Final[str] = "12001"
CRID: Final[str] = "1982897480019337"
PATIENT_ID: Final[str] = "8557319952834071"

HEIGHT_URL: Final[str] = "urn:uuid:5f2b9b7e-1c1d-4c39-9d5b-0c7a3e2a9a01"
WEIGHT_URL: Final[str] = "urn:uuid:7a4d0c9e-2f3a-4b6e-8e1f-3d9b6c1f2b02"

organization: Final[Dict[str, Any]] = {
    "resourceType": "Organization",
    "id": "sender-org",
    "name": "Example transplant center",
    "identifier": [
        {"system": "http://hl7.org/fhir/sid/us-npi", "value": "1234567890"},
        {"system": "http://cibmtr.org/codesystem/transplant-center", "value": CCN},
    ],
}

message_header: Final[Dict[str, Any]] = {
    "resourceType": "MessageHeader",
    "id": "report-header",
    "eventCoding": {
        "system": "http://hl7.org/fhir/us/medmorph/CodeSystem/us-ph-messageheader-message-types",
        "code": "cancer-report-message",
    },
    "sender": {"reference": "Organization/sender-org"},
    "source": {"endpoint": "http://localhost:4444/fhir"},
}

patient: Final[Dict[str, Any]] = {
    "resourceType": "Patient",
    "id": "patient-1",
    "name": [{"family": "Doe", "given": ["John"]}],
    "gender": "male",
    "birthDate": "2000-01-01",
}

height: Final[Dict[str, Any]] = {
    "resourceType": "Observation",
    "id": "height-1",
    "status": "final",
    "code": {
        "coding": [{"system": "http://loinc.org", "code": "8302-2", "display": "Body Height"}]
    },
    "subject": {"reference": "Patient/patient-1"},
    "effectiveDateTime": "2010-01-01",
    "valueQuantity": {
        "value": 69.8,
        "unit": "cm",
        "system": "http://unitsofmeasure.org",
        "code": "cm",
    },
}

weight: Final[Dict[str, Any]] = {
    "resourceType": "Observation",
    "id": "weight-1",
    "status": "final",
    "code": {
        "coding": [{"system": "http://loinc.org", "code": "29463-7", "display": "Body Weight"}]
    },
    "subject": {"reference": "Patient/patient-1"},
    "effectiveDateTime": "2010-01-01",
    "valueQuantity": {
        "value": 68.2,
        "unit": "kg",
        "system": "http://unitsofmeasure.org",
        "code": "kg",
    },
}


def make_report(
    header: Dict[str, Any] | None = None,
    content_entries: list[Dict[str, Any]] | None = None,
) -> Dict[str, Any]:
    if content_entries is None:
        content_entries = [
            {"fullUrl": "urn:uuid:patient-1", "resource": patient},
            {"fullUrl": HEIGHT_URL, "resource": height},
            {"fullUrl": WEIGHT_URL, "resource": weight},
        ]

    return {
        "resourceType": "Bundle",
        "id": "report-1",
        "type": "message",
        "entry": [
            {"fullUrl": "urn:uuid:report-header", "resource": header or message_header},
            {
                "fullUrl": "urn:uuid:content-bundle",
                "resource": {
                    "resourceType": "Bundle",
                    "type": "collection",
                    "entry": content_entries,
                },
            },
            {"fullUrl": "urn:uuid:sender-org", "resource": organization},
        ],
    }
