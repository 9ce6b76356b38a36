from typing import Any, Dict
from unittest.mock import patch

from fastapi.testclient import TestClient

from tests.mock_api import MockRegistry, make_response
from tests.mock_data import CRID, PATIENT_ID

PATCHED_MODULE = "app.services.api.api_service.request"


def test_submit_should_return_outcome(
    api_client: TestClient, mock_registry: MockRegistry, report: Dict[str, Any]
) -> None:
    mock_registry.on("PUT", "CRID", make_response(body={"perfectMatch": [{"crid": int(CRID)}]}))
    mock_registry.on("GET", "Patient", make_response(body={"total": 0}))
    mock_registry.on(
        "POST", "Patient", make_response(status_code=201, headers={"Location": f"Patient/{PATIENT_ID}"})
    )
    mock_registry.on("POST", "Bundle", make_response(status_code=200, body=None))

    with patch(PATCHED_MODULE, new=mock_registry):
        response = api_client.post(
            "/submissions", json=report, headers={"Authorization": "secret-token"}
        )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["patient_id"] == PATIENT_ID
    assert body["patient_created"] is True
    assert body["observations_submitted"] == 2
    assert mock_registry.calls[0]["headers"]["Authorization"] == "secret-token"


def test_submit_invalid_report_should_return_422(
    api_client: TestClient, mock_registry: MockRegistry
) -> None:
    with patch(PATCHED_MODULE, new=mock_registry):
        response = api_client.post("/submissions", json={"resourceType": "Bundle", "entry": []})

    assert response.status_code == 422
    assert response.json()["failure_category"] == "validation"
    assert mock_registry.calls == []


def test_submit_identity_failure_should_return_502(
    api_client: TestClient, mock_registry: MockRegistry, report: Dict[str, Any]
) -> None:
    mock_registry.on("PUT", "CRID", make_response(body={"perfectMatch": []}))

    with patch(PATCHED_MODULE, new=mock_registry):
        response = api_client.post("/submissions", json=report)

    assert response.status_code == 502
    assert response.json()["failure_category"] == "identity-resolution"
