from fastapi.testclient import TestClient


def test_index(api_client: TestClient) -> None:
    response = api_client.get("/")

    assert response.status_code == 200
    assert "/submissions" in response.text


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_registry(api_client: TestClient) -> None:
    response = api_client.get("/registry")

    assert response.status_code == 200
    assert response.json() == {
        "registry_url": "http://localhost:4444",
        "authorization_scheme": "raw",
    }
