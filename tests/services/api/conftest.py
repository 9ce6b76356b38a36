from typing import Any, Dict
import pytest

from app.config import ConfigRegistry
from app.services.api.api_service import HttpService
from app.services.api.authenticators.authenticator import Authenticator

MOCK_AUTH_TOKEN = "some-token"
MOCK_AUTH = "some-auth"


class MockAuthenticator(Authenticator):
    """
    Dummy class for testing purposes only
    """

    def get_authentication_header(self) -> str:
        return MOCK_AUTH_TOKEN

    def get_auth(self) -> Any:
        return MOCK_AUTH


@pytest.fixture()
def base_url() -> str:
    return "http://example.com"


@pytest.fixture()
def mock_sub_route() -> str:
    return "some-route"


@pytest.fixture()
def mock_params() -> Dict[str, Any]:
    return {"param": "example"}


@pytest.fixture()
def mock_body() -> Dict[str, Any]:
    return {"example": "some data"}


@pytest.fixture()
def http_service(base_url: str, registry_config: ConfigRegistry) -> HttpService:
    return HttpService(
        base_url=base_url,
        timeout=registry_config.timeout,
        backoff=0.0,
        retries=1,
    )


@pytest.fixture()
def mock_authenticator() -> MockAuthenticator:
    return MockAuthenticator()


@pytest.fixture()
def mock_auth() -> str:
    return MOCK_AUTH


@pytest.fixture()
def mock_authentication_headers() -> Dict[str, Any]:
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": MOCK_AUTH_TOKEN,
    }
