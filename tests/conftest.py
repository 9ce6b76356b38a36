import copy
from typing import Any, Dict
from collections.abc import Generator

from fastapi import FastAPI
from fastapi.testclient import TestClient
import inject
import pytest

from app.application import create_fastapi_app
from app.config import Config, ConfigRegistry, set_config, reset_config
from app.services.api.authenticators.null_authenticator import NullAuthenticator
from app.services.api.registry_api import RegistryApi
from app.stats import MemoryClient, Statsd
from tests.mock_api import MockRegistry
from tests.mock_data import make_report
from tests.test_config import get_test_config


@pytest.fixture
def config() -> Config:
    return get_test_config()


@pytest.fixture
def registry_config(config: Config) -> ConfigRegistry:
    return config.registry


@pytest.fixture
def registry_api(registry_config: ConfigRegistry) -> RegistryApi:
    return RegistryApi(registry_config, NullAuthenticator())


@pytest.fixture
def mock_registry() -> MockRegistry:
    return MockRegistry()


@pytest.fixture
def memory_stats() -> Statsd:
    return Statsd(MemoryClient())


@pytest.fixture
def report() -> Dict[str, Any]:
    return copy.deepcopy(make_report())


@pytest.fixture
def fastapi_app(config: Config) -> Generator[FastAPI, None, None]:
    set_config(config)
    app = create_fastapi_app()
    yield app
    inject.clear()
    reset_config()


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    return TestClient(fastapi_app)
