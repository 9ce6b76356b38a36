from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from app.models.report.dto import ReportEntry
from app.services.api.registry_api import RegistryApi
from app.services.fhir.report_parser import parse_report


@pytest.fixture
def api() -> MagicMock:
    return MagicMock(spec=RegistryApi)


@pytest.fixture
def observation_entries(report: Dict[str, Any]) -> List[ReportEntry]:
    return parse_report(report).observations
