import logging
from typing import Any, Dict

from app.services.api.registry_api import RegistryApi, RegistryApiException
from app.services.submission.exceptions import ProcessingFailure
from app.services.submission.security import build_meta

logger = logging.getLogger(__name__)


def build_patient(ccn: str, crid: str, ccn_system: str, crid_system: str) -> Dict[str, Any]:
    """
    The registry patient only anchors observations, it carries no clinical content.
    """
    return {
        "resourceType": "Patient",
        "meta": build_meta(ccn, ccn_system),
        "text": {"status": "empty"},
        "identifier": [
            {
                "use": "official",
                "system": crid_system,
                "value": crid,
            }
        ],
    }


class PatientRegistrar:
    def __init__(self, api: RegistryApi, ccn_system: str, crid_system: str) -> None:
        self.__api = api
        self.__ccn_system = ccn_system
        self.__crid_system = crid_system

    def register(self, ccn: str, crid: str) -> str:
        patient = build_patient(ccn, crid, self.__ccn_system, self.__crid_system)
        try:
            patient_id = self.__api.create_patient(patient)
        except RegistryApiException as e:
            raise ProcessingFailure(f"Patient create failed: {e}") from e

        logger.info(f"Created patient {patient_id} for CRID {crid}")
        return patient_id
