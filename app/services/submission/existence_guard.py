import logging

from app.services.api.registry_api import RegistryApi, RegistryApiException
from app.services.submission.exceptions import ProcessingFailure
from app.services.submission.security import security_code

logger = logging.getLogger(__name__)


class ExistenceGuard:
    """
    Checks whether the registry already holds a patient for a CRID.

    A search that executes and returns nothing is authoritative. A search that fails to
    execute is a processing failure, never "does not exist", so a transient fault cannot
    lead to a duplicate patient.
    """

    def __init__(self, api: RegistryApi, ccn_system: str) -> None:
        self.__api = api
        self.__ccn_system = ccn_system

    def find_patient(self, ccn: str, crid: str) -> str | None:
        security = f"{self.__ccn_system}|{security_code(ccn)}"
        try:
            result = self.__api.search_patients(security=security, identifier=crid)
        except RegistryApiException as e:
            raise ProcessingFailure(f"Patient existence check failed: {e}") from e

        if result.count == 0:
            logger.info(f"No patient found for CRID {crid}")
            return None

        first = result.entry[0] if result.entry else None
        if first is None or first.resource is None or not first.resource.id:
            raise ProcessingFailure(
                f"Patient search reported {result.count} results without a resource id"
            )

        logger.info(f"Found patient {first.resource.id} for CRID {crid}")
        return first.resource.id
