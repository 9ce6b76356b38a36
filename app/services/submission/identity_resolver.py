import logging

from app.models.registry.dto import CridPatient, CridRequest
from app.models.report.dto import PatientDemographics
from app.services.api.registry_api import RegistryApi, RegistryApiException
from app.services.submission.exceptions import IdentityResolutionFailure

logger = logging.getLogger(__name__)


class IdentityResolver:
    """
    Obtains the match identifier (CRID) of a patient from the record-linkage service.
    Only a single perfect match is accepted, anything else fails the submission.
    """

    def __init__(self, api: RegistryApi) -> None:
        self.__api = api

    def resolve(self, ccn: str, demographics: PatientDemographics) -> str:
        crid_request = CridRequest(
            ccn=ccn,
            patient=CridPatient(
                first_name=demographics.first_name,
                last_name=demographics.last_name,
                birth_date=demographics.birth_date,
                gender=demographics.gender,
            ),
        )

        try:
            crid_response = self.__api.put_crid(crid_request)
        except RegistryApiException as e:
            raise IdentityResolutionFailure(f"Record-linkage request failed: {e}") from e

        matches = crid_response.perfect_match
        if len(matches) == 0:
            raise IdentityResolutionFailure("Record-linkage service returned no perfect match")
        if len(matches) > 1:
            raise IdentityResolutionFailure(
                f"Record-linkage service returned {len(matches)} perfect matches"
            )

        crid = str(matches[0].crid).strip()
        if crid == "":
            raise IdentityResolutionFailure("Record-linkage service returned an empty CRID")

        logger.info(f"Resolved CRID {crid} for CCN {ccn}")
        return crid
