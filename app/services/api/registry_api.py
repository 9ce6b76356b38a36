import logging
from typing import Any, Dict, List

from fastapi.encoders import jsonable_encoder
from fhir.resources.R4B.bundle import Bundle
from pydantic import ValidationError
from requests import JSONDecodeError, Response
from requests.exceptions import RequestException

from app.config import ConfigRegistry
from app.models.fhir.types import BundleError
from app.models.registry.dto import CridRequest, CridResponse, SearchResult
from app.services.api.api_service import FHIR_CONTENT_TYPE, JSON_CONTENT_TYPE, HttpService
from app.services.api.authenticators.authenticator import Authenticator
from app.services.fhir.bundle.bundle_utils import get_id_from_location
from app.services.fhir.utils import collect_errors

ERR_MSG_FORMAT = "Registry API error: {}"
logger = logging.getLogger(__name__)


class RegistryApiException(Exception):
    pass


class RegistryApi(HttpService):
    """
    Client for the registry API. Every method either returns a decoded result or raises
    a RegistryApiException, transport errors included.
    """

    def __init__(self, config: ConfigRegistry, auth: Authenticator) -> None:
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout,
            retries=config.retries,
            backoff=config.backoff,
            authenticator=auth,
            mtls_cert=config.mtls_client_cert_path,
            mtls_key=config.mtls_client_key_path,
            verify_ca=config.verify_ca,
        )

    def put_crid(self, crid_request: CridRequest) -> CridResponse:
        response = self.__request(
            "PUT",
            "CRID",
            json=crid_request.model_dump(by_alias=True),
            content_type=JSON_CONTENT_TYPE,
        )
        self.__raise_for_status(response, "CRID")

        try:
            return CridResponse.model_validate(self.__json(response))
        except ValidationError as e:
            logger.error(ERR_MSG_FORMAT.format(f"malformed CRID response: {e}"))
            raise RegistryApiException(f"Malformed CRID response: {e}") from e

    def search_patients(self, security: str, identifier: str) -> SearchResult:
        return self.__search("Patient", {"_security": security, "identifier": identifier})

    def search_observations(self, identifier: str) -> SearchResult:
        return self.__search("Observation", {"identifier": identifier})

    def create_patient(self, patient: Dict[str, Any]) -> str:
        """
        Creates a Patient and returns the id the registry assigned to it, taken from
        the Location header of the response.
        """
        response = self.__request("POST", "Patient", json=patient)
        if response.status_code not in (200, 201):
            logger.error(ERR_MSG_FORMAT.format(f"Patient create returned {response.status_code}"))
            raise RegistryApiException(f"Patient create returned status {response.status_code}")

        location = response.headers.get("Location") or response.headers.get("Content-Location")
        resource_id = get_id_from_location(location, "Patient") if location else None
        if resource_id is None:
            logger.error(ERR_MSG_FORMAT.format(f"no Patient location in response: {location}"))
            raise RegistryApiException("Patient create did not return a Patient location")

        return resource_id

    def post_transaction(self, entries: List[Dict[str, Any]]) -> list[BundleError]:
        """
        Posts a transaction Bundle with the given entries. Returns the errors found in a
        transaction-response, an empty list when every entry succeeded.
        """
        bundle = {"resourceType": "Bundle", "type": "transaction", "entry": entries}
        response = self.__request("POST", "Bundle", json=bundle)
        self.__raise_for_status(response, "Bundle")

        try:
            data = response.json()
        except JSONDecodeError:
            # Some registries answer a transaction without a body
            return []

        if not isinstance(data, dict) or data.get("resourceType") != "Bundle":
            return []

        try:
            return collect_errors(Bundle.model_validate(data))
        except (ValidationError, ValueError) as e:
            logger.error(ERR_MSG_FORMAT.format(f"malformed transaction response: {e}"))
            raise RegistryApiException(f"Malformed transaction response: {e}") from e

    def __search(self, resource_type: str, params: Dict[str, Any]) -> SearchResult:
        response = self.__request("GET", resource_type, params=params)
        self.__raise_for_status(response, resource_type)

        try:
            return SearchResult.model_validate(self.__json(response))
        except ValidationError as e:
            logger.error(ERR_MSG_FORMAT.format(f"malformed {resource_type} search response: {e}"))
            raise RegistryApiException(f"Malformed {resource_type} search response: {e}") from e

    def __request(
        self,
        method: str,
        sub_route: str,
        json: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
        content_type: str = FHIR_CONTENT_TYPE,
    ) -> Response:
        try:
            return self.do_request(
                method,
                sub_route=sub_route,
                json=jsonable_encoder(json) if json is not None else None,
                params=params,
                content_type=content_type,
            )
        except RequestException as e:
            logger.error(ERR_MSG_FORMAT.format(e))
            raise RegistryApiException(str(e)) from e

    @staticmethod
    def __raise_for_status(response: Response, name: str) -> None:
        if response.status_code >= 300:
            logger.error(
                ERR_MSG_FORMAT.format(f"{name} returned {response.status_code}: {response.text}")
            )
            raise RegistryApiException(f"{name} request returned status {response.status_code}")

    @staticmethod
    def __json(response: Response) -> Any:
        try:
            return response.json()
        except JSONDecodeError as e:
            logger.error("Failed to decode JSON response: %s", response.text)
            raise RegistryApiException("Failed to decode JSON response") from e
