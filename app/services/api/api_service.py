from abc import ABC
import logging
import time
from typing import Dict, Any
from requests import request, Response
from requests.exceptions import Timeout, ConnectionError
from yarl import URL

from app.services.api.authenticators.authenticator import Authenticator

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FHIR_CONTENT_TYPE = "application/fhir+json"


class HttpService(ABC):
    """
    Base class for making HTTP requests with retry logic
    """

    def __init__(
        self,
        base_url: str,
        timeout: int,
        retries: int,
        backoff: float,
        authenticator: Authenticator | None = None,
        mtls_cert: str | None = None,
        mtls_key: str | None = None,
        verify_ca: str | bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.authenticator = authenticator
        self.__mtls_cert = mtls_cert
        self.__mtls_key = mtls_key
        self.__verify_ca = verify_ca
        self.__timeout = timeout
        self.__retries = retries
        self.__backoff = backoff

    def do_request(
        self,
        method: str,
        sub_route: str | None = None,
        json: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> Response:
        """
        Perform an HTTP request. Every call opens and closes its own connection.
        """
        headers = self.make_headers(content_type)
        url = self.make_target_url(sub_route, params)

        for attempt in range(self.__retries):
            try:
                logger.info(f"Making HTTP {method} request to {url}")
                response = request(
                    method=method,
                    url=str(url),
                    headers=headers,
                    timeout=self.__timeout,
                    json=json,
                    cert=(
                        (self.__mtls_cert, self.__mtls_key)
                        if self.__mtls_cert and self.__mtls_key
                        else None
                    ),
                    verify=self.__verify_ca,
                    auth=self.authenticator.get_auth() if self.authenticator else None,
                )
                return response
            except (
                ConnectionError,
                Timeout,
            ):
                logger.warning(f"Failed to make request to {url} on attempt {attempt}")

                if attempt < self.__retries - 1:
                    logger.info(f"Retrying in {self.__backoff * (2**attempt)} seconds")
                    time.sleep(self.__backoff * (2**attempt))

        logger.error(f"Failed to make request to {url} after {self.__retries} attempts")
        raise ConnectionError(f"Failed to make request to {url} after {self.__retries} attempts")

    def make_headers(self, content_type: str = JSON_CONTENT_TYPE) -> Dict[str, Any]:
        headers = {"Content-Type": content_type, "Accept": content_type}
        if self.authenticator:
            auth_header = self.authenticator.get_authentication_header()
            if auth_header:
                headers["Authorization"] = auth_header

        return headers

    def make_target_url(
        self, sub_route: str | None = None, params: Dict[str, Any] | None = None
    ) -> URL:
        url = self.base_url
        if sub_route:
            url = f"{url}/{sub_route.lstrip('/')}"

        target = URL(url)
        if params:
            return target.with_query(params)

        return target
