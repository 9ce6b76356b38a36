from typing import Any
from app.services.api.authenticators.authenticator import Authenticator

BEARER_PREFIX = "Bearer "


class TokenAuthenticator(Authenticator):
    """
    Forwards the credential of the caller to the registry. Depending on the scheme the
    credential is sent as is, or prefixed with "Bearer " when it does not carry one yet.
    """
    def __init__(self, credential: str, scheme: str = "raw") -> None:
        self.__credential = credential.strip()
        self.__scheme = scheme

    def get_authentication_header(self) -> str:
        if self.__scheme == "bearer" and not self.__credential.startswith(BEARER_PREFIX):
            return f"{BEARER_PREFIX}{self.__credential}"
        return self.__credential

    def get_auth(self) -> Any:
        """
        The credential travels in the Authorization header only.
        """
        return None
