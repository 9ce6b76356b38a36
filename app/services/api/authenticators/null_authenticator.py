from typing import Any
from app.services.api.authenticators.authenticator import Authenticator


class NullAuthenticator(Authenticator):
    """
    Sends no credential at all. Used when a submission arrives without an Authorization header,
    in which case the registry decides whether the call is allowed.
    """
    def get_authentication_header(self) -> str:
        return ""

    def get_auth(self) -> Any:
        return None
