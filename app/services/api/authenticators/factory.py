from app.config import ConfigRegistry
from app.services.api.authenticators.authenticator import Authenticator
from app.services.api.authenticators.null_authenticator import NullAuthenticator
from app.services.api.authenticators.token_authenticator import TokenAuthenticator


class AuthenticatorFactory:
    def __init__(self, config: ConfigRegistry) -> None:
        self.__config = config

    def create_authenticator(self, credential: str | None) -> Authenticator:
        if credential is None or credential.strip() == "":
            return NullAuthenticator()

        match self.__config.authorization_scheme:
            case "raw" | "bearer":
                return TokenAuthenticator(
                    credential=credential,
                    scheme=self.__config.authorization_scheme,
                )
            case _:
                raise ValueError(
                    "incorrect value for authorization_scheme, supported types are 'raw' or 'bearer'. Please fix in app.conf"
                )
