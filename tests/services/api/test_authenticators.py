import pytest

from app.config import ConfigRegistry
from app.services.api.authenticators.factory import AuthenticatorFactory
from app.services.api.authenticators.null_authenticator import NullAuthenticator
from app.services.api.authenticators.token_authenticator import TokenAuthenticator


def test_token_authenticator_should_forward_raw_credential() -> None:
    auth = TokenAuthenticator("abc123", scheme="raw")

    assert auth.get_authentication_header() == "abc123"
    assert auth.get_auth() is None


def test_token_authenticator_should_prefix_bearer() -> None:
    auth = TokenAuthenticator("abc123", scheme="bearer")

    assert auth.get_authentication_header() == "Bearer abc123"


def test_token_authenticator_should_not_prefix_bearer_twice() -> None:
    auth = TokenAuthenticator("Bearer abc123", scheme="bearer")

    assert auth.get_authentication_header() == "Bearer abc123"


def test_token_authenticator_raw_keeps_existing_prefix() -> None:
    auth = TokenAuthenticator("Bearer abc123", scheme="raw")

    assert auth.get_authentication_header() == "Bearer abc123"


@pytest.mark.parametrize("credential", [None, "", "   "])
def test_factory_should_create_null_authenticator_without_credential(
    registry_config: ConfigRegistry, credential: str | None
) -> None:
    auth = AuthenticatorFactory(registry_config).create_authenticator(credential)

    assert isinstance(auth, NullAuthenticator)
    assert auth.get_authentication_header() == ""


def test_factory_should_use_configured_scheme(registry_config: ConfigRegistry) -> None:
    config = registry_config.model_copy(update={"authorization_scheme": "bearer"})

    auth = AuthenticatorFactory(config).create_authenticator("abc123")

    assert isinstance(auth, TokenAuthenticator)
    assert auth.get_authentication_header() == "Bearer abc123"
