from abc import ABC, abstractmethod
from typing import Any


class Authenticator(ABC):
    """
    Supplies the credentials for calls to the registry API. A new authenticator is
    created for every submission, wrapping the credential of that caller.
    """

    @abstractmethod
    def get_authentication_header(self) -> str:
        """
        Returns the value for the ``Authorization`` header, or an empty string when
        no header should be sent.
        """
        ...

    @abstractmethod
    def get_auth(self) -> Any:
        """
        Returns an object for the ``auth`` parameter of ``requests``, or None.
        """
        ...
