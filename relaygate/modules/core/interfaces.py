"""Collaborator interfaces following Black Box Design principles."""

import threading
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol

from .models import Credentials, Profile, RedirectAction


class WebContext(Protocol):
    """
    Protocol for the request/response/session carrier.

    Opaque to the pipeline beyond passing it through to collaborators.
    """

    def get_request_parameter(self, name: str) -> Optional[str]:
        ...

    def get_request_header(self, name: str) -> Optional[str]:
        ...

    def get_request_method(self) -> str:
        ...

    def get_full_request_url(self) -> str:
        ...

    def get_session_attribute(self, name: str) -> Any:
        ...

    def set_session_attribute(self, name: str, value: Any) -> None:
        ...

    def set_response_status(self, code: int) -> None:
        ...

    def set_response_header(self, name: str, value: str) -> None:
        ...

    def write_response_content(self, content: str) -> None:
        ...


class InitializableWebObject(ABC):
    """
    Optional capability: one-time setup with the first request context.

    Collaborators opt in by subclassing. init() runs internal_init() at
    most once, even when the same collaborator is shared by several clients.
    """

    def __init__(self):
        self._init_lock = threading.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self, context: WebContext) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if not self._initialized:
                self.internal_init(context)
                self._initialized = True

    @abstractmethod
    def internal_init(self, context: WebContext) -> None:
        ...


class RedirectActionBuilder(ABC):
    """Produces the redirect action that starts authentication."""

    @abstractmethod
    def redirect(self, context: WebContext) -> RedirectAction:
        """
        Build the redirect action.

        Raises:
            HttpAction: When the builder must respond directly instead
        """


class CredentialsExtractor(ABC):
    """Reads credentials from the inbound request."""

    @abstractmethod
    def extract(self, context: WebContext) -> Optional[Credentials]:
        """
        Extract credentials from the request.

        Returns:
            Credentials, or None when the request carries none

        Raises:
            CredentialsError: Input present but malformed
            HttpAction: When the extractor must respond directly instead
        """


class TokenExtractor(CredentialsExtractor):
    """Extractor producing TokenCredentials."""


class UsernamePasswordExtractor(CredentialsExtractor):
    """Extractor producing UsernamePasswordCredentials."""


class Authenticator(ABC):
    """Validates credentials against a backing source."""

    @abstractmethod
    def validate(self, credentials: Credentials, context: WebContext) -> None:
        """
        Validate credentials, attaching a profile to them on success.

        Raises:
            CredentialsError: Credentials are invalid
            HttpAction: When validation needs an intermediate HTTP round-trip
        """


class TokenAuthenticator(Authenticator):
    """Authenticator accepting TokenCredentials."""


class UsernamePasswordAuthenticator(Authenticator):
    """Authenticator accepting UsernamePasswordCredentials."""


class DelegatingAuthenticator(Authenticator):
    """Authenticator wrapping another one (caching, auditing)."""

    @property
    @abstractmethod
    def delegate(self) -> Authenticator:
        ...


class ProfileCreator(ABC):
    """Turns validated credentials into a profile."""

    @abstractmethod
    def create(self, credentials: Optional[Credentials], context: WebContext) -> Optional[Profile]:
        ...
