"""
Indirect client: the authentication pipeline orchestrator.

Composes a redirect action builder, a credentials extractor, an
authenticator and a profile creator, and owns their one-time
initialization.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from ..core import (
    Authenticator,
    ConfigurationError,
    Credentials,
    CredentialsError,
    CredentialsExtractor,
    DelegatingAuthenticator,
    HttpAction,
    InitializableWebObject,
    Profile,
    ProfileCreator,
    RedirectAction,
    RedirectActionBuilder,
    TokenAuthenticator,
    TokenExtractor,
    UsernamePasswordAuthenticator,
    UsernamePasswordExtractor,
    WebContext,
)
from ..profile import INSTANCE as DEFAULT_PROFILE_CREATOR
from .result import FailureKind, PipelineResult

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Credentials)
P = TypeVar("P", bound=Profile)

# Checked and initialized in this order
COLLABORATORS = (
    "redirect_action_builder",
    "credentials_extractor",
    "authenticator",
    "profile_creator",
)


@dataclass
class ClientConfig:
    """The four collaborators of a client, plus its name."""
    name: str = "IndirectClient"
    redirect_action_builder: Optional[RedirectActionBuilder] = None
    credentials_extractor: Optional[CredentialsExtractor] = None
    authenticator: Optional[Authenticator] = None
    profile_creator: Optional[ProfileCreator] = field(default_factory=lambda: DEFAULT_PROFILE_CREATOR)

    def validate(self) -> None:
        """
        Check every collaborator is configured.

        Raises:
            ConfigurationError: Naming the first missing collaborator
        """
        for name in COLLABORATORS:
            if getattr(self, name) is None:
                raise ConfigurationError.missing(name)

    def collaborators(self) -> List[object]:
        return [getattr(self, name) for name in COLLABORATORS]


class IndirectClient(Generic[C, P]):
    """
    Redirect-based authentication client.

    Flow for one login:
    - First request: redirect() sends the user to the credential source
    - Callback request: authenticate() extracts and validates credentials,
      then creates the profile

    Collaborators follow "first write wins": once set they cannot be
    replaced. The default profile creator is a placeholder and may be
    replaced once.
    """

    # Capabilities the configured collaborators must have; None accepts anything
    required_authenticator: Optional[type] = None
    required_extractor: Optional[type] = None

    def __init__(
        self,
        name: Optional[str] = None,
        redirect_action_builder: Optional[RedirectActionBuilder] = None,
        credentials_extractor: Optional[CredentialsExtractor] = None,
        authenticator: Optional[Authenticator] = None,
        profile_creator: Optional[ProfileCreator] = None
    ):
        self._config = ClientConfig(name=name or type(self).__name__)
        self._init_lock = threading.Lock()
        self._initialized = False

        self.set_redirect_action_builder(redirect_action_builder)
        self.set_credentials_extractor(credentials_extractor)
        self.set_authenticator(authenticator)
        self.set_profile_creator(profile_creator)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "IndirectClient":
        return cls(
            name=config.name,
            redirect_action_builder=config.redirect_action_builder,
            credentials_extractor=config.credentials_extractor,
            authenticator=config.authenticator,
            profile_creator=config.profile_creator
        )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def redirect_action_builder(self) -> Optional[RedirectActionBuilder]:
        return self._config.redirect_action_builder

    @property
    def credentials_extractor(self) -> Optional[CredentialsExtractor]:
        return self._config.credentials_extractor

    @property
    def authenticator(self) -> Optional[Authenticator]:
        return self._config.authenticator

    @property
    def profile_creator(self) -> Optional[ProfileCreator]:
        return self._config.profile_creator

    def set_redirect_action_builder(self, builder: Optional[RedirectActionBuilder]) -> None:
        if self._config.redirect_action_builder is None:
            self._config.redirect_action_builder = builder

    def set_credentials_extractor(self, extractor: Optional[CredentialsExtractor]) -> None:
        if self._config.credentials_extractor is None:
            self._config.credentials_extractor = extractor

    def set_authenticator(self, authenticator: Optional[Authenticator]) -> None:
        if self._config.authenticator is None:
            self._config.authenticator = authenticator

    def set_profile_creator(self, profile_creator: Optional[ProfileCreator]) -> None:
        if profile_creator is None:
            return
        current = self._config.profile_creator
        if current is None or current is DEFAULT_PROFILE_CREATOR:
            self._config.profile_creator = profile_creator

    def initialize(self, context: WebContext) -> None:
        """
        Initialize the client and its collaborators, at most once.

        Args:
            context: Context of the request that triggered initialization

        Raises:
            ConfigurationError: Missing or incompatible collaborator
        """
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            self.internal_init(context)
            self._initialized = True
        logger.info(f"Client {self.name} initialized")

    def internal_init(self, context: WebContext) -> None:
        self._config.validate()
        self.check_compatibility()
        for collaborator in self._config.collaborators():
            if isinstance(collaborator, InitializableWebObject):
                logger.debug(f"Initializing {collaborator!r}")
                collaborator.init(context)

    def check_compatibility(self) -> None:
        """Apply the capability guards declared by this client type."""
        self.assert_authenticator_compatible(self.required_authenticator)
        self.assert_extractor_compatible(self.required_extractor)

    def assert_authenticator_compatible(self, required: Optional[type]) -> None:
        """
        Fail fast when the authenticator lacks a required capability.

        Wrapping authenticators are unwrapped through their delegate
        before checking.

        Raises:
            ConfigurationError: Authenticator missing or of the wrong type
        """
        if required is None:
            return
        authenticator = self._config.authenticator
        if authenticator is None:
            raise ConfigurationError.missing("authenticator")

        while isinstance(authenticator, DelegatingAuthenticator):
            authenticator = authenticator.delegate

        if not isinstance(authenticator, required):
            raise ConfigurationError(
                f"Unsupported authenticator type: {type(authenticator).__name__}",
                field="authenticator"
            )

    def assert_extractor_compatible(self, required: Optional[type]) -> None:
        """
        Fail fast when the credentials extractor lacks a required capability.

        Raises:
            ConfigurationError: Extractor missing or of the wrong type
        """
        if required is None:
            return
        extractor = self._config.credentials_extractor
        if extractor is None:
            raise ConfigurationError.missing("credentials_extractor")

        if not isinstance(extractor, required):
            raise ConfigurationError(
                f"Unsupported credentials extractor type: {type(extractor).__name__}",
                field="credentials_extractor"
            )

    def build_redirect_action(self, context: WebContext) -> RedirectAction:
        self.initialize(context)
        return self._config.redirect_action_builder.redirect(context)

    def retrieve_credentials(self, context: WebContext) -> Optional[C]:
        """
        Extract and validate credentials.

        Absent and invalid credentials both yield None. HttpAction raised
        by a collaborator propagates unchanged.
        """
        self.initialize(context)
        try:
            credentials = self._config.credentials_extractor.extract(context)
            if credentials is None:
                logger.debug(f"No credentials found by client {self.name}")
                return None
            self._config.authenticator.validate(credentials, context)
            return credentials
        except CredentialsError as e:
            logger.error(f"Failed to retrieve or validate credentials: {e}")
            return None

    def retrieve_profile(self, credentials: C, context: WebContext) -> Optional[P]:
        self.initialize(context)
        profile = self._config.profile_creator.create(credentials, context)
        logger.debug(f"profile: {profile}")
        return profile

    def redirect(self, context: WebContext) -> PipelineResult[RedirectAction]:
        """
        Start authentication.

        Returns:
            REDIRECT_NOW result whose action has been written to the context
        """
        try:
            action = self.build_redirect_action(context)
        except HttpAction as signal:
            return PipelineResult.redirect_now(signal)
        return PipelineResult.redirect_now(action.perform(context))

    def authenticate(self, context: WebContext) -> PipelineResult[P]:
        """
        Run extraction, validation and profile creation for a callback request.

        Returns:
            VALUE with the profile, REDIRECT_NOW when a collaborator asked
            for an HTTP action, or FAILED with the reason
        """
        try:
            credentials = self.retrieve_credentials(context)
            if credentials is None:
                return PipelineResult.failed(FailureKind.NO_CREDENTIALS)
            profile = self.retrieve_profile(credentials, context)
        except HttpAction as signal:
            logger.debug(f"Client {self.name} interrupted by {signal!r}")
            return PipelineResult.redirect_now(signal)

        if profile is None:
            return PipelineResult.failed(FailureKind.NO_PROFILE)
        return PipelineResult.of(profile)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"redirect_action_builder={self.redirect_action_builder!r}, "
            f"credentials_extractor={self.credentials_extractor!r}, "
            f"authenticator={self.authenticator!r}, "
            f"profile_creator={self.profile_creator!r})"
        )


class IndirectTokenClient(IndirectClient[C, P]):
    """Client for token-based credentials (headers, parameters, JWTs)."""
    required_authenticator = TokenAuthenticator
    required_extractor = TokenExtractor


class IndirectUsernamePasswordClient(IndirectClient[C, P]):
    """Client for username/password credentials (HTTP Basic, login forms)."""
    required_authenticator = UsernamePasswordAuthenticator
    required_extractor = UsernamePasswordExtractor
