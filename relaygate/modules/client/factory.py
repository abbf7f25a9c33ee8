"""
Client Factory following Black Box Design principles.

This factory:
- Constructs the client and its collaborators based on configuration
- Wires dependencies together
- Rejects incompatible collaborator combinations at build time
"""

import logging
from typing import Optional

from ..authenticator import (
    CachingAuthenticator,
    JwtAuthenticator,
    SimpleTestTokenAuthenticator,
    SimpleTestUsernamePasswordAuthenticator,
)
from ..core import Authenticator, ConfigurationError, CredentialsExtractor, ProfileCreator, RedirectActionBuilder
from ..extractor import BasicAuthExtractor, FormExtractor, HeaderExtractor, ParameterExtractor
from ..redirect import FormRedirectActionBuilder, OidcRedirectActionBuilder, UrlRedirectActionBuilder
from ...config.provider import CacheConfig, ClientSettings, ConfigProvider, JWTConfig, OIDCConfig
from .client import IndirectClient, IndirectTokenClient, IndirectUsernamePasswordClient

logger = logging.getLogger(__name__)

TOKEN_SOURCES = ("header", "parameter")


class ClientFactory:
    """
    Factory for building an indirect client.

    This is the composition root that:
    - Creates all pipeline collaborators
    - Wires them together via dependency injection
    - Returns the configured client
    """

    @staticmethod
    def build(config_provider: ConfigProvider) -> IndirectClient:
        """
        Build the complete client.

        Args:
            config_provider: Configuration provider

        Returns:
            Client ready for initialize()

        Raises:
            ConfigurationError: Incomplete or incompatible configuration
        """
        settings = config_provider.get_client_config()
        jwt_config = config_provider.get_jwt_config()
        oidc_config = config_provider.get_oidc_config()
        cache_config = config_provider.get_cache_config()

        extractor = ClientFactory._build_extractor(settings)
        authenticator = ClientFactory._build_authenticator(settings, jwt_config, cache_config)
        redirect_builder = ClientFactory._build_redirect_builder(settings, oidc_config)

        if settings.credentials_source in TOKEN_SOURCES:
            client_class = IndirectTokenClient
        else:
            client_class = IndirectUsernamePasswordClient

        logger.info(
            f"Building {client_class.__name__} {settings.name}: "
            f"source={settings.credentials_source}, authenticator={settings.authenticator}"
        )

        client = client_class(
            name=settings.name,
            redirect_action_builder=redirect_builder,
            credentials_extractor=extractor,
            authenticator=authenticator
        )
        client.check_compatibility()
        return client

    @staticmethod
    def _build_extractor(settings: ClientSettings) -> CredentialsExtractor:
        source = settings.credentials_source
        if source == "header":
            return HeaderExtractor(settings.token_header, settings.token_prefix)
        if source == "parameter":
            return ParameterExtractor(settings.token_parameter)
        if source == "basic":
            return BasicAuthExtractor(realm=settings.realm)
        return FormExtractor()

    @staticmethod
    def _build_authenticator(
        settings: ClientSettings,
        jwt_config: JWTConfig,
        cache_config: CacheConfig
    ) -> Authenticator:
        if settings.authenticator == "jwt":
            if not jwt_config.is_configured:
                raise ConfigurationError.missing("jwt_secret")
            authenticator = JwtAuthenticator(
                jwt_config.secret,
                algorithms=jwt_config.algorithms,
                audience=jwt_config.audience,
                issuer=jwt_config.issuer
            )
        elif settings.authenticator == "test_username_password":
            authenticator = SimpleTestUsernamePasswordAuthenticator()
        else:
            authenticator = SimpleTestTokenAuthenticator()

        if cache_config.enabled:
            logger.info(f"Caching authenticator results for {cache_config.ttl_seconds}s")
            return CachingAuthenticator(authenticator, cache_config.ttl_seconds, cache_config.max_size)
        return authenticator

    @staticmethod
    def _build_redirect_builder(settings: ClientSettings, oidc_config: OIDCConfig) -> RedirectActionBuilder:
        if oidc_config.is_configured:
            if not settings.callback_url:
                raise ConfigurationError.missing("callback_url")
            logger.info(f"Redirecting to OIDC provider {oidc_config.issuer}")
            return OidcRedirectActionBuilder(oidc_config, settings.callback_url)

        if settings.credentials_source == "form":
            if not settings.callback_url:
                raise ConfigurationError.missing("callback_url")
            return FormRedirectActionBuilder(settings.callback_url)

        if not settings.login_url:
            raise ConfigurationError.missing("login_url")
        return UrlRedirectActionBuilder(settings.login_url, settings.callback_url)

    @staticmethod
    def build_for_testing(
        redirect_action_builder: Optional[RedirectActionBuilder] = None,
        credentials_extractor: Optional[CredentialsExtractor] = None,
        authenticator: Optional[Authenticator] = None,
        profile_creator: Optional[ProfileCreator] = None,
        name: str = "TestClient"
    ) -> IndirectClient:
        """
        Build a parameter-token client for testing.

        Any collaborator not given falls back to the stub setup: redirect
        to http://localhost/login, token from the "token" parameter,
        SimpleTestTokenAuthenticator.

        Returns:
            Plain IndirectClient (no capability guards) so tests can
            plug in any fake
        """
        return IndirectClient(
            name=name,
            redirect_action_builder=redirect_action_builder or UrlRedirectActionBuilder("http://localhost/login"),
            credentials_extractor=credentials_extractor or ParameterExtractor("token"),
            authenticator=authenticator or SimpleTestTokenAuthenticator(),
            profile_creator=profile_creator
        )
