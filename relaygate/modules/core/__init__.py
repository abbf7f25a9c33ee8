"""
Core Module - Black Box Interface

Purpose: Shared vocabulary of the authentication pipeline
Interface: Credentials, Profile, RedirectAction, collaborator ABCs, errors
Hidden: Nothing; this module is the contract every other module codes against
"""

from .exceptions import ConfigurationError, CredentialsError, HttpAction, RelaygateError
from .interfaces import (
    Authenticator,
    CredentialsExtractor,
    DelegatingAuthenticator,
    InitializableWebObject,
    ProfileCreator,
    RedirectActionBuilder,
    TokenAuthenticator,
    TokenExtractor,
    UsernamePasswordAuthenticator,
    UsernamePasswordExtractor,
    WebContext,
)
from .models import (
    Credentials,
    Profile,
    RedirectAction,
    RedirectKind,
    TokenCredentials,
    UsernamePasswordCredentials,
)

__all__ = [
    "Authenticator",
    "ConfigurationError",
    "Credentials",
    "CredentialsError",
    "CredentialsExtractor",
    "DelegatingAuthenticator",
    "HttpAction",
    "InitializableWebObject",
    "Profile",
    "ProfileCreator",
    "RedirectAction",
    "RedirectActionBuilder",
    "RedirectKind",
    "RelaygateError",
    "TokenAuthenticator",
    "TokenCredentials",
    "TokenExtractor",
    "UsernamePasswordAuthenticator",
    "UsernamePasswordCredentials",
    "UsernamePasswordExtractor",
    "WebContext",
]
